"""Interface definitions for page ingestion."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class PageMetadata:
    """Fields extracted from a remote page. Never persisted."""
    title: Optional[str] = None
    summary: Optional[str] = None  # summary or body, depending on ContentMode

    @property
    def is_empty(self) -> bool:
        return self.title is None and self.summary is None


class PageFetchError(Exception):
    """Raised when a page cannot be downloaded."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"{url}: {reason}")


class OEmbedError(Exception):
    """Raised when an oEmbed endpoint does not return a usable title."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"{url}: {reason}")


class FetcherInterface:
    """Interface for page fetching."""

    async def fetch(self, url: str) -> str:
        """Return the raw document at url, or raise PageFetchError."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release network resources."""
        raise NotImplementedError


class ResolverInterface:
    """Interface for metadata resolution."""

    async def resolve(self, url: str) -> PageMetadata:
        """Return whatever metadata could be found for url. Never raises."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release network resources."""
        raise NotImplementedError
