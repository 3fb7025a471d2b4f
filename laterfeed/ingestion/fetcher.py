"""Async page fetcher with a bounded timeout."""

import asyncio
import time
from typing import Optional

import aiohttp
import structlog

from .interfaces import FetcherInterface, PageFetchError

logger = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_USER_AGENT = "Laterfeed/1.0"


class HttpClient:
    """Owns one lazily created aiohttp session with a total timeout and fixed headers."""

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self._get_session()
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                headers={"User-Agent": self.user_agent},
            )
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None


class PageFetcher(HttpClient, FetcherInterface):
    """Downloads a single page with one GET request.

    Non-2xx responses, timeouts and connection failures all raise
    PageFetchError.
    """

    async def fetch(self, url: str) -> str:
        """Fetch the document at url."""
        session = await self._get_session()
        start_time = time.time()

        try:
            async with session.get(url) as response:
                if response.status >= 400:
                    raise PageFetchError(url, f"HTTP {response.status}", status=response.status)
                html = await response.text()
        except asyncio.TimeoutError as e:
            raise PageFetchError(url, f"timed out after {self.timeout_seconds}s") from e
        except (aiohttp.ClientError, ValueError, UnicodeDecodeError) as e:
            # ValueError covers URLs aiohttp refuses to request
            raise PageFetchError(url, str(e) or type(e).__name__) from e

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.debug("page_fetched", url=url[:100], bytes=len(html), time_ms=elapsed_ms)
        return html
