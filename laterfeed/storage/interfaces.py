"""Interface definitions for entry storage."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

from ..ingestion.oembed import is_video_url


class SourceType(str, Enum):
    """Kind of content an entry points at."""
    ARTICLE = "article"
    VIDEO = "video"

    @property
    def code(self) -> int:
        """Integer stored in the database."""
        return _CODES[self]

    @classmethod
    def from_code(cls, code) -> "SourceType":
        """Decode a stored integer. Anything unrecognised is an ARTICLE."""
        return _BY_CODE.get(code, cls.ARTICLE)

    @classmethod
    def detect(cls, url: str) -> "SourceType":
        """Classify url by its host."""
        return cls.VIDEO if is_video_url(url) else cls.ARTICLE


_CODES = {SourceType.ARTICLE: 0, SourceType.VIDEO: 1}
_BY_CODE = {code: source_type for source_type, code in _CODES.items()}


@dataclass
class Entry:
    """A saved link."""
    id: int
    url: str
    title: str
    summary: Optional[str]
    source_type: SourceType
    created_at: datetime  # timezone-aware UTC


class StorageError(Exception):
    """The underlying database failed or is unavailable."""


class EntryStoreInterface:
    """Interface for entry storage."""

    def create(
        self,
        url: str,
        title: str,
        summary: Optional[str],
        source_type: SourceType,
    ) -> Entry:
        """Insert an entry, stamping id and created_at."""
        raise NotImplementedError

    def fetch_all(self) -> List[Entry]:
        """All entries, newest first."""
        raise NotImplementedError

    def fetch_latest(self, limit: int) -> List[Entry]:
        """The limit newest entries."""
        raise NotImplementedError

    def delete_older_than(self, cutoff: datetime) -> int:
        """Delete entries created strictly before cutoff."""
        raise NotImplementedError

    def delete_beyond_limit(self, max_entries: int) -> int:
        """Keep the max_entries newest entries, delete the rest."""
        raise NotImplementedError

    def delete_by_id(self, entry_id: int) -> bool:
        """Delete one entry; return whether it existed."""
        raise NotImplementedError
