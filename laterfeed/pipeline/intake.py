"""Entry intake: turn a caller's URL into a stored entry."""

import asyncio
from typing import Optional

import structlog

from ..ingestion.interfaces import PageMetadata, ResolverInterface
from ..storage.interfaces import Entry, EntryStoreInterface, SourceType

logger = structlog.get_logger()


def _present(value: Optional[str]) -> Optional[str]:
    """Treat blank caller input as missing; keep anything else as given."""
    if value is None or not value.strip():
        return None
    return value


class EntryIntake:
    """Resolves missing fields for a new entry and stores it.

    Caller-supplied fields always win. The resolver is consulted only when
    the title or the summary is missing, and whatever it cannot find stays
    missing. The title finally falls back to the URL itself; the summary
    has no fallback. When the caller gives no source type it is detected
    from the URL host.
    """

    def __init__(self, store: EntryStoreInterface, resolver: ResolverInterface):
        self.store = store
        self.resolver = resolver

    async def add(
        self,
        url: str,
        title: Optional[str] = None,
        summary: Optional[str] = None,
        source_type: Optional[SourceType] = None,
    ) -> Entry:
        """Create an entry for url. Raises StorageError if it cannot be saved."""
        title = _present(title)
        summary = _present(summary)

        metadata = PageMetadata()
        if title is None or summary is None:
            metadata = await self.resolver.resolve(url)

        entry = await asyncio.to_thread(
            self.store.create,
            url,
            title or metadata.title or url,
            summary or metadata.summary,
            source_type or SourceType.detect(url),
        )

        logger.info(
            "entry_added",
            id=entry.id,
            url=url[:100],
            source_type=entry.source_type.value,
            enriched=not metadata.is_empty,
        )
        return entry
