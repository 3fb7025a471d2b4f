"""Factory functions to create storage instances.

The database URL is taken from DATABASE_URL when set (the convention on most
hosting platforms), then from LATERFEED_DATABASE_URL via settings, falling
back to a SQLite file under data/.
"""

import os
from functools import lru_cache

import structlog

logger = structlog.get_logger()


def get_database_url() -> str:
    """Get database URL from environment, with fallback to SQLite."""
    url = os.environ.get('DATABASE_URL')
    if url:
        return url

    from ..config.settings import settings
    return settings.database_url


@lru_cache(maxsize=1)
def get_entry_store():
    """Get the shared entry store instance."""
    from .database import EntryStore

    url = get_database_url()
    logger.info("using_entry_store", url=url[:40] + "...")
    return EntryStore(url)


def clear_cache():
    """Clear cached instances (useful for testing)."""
    get_entry_store.cache_clear()
