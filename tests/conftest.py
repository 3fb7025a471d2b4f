"""Pytest configuration and shared fixtures."""

import pytest
import tempfile
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))


class FakeClock:
    """Manually advanced clock for deterministic timestamps."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def temp_db():
    """Provide a temporary database file."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name
    yield f"sqlite:///{db_path}"
    # Cleanup
    try:
        os.unlink(db_path)
    except FileNotFoundError:
        pass


@pytest.fixture
def clock():
    """Clock starting at a fixed instant."""
    return FakeClock(datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(temp_db, clock):
    """EntryStore on a temporary database with a fake clock."""
    from laterfeed.storage.database import EntryStore
    entry_store = EntryStore(temp_db, clock=clock)
    yield entry_store
    entry_store.close()


@pytest.fixture
def article_html():
    """A page with every metadata source present."""
    return """<html><head>
        <title>Page Title</title>
        <meta property="og:title" content="OG Title">
        <meta property="og:description" content="OG Desc">
        <meta name="description" content="Meta Desc">
        </head><body><article><p>Article content</p></article></body></html>"""
