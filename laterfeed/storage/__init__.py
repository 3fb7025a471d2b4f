"""Database storage and models."""

from .interfaces import Entry, SourceType, StorageError, EntryStoreInterface
from .database import EntryStore
from .models import EntryModel, init_db

__all__ = ["Entry", "SourceType", "StorageError", "EntryStoreInterface", "EntryStore", "EntryModel", "init_db"]
