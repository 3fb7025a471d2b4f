"""Database operations for entry storage."""

from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import aliased, sessionmaker

from .interfaces import Entry, EntryStoreInterface, SourceType, StorageError
from .models import EntryModel, init_db
from ..config.settings import settings

logger = structlog.get_logger()


def utcnow() -> datetime:
    """Current time as naive UTC, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_storage_time(value: datetime) -> datetime:
    """Normalise an aware or naive-UTC datetime to naive UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class EntryStore(EntryStoreInterface):
    """SQLAlchemy-backed storage for entries.

    Every listing and eviction orders by created_at descending with ties
    broken by insertion order (the later insert counts as newer).
    """

    def __init__(
        self,
        database_url: str = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        if database_url is None:
            database_url = settings.database_url

        # Ensure data directory exists
        if database_url.startswith("sqlite:///"):
            db_path = database_url.replace("sqlite:///", "")
            if db_path and db_path != ":memory:":
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.engine = init_db(database_url)
        self.Session = sessionmaker(bind=self.engine, expire_on_commit=False)
        self.clock = clock

    @contextmanager
    def _session(self, operation: str):
        """Session scope that commits, or rolls back and raises StorageError."""
        session = self.Session()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("storage_operation_failed", operation=operation, error=str(e))
            raise StorageError(f"{operation} failed: {e}") from e
        finally:
            session.close()

    @staticmethod
    def _newest_first():
        return (EntryModel.created_at.desc(), EntryModel.id.desc())

    def create(
        self,
        url: str,
        title: str,
        summary: Optional[str],
        source_type: SourceType,
    ) -> Entry:
        """Insert an entry and return it with its assigned id and timestamp."""
        with self._session("create") as session:
            model = EntryModel(
                url=url,
                title=title,
                summary=summary,
                source_type=source_type.code,
                created_at=to_storage_time(self.clock()),
            )
            session.add(model)
            session.flush()
            entry = self._model_to_entry(model)

        logger.debug("entry_saved", id=entry.id, url=url[:50])
        return entry

    def fetch_all(self) -> List[Entry]:
        """Get every entry, newest first."""
        with self._session("fetch_all") as session:
            models = session.query(EntryModel)\
                .order_by(*self._newest_first())\
                .all()
            return [self._model_to_entry(m) for m in models]

    def fetch_latest(self, limit: int) -> List[Entry]:
        """Get the limit newest entries."""
        if limit <= 0:
            return []

        with self._session("fetch_latest") as session:
            models = session.query(EntryModel)\
                .order_by(*self._newest_first())\
                .limit(limit)\
                .all()
            return [self._model_to_entry(m) for m in models]

    def get(self, entry_id: int) -> Optional[Entry]:
        """Get entry by id."""
        with self._session("get") as session:
            model = session.get(EntryModel, entry_id)
            return self._model_to_entry(model) if model else None

    def count(self) -> int:
        """Number of stored entries."""
        with self._session("count") as session:
            return session.query(EntryModel).count()

    def delete_older_than(self, cutoff: datetime) -> int:
        """Delete entries created strictly before cutoff, return count deleted."""
        with self._session("delete_older_than") as session:
            deleted = session.query(EntryModel)\
                .filter(EntryModel.created_at < to_storage_time(cutoff))\
                .delete(synchronize_session=False)

        logger.debug("entries_deleted_by_age", count=deleted, cutoff=cutoff.isoformat())
        return deleted

    def delete_beyond_limit(self, max_entries: int) -> int:
        """Delete everything but the max_entries newest entries, return count deleted."""
        # Aliased so the subquery is not correlated with the DELETE target
        recent = aliased(EntryModel)
        keep = select(recent.id)\
            .order_by(recent.created_at.desc(), recent.id.desc())\
            .limit(max(max_entries, 0))

        with self._session("delete_beyond_limit") as session:
            deleted = session.query(EntryModel)\
                .filter(EntryModel.id.not_in(keep))\
                .delete(synchronize_session=False)

        logger.debug("entries_deleted_by_count", count=deleted, max_entries=max_entries)
        return deleted

    def delete_by_id(self, entry_id: int) -> bool:
        """Delete an entry by id. Returns False if it did not exist."""
        with self._session("delete_by_id") as session:
            deleted = session.query(EntryModel)\
                .filter(EntryModel.id == entry_id)\
                .delete(synchronize_session=False)

        if deleted:
            logger.info("entry_deleted", id=entry_id)
        return deleted > 0

    def close(self) -> None:
        """Dispose of the connection pool."""
        self.engine.dispose()

    def _model_to_entry(self, model: EntryModel) -> Entry:
        """Convert database model to Entry."""
        return Entry(
            id=model.id,
            url=model.url,
            title=model.title,
            summary=model.summary,
            source_type=SourceType.from_code(model.source_type),
            created_at=model.created_at.replace(tzinfo=timezone.utc),
        )
