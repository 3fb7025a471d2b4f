"""Periodic retention cleanup for stored entries.

Two independent policies run on the same tick:
- entries older than retention_days are deleted
- entries beyond the max_entries most recent are deleted

A policy configured as None or 0 is disabled. With both disabled the
scheduler never starts.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..storage.interfaces import EntryStoreInterface

logger = structlog.get_logger()

DEFAULT_INTERVAL_HOURS = 12.0
JOB_ID = "retention_cleanup"


@dataclass(frozen=True)
class RetentionPolicy:
    """Retention settings; non-positive values disable a policy."""
    retention_days: Optional[int] = None
    max_entries: Optional[int] = None

    @property
    def age_limit_days(self) -> Optional[int]:
        if self.retention_days and self.retention_days > 0:
            return self.retention_days
        return None

    @property
    def count_limit(self) -> Optional[int]:
        if self.max_entries and self.max_entries > 0:
            return self.max_entries
        return None

    @property
    def enabled(self) -> bool:
        return self.age_limit_days is not None or self.count_limit is not None


class RetentionScheduler:
    """Runs the retention policies against an entry store on a fixed interval."""

    def __init__(
        self,
        store: EntryStoreInterface,
        policy: RetentionPolicy,
        interval_hours: float = DEFAULT_INTERVAL_HOURS,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.store = store
        self.policy = policy
        self.interval_hours = interval_hours
        self.clock = clock
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._in_flight: Optional[asyncio.Future] = None
        self._stopping = False

    @property
    def running(self) -> bool:
        return self.scheduler is not None

    def start(self) -> bool:
        """Schedule the cleanup job. Returns False when no policy is enabled."""
        if not self.policy.enabled:
            logger.info("retention_disabled")
            return False
        if self.scheduler is not None:
            return True

        self._stopping = False
        self.scheduler = AsyncIOScheduler(timezone=timezone.utc)
        self.scheduler.add_job(
            self.tick,
            IntervalTrigger(hours=self.interval_hours, timezone=timezone.utc),
            id=JOB_ID,
            name="Delete expired entries",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            # First run happens immediately, then every interval
            next_run_time=datetime.now(timezone.utc),
        )
        self.scheduler.start()

        logger.info(
            "retention_started",
            retention_days=self.policy.age_limit_days,
            max_entries=self.policy.count_limit,
            interval_hours=self.interval_hours,
        )
        return True

    async def stop(self) -> None:
        """Stop scheduling and wait for an in-flight tick to finish."""
        if self.scheduler is None:
            return

        self._stopping = True
        # Cancels the job task, not the worker thread behind it
        self.scheduler.shutdown(wait=False)
        self.scheduler = None

        if self._in_flight is not None and not self._in_flight.done():
            await self._in_flight
        logger.info("retention_stopped")

    async def tick(self) -> Dict[str, int]:
        """Run both policies once. Errors are logged, never raised."""
        if self._stopping:
            return {}
        if self._in_flight is None or self._in_flight.done():
            self._in_flight = asyncio.ensure_future(asyncio.to_thread(self.run_once))
        return await asyncio.shield(self._in_flight)

    def run_once(self) -> Dict[str, int]:
        """Apply each enabled policy; return deleted counts per policy that succeeded."""
        results: Dict[str, int] = {}

        days = self.policy.age_limit_days
        if days is not None:
            try:
                cutoff = self.clock() - timedelta(days=days)
                count = self.store.delete_older_than(cutoff)
                results["age"] = count
                if count:
                    logger.info("entries_expired", count=count, days=days)
            except Exception as e:
                logger.error("retention_age_cleanup_failed", days=days, error=str(e))

        max_entries = self.policy.count_limit
        if max_entries is not None:
            try:
                count = self.store.delete_beyond_limit(max_entries)
                results["count"] = count
                if count:
                    logger.info("entries_over_limit_deleted", count=count, max_entries=max_entries)
            except Exception as e:
                logger.error("retention_count_cleanup_failed", max_entries=max_entries, error=str(e))

        return results
