"""Unit tests for the retention scheduler."""

import asyncio
import threading
import time
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from structlog.testing import capture_logs

from laterfeed.retention.scheduler import RetentionPolicy, RetentionScheduler
from laterfeed.storage.interfaces import SourceType, StorageError


def mock_store(age=0, count=0):
    store = MagicMock()
    store.delete_older_than.return_value = age
    store.delete_beyond_limit.return_value = count
    return store


class TestRetentionPolicy:
    """Which sub-policies are active."""

    @pytest.mark.parametrize("days,max_entries", [(None, None), (0, 0), (0, None), (None, 0), (-1, -5)])
    def test_disabled(self, days, max_entries):
        policy = RetentionPolicy(days, max_entries)
        assert policy.enabled is False
        assert policy.age_limit_days is None
        assert policy.count_limit is None

    def test_age_only(self):
        policy = RetentionPolicy(retention_days=30)
        assert policy.enabled
        assert policy.age_limit_days == 30
        assert policy.count_limit is None

    def test_count_only(self):
        policy = RetentionPolicy(max_entries=100, retention_days=0)
        assert policy.enabled
        assert policy.age_limit_days is None
        assert policy.count_limit == 100


class TestRunOnce:
    """A single retention tick."""

    def test_disabled_policy_touches_nothing(self):
        store = mock_store()
        scheduler = RetentionScheduler(store, RetentionPolicy())

        assert scheduler.start() is False
        assert scheduler.running is False
        assert scheduler.run_once() == {}
        store.delete_older_than.assert_not_called()
        store.delete_beyond_limit.assert_not_called()

    def test_age_cutoff_computed_from_clock(self, clock):
        store = mock_store(age=3)
        scheduler = RetentionScheduler(store, RetentionPolicy(retention_days=7), clock=clock)

        results = scheduler.run_once()

        store.delete_older_than.assert_called_once_with(clock.now - timedelta(days=7))
        store.delete_beyond_limit.assert_not_called()
        assert results == {"age": 3}

    def test_both_policies_run_on_same_tick(self, clock):
        store = mock_store(age=1, count=2)
        scheduler = RetentionScheduler(store, RetentionPolicy(7, 10), clock=clock)

        results = scheduler.run_once()

        store.delete_beyond_limit.assert_called_once_with(10)
        assert results == {"age": 1, "count": 2}

    def test_deleted_counts_are_logged(self, clock):
        scheduler = RetentionScheduler(mock_store(age=4, count=2), RetentionPolicy(7, 10), clock=clock)

        with capture_logs() as logs:
            scheduler.run_once()

        events = {log["event"]: log for log in logs}
        assert events["entries_expired"]["count"] == 4
        assert events["entries_over_limit_deleted"]["count"] == 2

    def test_zero_counts_are_not_logged(self, clock):
        scheduler = RetentionScheduler(mock_store(), RetentionPolicy(7, 10), clock=clock)

        with capture_logs() as logs:
            scheduler.run_once()

        assert logs == []

    def test_age_failure_does_not_stop_count_policy(self, clock):
        store = mock_store(count=5)
        store.delete_older_than.side_effect = StorageError("database is locked")
        scheduler = RetentionScheduler(store, RetentionPolicy(7, 10), clock=clock)

        with capture_logs() as logs:
            results = scheduler.run_once()

        assert results == {"count": 5}
        store.delete_beyond_limit.assert_called_once_with(10)
        failures = [log for log in logs if log["event"] == "retention_age_cleanup_failed"]
        assert failures and failures[0]["log_level"] == "error"

    def test_count_failure_is_logged(self, clock):
        store = mock_store(age=1)
        store.delete_beyond_limit.side_effect = StorageError("disk I/O error")
        scheduler = RetentionScheduler(store, RetentionPolicy(7, 10), clock=clock)

        with capture_logs() as logs:
            results = scheduler.run_once()

        assert results == {"age": 1}
        assert any(log["event"] == "retention_count_cleanup_failed" for log in logs)

    def test_next_tick_runs_after_failure(self, clock):
        store = mock_store()
        store.delete_older_than.side_effect = [StorageError("locked"), 2]
        scheduler = RetentionScheduler(store, RetentionPolicy(retention_days=7), clock=clock)

        assert scheduler.run_once() == {}
        assert scheduler.run_once() == {"age": 2}

    def test_against_real_store(self, store, clock):
        for i in range(5):
            store.create(f"https://example.com/{i}", f"Entry {i}", None, SourceType.ARTICLE)
            clock.advance(days=1)
        # Entries are 5, 4, 3, 2 and 1 days old
        scheduler = RetentionScheduler(store, RetentionPolicy(3, 2), clock=clock)

        results = scheduler.run_once()

        assert results == {"age": 2, "count": 1}
        assert [e.title for e in store.fetch_all()] == ["Entry 4", "Entry 3"]


@pytest.mark.asyncio
class TestScheduling:
    """Start/stop behaviour on the event loop."""

    async def test_first_tick_runs_on_start(self):
        store = mock_store()
        scheduler = RetentionScheduler(store, RetentionPolicy(retention_days=7))

        assert scheduler.start() is True
        try:
            for _ in range(100):
                if store.delete_older_than.called:
                    break
                await asyncio.sleep(0.02)
        finally:
            await scheduler.stop()

        store.delete_older_than.assert_called_once()
        assert scheduler.running is False

    async def test_start_is_idempotent(self):
        scheduler = RetentionScheduler(mock_store(), RetentionPolicy(max_entries=5))

        assert scheduler.start() is True
        first = scheduler.scheduler
        assert scheduler.start() is True
        assert scheduler.scheduler is first

        await scheduler.stop()

    async def test_stop_waits_for_in_flight_tick(self):
        entered = threading.Event()
        finished = threading.Event()

        def slow_delete(cutoff):
            entered.set()
            time.sleep(0.2)
            finished.set()
            return 1

        store = mock_store(count=0)
        store.delete_older_than.side_effect = slow_delete
        scheduler = RetentionScheduler(store, RetentionPolicy(7, 10))

        scheduler.start()
        assert await asyncio.to_thread(entered.wait, 2)

        await scheduler.stop()

        assert finished.is_set()
        # Both sub-policies of the interrupted tick completed
        store.delete_beyond_limit.assert_called_once_with(10)

    async def test_stop_without_start_is_noop(self):
        scheduler = RetentionScheduler(mock_store(), RetentionPolicy())
        await scheduler.stop()
        assert scheduler.running is False

    async def test_tick_after_stop_is_skipped(self):
        store = mock_store()
        scheduler = RetentionScheduler(store, RetentionPolicy(retention_days=7))
        scheduler.start()
        await scheduler.stop()
        store.reset_mock()

        assert await scheduler.tick() == {}
        store.delete_older_than.assert_not_called()
