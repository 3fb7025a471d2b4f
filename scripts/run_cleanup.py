#!/usr/bin/env python3
"""Apply the retention policy once, outside the server's schedule."""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from laterfeed.config.settings import settings
from laterfeed.logging_config import setup_logging
from laterfeed.retention.scheduler import RetentionPolicy, RetentionScheduler
from laterfeed.storage.factory import get_entry_store


def main(argv=None):
    parser = argparse.ArgumentParser(description="Delete expired laterfeed entries")
    parser.add_argument("--days", type=int, default=settings.retention_days,
                        help="Delete entries older than this many days")
    parser.add_argument("--max-entries", type=int, default=settings.max_entries,
                        help="Keep only this many of the newest entries")
    args = parser.parse_args(argv)

    setup_logging(settings.log_level)

    policy = RetentionPolicy(retention_days=args.days, max_entries=args.max_entries)
    if not policy.enabled:
        print("No retention policy configured; nothing to do.")
        return 0

    store = get_entry_store()
    before = store.count()
    results = RetentionScheduler(store, policy).run_once()
    store.close()

    print(f"\nEntries before: {before}")
    if "age" in results:
        print(f"  Older than {policy.age_limit_days} days: {results['age']} deleted")
    if "count" in results:
        print(f"  Beyond newest {policy.count_limit}: {results['count']} deleted")
    print(f"Entries after:  {before - sum(results.values())}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
