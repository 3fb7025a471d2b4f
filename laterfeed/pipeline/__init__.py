"""Pipeline orchestration - entry intake."""

from .intake import EntryIntake

__all__ = ["EntryIntake"]
