"""Retention policy enforcement."""

from .scheduler import RetentionPolicy, RetentionScheduler

__all__ = ["RetentionPolicy", "RetentionScheduler"]
