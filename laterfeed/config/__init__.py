"""Runtime configuration."""

from .settings import ContentMode, Settings, settings

__all__ = ["ContentMode", "Settings", "settings"]
