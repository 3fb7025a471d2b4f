"""Application settings with environment variable support."""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_BASE_DIR = Path(__file__).parent.parent.parent.resolve()


class ContentMode(str, Enum):
    """Which shape of page text a deployment stores alongside each entry."""
    SUMMARY = "summary"  # short plain-text description
    BODY = "body"        # article markup, rendered as HTML content in the feed


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LATERFEED_",  # LATERFEED_DATABASE_URL, LATERFEED_AUTH_TOKEN, etc.
    )

    # Database
    database_url: str = f"sqlite:///{_BASE_DIR / 'data' / 'laterfeed.db'}"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    base_url: str = "http://localhost:3000"
    auth_token: str = ""
    cors_allowed_origins: List[str] = Field(default_factory=list)
    log_level: str = "INFO"

    # Retention (zero or unset disables a policy)
    retention_days: Optional[int] = Field(default=None, ge=0)
    max_entries: Optional[int] = Field(default=None, ge=0)
    retention_interval_hours: float = 12.0

    # Ingestion
    fetch_timeout_seconds: float = 5.0
    user_agent: str = "Laterfeed/1.0"
    content_mode: ContentMode = ContentMode.SUMMARY

    # Feed
    feed_entry_limit: int = 50

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


settings = Settings()
