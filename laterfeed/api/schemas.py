"""Request and response models for the HTTP API."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from ..ingestion.oembed import url_host
from ..storage.interfaces import Entry, SourceType


class AddEntryRequest(BaseModel):
    url: str
    title: Optional[str] = None
    summary: Optional[str] = None
    source_type: Optional[SourceType] = None

    @field_validator("url")
    @classmethod
    def _must_be_web_url(cls, value: str) -> str:
        value = value.strip()
        if not url_host(value):
            raise ValueError("url must be an absolute http(s) URL")
        return value


class EntryResponse(BaseModel):
    id: int
    url: str
    title: str
    summary: Optional[str] = None
    source_type: SourceType
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: Entry) -> "EntryResponse":
        return cls(
            id=entry.id,
            url=entry.url,
            title=entry.title,
            summary=entry.summary,
            source_type=entry.source_type,
            created_at=entry.created_at,
        )


class ListEntriesResponse(BaseModel):
    entries: List[EntryResponse]
