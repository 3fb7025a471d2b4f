"""Atom feed rendering for saved entries."""

import re
from datetime import datetime, timezone
from typing import Optional, Sequence
from xml.etree import ElementTree as ET

from ..config.settings import ContentMode
from ..storage.interfaces import Entry

ATOM_NAMESPACE = "http://www.w3.org/2005/Atom"
ATOM_CONTENT_TYPE = "application/atom+xml; charset=utf-8"
FEED_TITLE = "Laterfeed"

# Anything outside the XML 1.0 Char production
_XML_ILLEGAL = re.compile("[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def xml_text(value: str) -> str:
    """value with characters XML cannot carry removed."""
    return _XML_ILLEGAL.sub("", value)


def format_timestamp(value: datetime) -> str:
    """RFC 3339 timestamp in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class FeedSerializer:
    """Renders entries as an Atom 1.0 document.

    Entries must already be sorted newest first and bounded by the caller;
    the serializer neither sorts nor truncates.
    """

    def __init__(self, content_mode: ContentMode = ContentMode.SUMMARY):
        self.content_mode = content_mode

    def render(
        self,
        entries: Sequence[Entry],
        base_url: str,
        now: Optional[datetime] = None,
    ) -> str:
        """Build the feed XML for entries."""
        base_url = base_url.rstrip("/")
        feed_url = f"{base_url}/feed"

        if entries:
            updated = entries[0].created_at
        else:
            updated = now or datetime.now(timezone.utc)

        feed = ET.Element("feed", {"xmlns": ATOM_NAMESPACE})
        ET.SubElement(feed, "title").text = FEED_TITLE
        ET.SubElement(feed, "id").text = feed_url
        ET.SubElement(feed, "updated").text = format_timestamp(updated)
        ET.SubElement(feed, "link", {
            "href": feed_url,
            "rel": "self",
            "type": "application/atom+xml",
        })
        ET.SubElement(feed, "link", {"href": base_url, "rel": "alternate"})

        for entry in entries:
            feed.append(self._entry_element(entry))

        xml = ET.tostring(feed, encoding="unicode")
        return f'<?xml version="1.0" encoding="utf-8"?>\n{xml}'

    def _entry_element(self, entry: Entry) -> ET.Element:
        element = ET.Element("entry")
        ET.SubElement(element, "title").text = xml_text(entry.title)
        ET.SubElement(element, "id").text = xml_text(entry.url)
        ET.SubElement(element, "updated").text = format_timestamp(entry.created_at)
        ET.SubElement(element, "link", {"href": xml_text(entry.url), "rel": "alternate"})

        if entry.summary is not None:
            if self.content_mode == ContentMode.BODY:
                ET.SubElement(element, "content", {"type": "html"}).text = xml_text(entry.summary)
            else:
                ET.SubElement(element, "summary").text = xml_text(entry.summary)

        return element


def render_feed(
    entries: Sequence[Entry],
    base_url: str,
    content_mode: ContentMode = ContentMode.SUMMARY,
) -> str:
    """Convenience wrapper around FeedSerializer.render."""
    return FeedSerializer(content_mode).render(entries, base_url)
