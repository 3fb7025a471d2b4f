"""Title and summary/body extraction from parsed HTML documents.

All functions are pure: they take a BeautifulSoup document and return the
first non-empty (after trimming) candidate of an ordered fallback chain, or
None when every candidate is missing or blank.
"""

from typing import Callable, Iterable, Optional

from bs4 import BeautifulSoup

from ..config.settings import ContentMode


def parse_document(html: str) -> BeautifulSoup:
    """Parse raw HTML into a document."""
    return BeautifulSoup(html, "html.parser")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def _first(candidates: Iterable[Callable[[], Optional[str]]]) -> Optional[str]:
    # Candidates are evaluated lazily, in order
    for candidate in candidates:
        value = _clean(candidate())
        if value is not None:
            return value
    return None


def _meta_content(document: BeautifulSoup, **attrs) -> Optional[str]:
    """Content attribute of the first <meta> matching attrs."""
    tag = document.find("meta", attrs=attrs)
    if tag is None:
        return None
    content = tag.get("content")
    return content if isinstance(content, str) else None


def _og_title(document: BeautifulSoup) -> Optional[str]:
    return _meta_content(document, property="og:title")


def _og_description(document: BeautifulSoup) -> Optional[str]:
    return _meta_content(document, property="og:description")


def _meta_description(document: BeautifulSoup) -> Optional[str]:
    return _meta_content(document, name="description")


def _title_element(document: BeautifulSoup) -> Optional[str]:
    tag = document.find("title")
    return tag.get_text() if tag is not None else None


def _article_markup(document: BeautifulSoup) -> Optional[str]:
    tag = document.find("article")
    return tag.decode_contents() if tag is not None else None


def extract_title(document: BeautifulSoup) -> Optional[str]:
    """og:title, then <title>."""
    return _first([
        lambda: _og_title(document),
        lambda: _title_element(document),
    ])


def extract_summary(document: BeautifulSoup) -> Optional[str]:
    """og:description, then <meta name="description">."""
    return _first([
        lambda: _og_description(document),
        lambda: _meta_description(document),
    ])


def extract_body(document: BeautifulSoup) -> Optional[str]:
    """Inner markup of the first <article>, then the summary chain."""
    return _first([
        lambda: _article_markup(document),
        lambda: _og_description(document),
        lambda: _meta_description(document),
    ])


def extract_summary_or_body(document: BeautifulSoup, mode: ContentMode) -> Optional[str]:
    """Apply whichever chain the deployment's content mode selects."""
    if mode == ContentMode.BODY:
        return extract_body(document)
    return extract_summary(document)


class MetadataExtractor:
    """Bundles the extraction rules for one content mode."""

    def __init__(self, content_mode: ContentMode = ContentMode.SUMMARY):
        self.content_mode = content_mode

    def extract_title(self, document: BeautifulSoup) -> Optional[str]:
        return extract_title(document)

    def extract_summary_or_body(self, document: BeautifulSoup) -> Optional[str]:
        return extract_summary_or_body(document, self.content_mode)
