"""Resolve page metadata for a URL, degrading to empty fields on failure."""

import asyncio
from typing import Optional

import structlog

from .extractor import MetadataExtractor, parse_document
from .fetcher import PageFetcher
from .interfaces import PageMetadata, ResolverInterface
from .oembed import VideoOEmbedClient, is_video_url
from ..config.settings import ContentMode

logger = structlog.get_logger()


class ContentMetadataResolver(ResolverInterface):
    """Fetches a page and extracts its title and summary or body.

    Video URLs additionally query the platform's oEmbed endpoint, because
    their pages often carry a generic title. The oEmbed lookup and the page
    scrape run concurrently and both are always awaited.
    """

    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        oembed: Optional[VideoOEmbedClient] = None,
        extractor: Optional[MetadataExtractor] = None,
        content_mode: ContentMode = ContentMode.SUMMARY,
    ):
        self.fetcher = fetcher or PageFetcher()
        self.oembed = oembed or VideoOEmbedClient()
        self.extractor = extractor or MetadataExtractor(content_mode)

    async def close(self) -> None:
        await self.fetcher.close()
        await self.oembed.close()

    async def resolve(self, url: str) -> PageMetadata:
        """Return metadata for url. Never raises."""
        if is_video_url(url):
            return await self._resolve_video(url)

        try:
            return await self._scrape(url)
        except Exception as e:
            logger.warning("metadata_fetch_failed", url=url[:100], error=str(e))
            return PageMetadata()

    async def _resolve_video(self, url: str) -> PageMetadata:
        oembed_result, scrape_result = await asyncio.gather(
            self.oembed.fetch_title(url),
            self._scrape(url),
            return_exceptions=True,
        )

        if isinstance(scrape_result, BaseException):
            logger.warning("metadata_fetch_failed", url=url[:100], error=str(scrape_result))
            scraped = PageMetadata()
        else:
            scraped = scrape_result

        if isinstance(oembed_result, BaseException):
            logger.warning("oembed_fetch_failed", url=url[:100], error=str(oembed_result))
            title = scraped.title
        else:
            title = oembed_result

        return PageMetadata(title=title, summary=scraped.summary)

    async def _scrape(self, url: str) -> PageMetadata:
        html = await self.fetcher.fetch(url)
        document = parse_document(html)
        return PageMetadata(
            title=self.extractor.extract_title(document),
            summary=self.extractor.extract_summary_or_body(document),
        )
