"""Page ingestion - fetching remote pages and extracting their metadata."""

from .interfaces import PageMetadata, PageFetchError, OEmbedError, FetcherInterface, ResolverInterface
from .fetcher import PageFetcher
from .oembed import VideoOEmbedClient, is_video_url
from .extractor import MetadataExtractor
from .resolver import ContentMetadataResolver

__all__ = [
    "PageMetadata", "PageFetchError", "OEmbedError",
    "FetcherInterface", "ResolverInterface", "PageFetcher",
    "VideoOEmbedClient", "is_video_url", "MetadataExtractor",
    "ContentMetadataResolver",
]
