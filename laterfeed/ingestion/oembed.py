"""Video platform detection and oEmbed title lookup."""

from typing import Optional
from urllib.parse import urlsplit

import structlog

from .fetcher import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT, HttpClient
from .interfaces import OEmbedError

logger = structlog.get_logger()

# Exact hosts only; subdomains and look-alike suffixes are not video.
VIDEO_HOSTS = frozenset({
    "youtube.com",
    "www.youtube.com",
    "m.youtube.com",
    "music.youtube.com",
    "youtu.be",
})

YOUTUBE_OEMBED_URL = "https://www.youtube.com/oembed"


def url_host(url: str) -> Optional[str]:
    """Parsed host component of url, or None when it has none."""
    try:
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https"):
            return None
        return parts.hostname
    except ValueError:
        return None


def is_video_url(url: str) -> bool:
    """Whether url points at one of the known video platforms."""
    return url_host(url) in VIDEO_HOSTS


class VideoOEmbedClient(HttpClient):
    """Fetches authoritative video titles from the platform's oEmbed endpoint."""

    def __init__(
        self,
        endpoint: str = YOUTUBE_OEMBED_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        super().__init__(timeout_seconds, user_agent)
        self.endpoint = endpoint

    async def fetch_title(self, url: str) -> str:
        """Return the video title for url, or raise OEmbedError."""
        session = await self._get_session()
        params = {"url": url, "format": "json"}

        try:
            async with session.get(self.endpoint, params=params) as resp:
                if resp.status != 200:
                    raise OEmbedError(url, f"HTTP {resp.status}")
                data = await resp.json(content_type=None)
        except OEmbedError:
            raise
        except Exception as e:
            # Network failures, timeouts and undecodable bodies alike
            raise OEmbedError(url, str(e) or type(e).__name__) from e

        title = data.get("title") if isinstance(data, dict) else None
        if not isinstance(title, str) or not title.strip():
            raise OEmbedError(url, "response has no title")

        logger.debug("oembed_title_fetched", url=url[:100])
        return title.strip()
