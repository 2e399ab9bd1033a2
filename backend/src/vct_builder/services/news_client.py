"""Valorant esports news feed client.

Provides both a real implementation (a VLR-style JSON API) and a mock
for testing/development.
"""

import logging
from typing import Optional

import httpx

from vct_builder.config import Settings
from vct_builder.models.news import NewsItem

logger = logging.getLogger(__name__)

VLR_BASE_URL = "https://www.vlr.gg"


class MockNewsClient:
    """Mock news client with hardcoded headlines.

    Use this for testing and development when the feed is unreachable.
    """

    NEWS = [
        NewsItem(
            title="VCT Champions: playoff bracket set",
            url="https://www.vlr.gg/news",
            date="October 1, 2026",
        ),
        NewsItem(
            title="Game Changers Championship heads to its final weekend",
            url="https://www.vlr.gg/news",
            date="September 28, 2026",
        ),
        NewsItem(
            title="Off-season roster tracker opens",
            url="https://www.vlr.gg/news",
            date="September 20, 2026",
        ),
    ]

    async def fetch_news(self, limit: int = 10) -> list[NewsItem]:
        """Return the mock headlines regardless of upstream state."""
        logger.info("MockNewsClient: returning hardcoded headlines")
        return self.NEWS[:limit]

    async def close(self):
        pass


class NewsClient:
    """Fetches headlines from a VLR-style news API.

    Expected payload: ``{"data": {"segments": [{"title", "url_path", "date"}]}}``.
    """

    def __init__(
        self,
        api_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the news client.

        Args:
            api_url: News endpoint URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def fetch_news(self, limit: int = 10) -> list[NewsItem]:
        """Fetch the latest headlines in feed order.

        Args:
            limit: Maximum number of items

        Returns:
            List of NewsItem, newest first as published

        Raises:
            httpx.HTTPError: If the feed cannot be fetched
        """
        client = await self._get_client()
        response = await client.get(self.api_url)
        response.raise_for_status()
        data = response.json()

        segments = (data.get("data") or {}).get("segments") or []
        items = []
        for segment in segments:
            if not isinstance(segment, dict):
                continue
            title = str(segment.get("title", "")).strip()
            if not title:
                continue
            url = str(segment.get("url_path", ""))
            if url.startswith("/"):
                url = f"{VLR_BASE_URL}{url}"
            items.append(NewsItem(title=title, url=url, date=str(segment.get("date", ""))))
            if len(items) >= limit:
                break

        logger.debug(f"Fetched {len(items)} news items from {self.api_url}")
        return items


def get_news_client(settings: Settings) -> MockNewsClient | NewsClient:
    """Factory function to get the appropriate news client."""
    if settings.use_mock_news or not settings.news_api_url:
        logger.info("Using MockNewsClient")
        return MockNewsClient()
    logger.info(f"Using NewsClient for {settings.news_api_url}")
    return NewsClient(settings.news_api_url, timeout=settings.news_timeout)
