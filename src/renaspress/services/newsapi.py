"""NewsAPI client and helpers for turning headlines into posts."""

import re
from typing import Any

from renaspress.config import get_settings
from renaspress.services.base import APIError, BaseAPIClient

# NewsAPI category -> post category
CATEGORY_MAPPING = {
    "business": "daily-news",
    "entertainment": "daily-news",
    "general": "daily-news",
    "health": "charity",
    "science": "daily-news",
    "sports": "sports",
    "technology": "daily-news",
    "politics": "political-news",
}
DEFAULT_CATEGORY = "daily-news"
PLACEHOLDER_IMAGE = "https://via.placeholder.com/800x600?text=News+Image"

_TAG_RE = re.compile(r"<[^>]*>")
_ENTITY_RE = re.compile(r"&[^;\s]+;")
_SPACE_RE = re.compile(r"\s+")


class NewsAPIClient(BaseAPIClient):
    """Client for the NewsAPI v2 REST API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.newsapi_key
        base = base_url or settings.newsapi_base_url

        if not self._api_key:
            raise ValueError("NewsAPI key is required")

        super().__init__(base_url=base, timeout=timeout)

    @property
    def default_headers(self) -> dict[str, str]:
        return {
            "X-Api-Key": self._api_key,
            "User-Agent": "RenasPress/1.0",
            "Accept": "application/json",
        }

    async def top_headlines(
        self,
        country: str,
        page_size: int = 50,
        category: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch top headlines for a country.

        Raises:
            APIError: If NewsAPI reports a non-ok status.
        """
        params: dict[str, Any] = {"country": country, "pageSize": page_size}
        if category:
            params["category"] = category
        data = await self.get("top-headlines", params=params)
        if data.get("status") != "ok":
            raise APIError(f"NewsAPI error: {data.get('message') or 'Unknown error'}")
        return data.get("articles") or []


def clean_content(content: str) -> str:
    """Strip tags and entities and collapse whitespace."""
    text = _ENTITY_RE.sub(" ", _TAG_RE.sub("", content))
    return _SPACE_RE.sub(" ", text).strip()


def create_excerpt(content: str, max_length: int = 200) -> str:
    """Cleaned text cut at the last word boundary before ``max_length``."""
    cleaned = clean_content(content)
    if len(cleaned) <= max_length:
        return cleaned
    return re.sub(r"\s+\S*$", "", cleaned[:max_length]) + "..."


def map_category(news_category: str | None) -> str:
    return CATEGORY_MAPPING.get(news_category or "", DEFAULT_CATEGORY)


async def get_newsapi_client() -> NewsAPIClient:
    """Factory function to create a NewsAPI client.

    Can be used as a FastAPI dependency. A missing key is reported as a
    server-side APIError.
    """
    try:
        return NewsAPIClient()
    except ValueError as e:
        raise APIError(str(e), status_code=500) from e
