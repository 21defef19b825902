"""Tests for the news import endpoint."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from renaspress.main import app
from renaspress.models.post import Post
from renaspress.models.user import User
from renaspress.services.base import APIError
from renaspress.services.newsapi import PLACEHOLDER_IMAGE, NewsAPIClient, get_newsapi_client

ARTICLES = [
    {
        "title": "Riyadh Season Opens",
        "description": "<b>Crowds</b> gather &amp; celebrate.",
        "url": "https://news.example.com/riyadh",
        "urlToImage": "https://news.example.com/riyadh.jpg",
        "content": "Full story about the opening.",
        "publishedAt": "2024-10-12T18:30:00Z",
        "category": "sports",
    },
    {
        "title": "Missing Description",
        "description": None,
        "url": "https://news.example.com/missing",
    },
    {
        "title": "Markets Rally",
        "description": "Stocks rose.",
        "url": "https://news.example.com/markets",
        "urlToImage": None,
    },
]


@pytest.fixture
def news_client() -> MagicMock:
    """NewsAPI client double returning canned headlines."""
    mock = MagicMock(spec=NewsAPIClient)
    mock.top_headlines = AsyncMock(return_value=ARTICLES)
    mock.close = AsyncMock()
    app.dependency_overrides[get_newsapi_client] = lambda: mock
    return mock


class TestFetchNews:
    """Tests for POST /api/newsapi/fetch-saudi-news."""

    async def test_imports_articles_as_published_posts(
        self, client: AsyncClient, news_client: MagicMock, session_factory
    ) -> None:
        response = await client.post("/api/newsapi/fetch-saudi-news")

        assert response.status_code == 200
        data = response.json()
        assert data["total_articles"] == 3
        assert data["message"] == "Successfully created 2 posts from Saudi Arabia news"
        assert [p["title"] for p in data["posts"]] == ["Riyadh Season Opens", "Markets Rally"]
        assert data["posts"][0]["category"] == "sports"
        assert data["posts"][1]["category"] == "daily-news"
        news_client.top_headlines.assert_awaited_once_with("sa")

        async with session_factory() as session:
            posts = {p.title: p for p in (await session.execute(select(Post))).scalars()}
            system = (
                await session.execute(select(User).where(User.email == "system@renaspress.com"))
            ).scalar_one()

        riyadh = posts["Riyadh Season Opens"]
        assert riyadh.status == "published"
        assert riyadh.author_id == system.id
        assert riyadh.excerpt == "Crowds gather celebrate."
        assert riyadh.content == "Full story about the opening."
        assert riyadh.tags == ["sports"]
        assert riyadh.media[0]["url"] == "https://news.example.com/riyadh.jpg"
        assert riyadh.published_at.year == 2024

        markets = posts["Markets Rally"]
        assert markets.featured_image == PLACEHOLDER_IMAGE
        assert markets.media == []
        assert markets.content == "Stocks rose."

    async def test_second_run_skips_existing_titles(
        self, client: AsyncClient, news_client: MagicMock  # noqa: ARG002
    ) -> None:
        await client.post("/api/newsapi/fetch-saudi-news")

        response = await client.post("/api/newsapi/fetch-saudi-news")

        assert response.json()["posts"] == []

    async def test_provider_error(self, client: AsyncClient, news_client: MagicMock) -> None:
        news_client.top_headlines.side_effect = APIError("NewsAPI error: apiKeyInvalid")

        response = await client.post("/api/newsapi/fetch-saudi-news")

        assert response.status_code == 500
        assert response.json()["error"] == "NewsAPI error: apiKeyInvalid"

    async def test_get_describes_usage(self, client: AsyncClient) -> None:
        response = await client.get("/api/newsapi/fetch-saudi-news")

        assert response.json()["usage"] == "POST /api/newsapi/fetch-saudi-news"
