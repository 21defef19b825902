"""News import endpoint: turns external headlines into published posts."""

import logging
import secrets
import time
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from renaspress.config import get_settings
from renaspress.database import get_db
from renaspress.models.post import Post
from renaspress.models.user import User
from renaspress.schemas.newsapi import ImportedPost, NewsImportResponse
from renaspress.services.base import APIError
from renaspress.services.newsapi import (
    PLACEHOLDER_IMAGE,
    NewsAPIClient,
    create_excerpt,
    get_newsapi_client,
    map_category,
)
from renaspress.services.posts import generate_slug
from renaspress.utils.security import hash_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/newsapi", tags=["newsapi"])


async def get_system_user(db: AsyncSession) -> User:
    """Return the account that owns imported articles, creating it if needed.

    The account gets an unguessable password so nobody can sign in as it.
    """
    settings = get_settings()
    result = await db.execute(select(User).where(User.email == settings.system_user_email))
    user = result.scalar_one_or_none()
    if user is not None:
        return user

    now = datetime.now(UTC)
    user = User(
        name=settings.system_user_name,
        email=settings.system_user_email,
        hashed_password=hash_password(secrets.token_urlsafe(32)),
        role="author",
        provider="credentials",
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    await db.flush()
    logger.info("Created system user %s for news import", settings.system_user_email)
    return user


def parse_published_at(value: str | None, default: datetime) -> datetime:
    if not value:
        return default
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return default


def article_to_post(article: dict[str, Any], author_id: int, slug: str, now: datetime) -> Post:
    """Build a published post from a NewsAPI article."""
    image = article.get("urlToImage")
    news_category = article.get("category")
    media = []
    if image:
        media.append(
            {
                "type": "image",
                "url": image,
                "title": article["title"],
                "description": article["description"],
            }
        )
    return Post(
        title=article["title"],
        content=article.get("content") or article["description"],
        excerpt=create_excerpt(article["description"]),
        slug=slug,
        status="published",
        author_id=author_id,
        category=map_category(news_category),
        tags=[news_category] if news_category else [],
        featured_image=image or PLACEHOLDER_IMAGE,
        media=media,
        views=0,
        likes=0,
        published_at=parse_published_at(article.get("publishedAt"), now),
        original_language="en",
        translations={},
        created_at=now,
        updated_at=now,
    )


@router.get("/fetch-saudi-news")
async def fetch_news_usage() -> dict[str, str]:
    """Describe how to trigger the import."""
    return {
        "message": "Use POST method to fetch Saudi Arabia news",
        "usage": "POST /api/newsapi/fetch-saudi-news",
    }


@router.post("/fetch-saudi-news", response_model=NewsImportResponse)
async def fetch_news(
    db: AsyncSession = Depends(get_db),
    client: NewsAPIClient = Depends(get_newsapi_client),
) -> NewsImportResponse:
    """Import top headlines as published posts.

    Articles without a title, description or url, and articles whose title
    already exists, are skipped. Intended to be called by a scheduler.
    """
    settings = get_settings()
    system_user = await get_system_user(db)

    try:
        articles = await client.top_headlines(settings.newsapi_country)
    except APIError as e:
        logger.error("Error fetching news from NewsAPI: %s", e)
        raise HTTPException(status_code=500, detail=str(e)) from e
    finally:
        await client.close()

    now = datetime.now(UTC)
    base_ts = int(time.time() * 1000)
    created: list[ImportedPost] = []

    for index, article in enumerate(articles):
        if not (article.get("title") and article.get("description") and article.get("url")):
            continue

        existing = await db.execute(select(Post.id).where(Post.title == article["title"]))
        if existing.first() is not None:
            continue

        post = article_to_post(
            article,
            author_id=system_user.id,
            slug=generate_slug(article["title"], base_ts + index),
            now=now,
        )
        db.add(post)
        await db.flush()

        created.append(
            ImportedPost(id=post.id, title=post.title, category=post.category, slug=post.slug)
        )

    logger.info("Imported %d of %d articles", len(created), len(articles))

    return NewsImportResponse(
        message=f"Successfully created {len(created)} posts from Saudi Arabia news",
        posts=created,
        total_articles=len(articles),
    )
