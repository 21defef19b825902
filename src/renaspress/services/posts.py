"""Post lifecycle rules: slugs, status transitions, counters and bulk publish."""

import re
import time
from collections.abc import Iterable
from datetime import UTC, datetime

from sqlalchemy import Update, case, update

from renaspress.models.post import Post

# UI vocabulary -> stored status
STATUS_ALIASES = {"publish": "published"}

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Lower-case the title and collapse non-alphanumeric runs to single hyphens."""
    return _NON_ALNUM.sub("-", title.lower()).strip("-")


def generate_slug(title: str, timestamp: int | None = None) -> str:
    """Build a unique slug by suffixing the creation time in epoch milliseconds.

    >>> generate_slug("Breaking: News!", timestamp=1700000000000)
    'breaking-news-1700000000000'
    """
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    base = slugify(title)
    return f"{base}-{timestamp}" if base else str(timestamp)


def normalize_status(status: str) -> str:
    return STATUS_ALIASES.get(status, status)


def apply_status(post: Post, status: str, now: datetime | None = None) -> None:
    """Move a post to a new status.

    Entering "published" from any other status stamps published_at. Leaving
    "published" keeps the existing timestamp.
    """
    status = normalize_status(status)
    if status == "published" and post.status != "published":
        post.published_at = now or datetime.now(UTC)
    post.status = status


def apply_like(likes: int, action: str) -> int:
    """Return the new like count; unlike never drops below zero."""
    if action == "like":
        return likes + 1
    return max(0, likes - 1)


def bulk_publish_statement(post_ids: Iterable[int], now: datetime | None = None) -> Update:
    """UPDATE that publishes the given posts, skipping those already published."""
    return (
        update(Post)
        .where(Post.id.in_(list(post_ids)), Post.status != "published")
        .values(status="published", published_at=now or datetime.now(UTC))
        .execution_options(synchronize_session=False)
    )


def like_statement(post_id: int, action: str) -> Update:
    """UPDATE that likes or unlikes a post in place and returns the new count.

    Mirrors apply_like: an unlike at zero leaves the counter at zero.
    """
    if action == "like":
        likes = Post.likes + 1
    else:
        likes = case((Post.likes > 0, Post.likes - 1), else_=0)
    return (
        update(Post)
        .where(Post.id == post_id)
        .values(likes=likes, updated_at=Post.updated_at)
        .returning(Post.likes)
        .execution_options(synchronize_session=False)
    )
