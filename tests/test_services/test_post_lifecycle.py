"""Tests for post lifecycle rules."""

from datetime import UTC, datetime

from renaspress.models import Post
from renaspress.services.posts import (
    apply_like,
    apply_status,
    bulk_publish_statement,
    generate_slug,
    like_statement,
    normalize_status,
    slugify,
)

NOW = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)
EARLIER = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)


class TestSlugs:
    """Tests for slug generation."""

    def test_slugify(self) -> None:
        assert slugify("  Breaking: News!! 2025 ") == "breaking-news-2025"

    def test_generate_slug_is_deterministic_for_a_timestamp(self) -> None:
        assert generate_slug("Breaking: News!", 1700000000000) == "breaking-news-1700000000000"
        assert generate_slug("Breaking: News!", 1700000000000) == generate_slug(
            "Breaking: News!", 1700000000000
        )

    def test_generate_slug_for_non_latin_title(self) -> None:
        assert generate_slug("أخبار اليوم", 1700000000000) == "1700000000000"

    def test_generate_slug_defaults_to_now(self) -> None:
        slug = generate_slug("Hello")
        assert slug.startswith("hello-")
        assert slug.rsplit("-", 1)[1].isdigit()


class TestStatus:
    """Tests for status transitions."""

    def test_publish_alias(self) -> None:
        assert normalize_status("publish") == "published"
        assert normalize_status("pending") == "pending"

    def test_first_publish_stamps_time(self) -> None:
        post = Post(status="draft", published_at=None)
        apply_status(post, "publish", now=NOW)
        assert post.status == "published"
        assert post.published_at == NOW

    def test_republish_keeps_time(self) -> None:
        post = Post(status="published", published_at=EARLIER)
        apply_status(post, "published", now=NOW)
        assert post.published_at == EARLIER

    def test_unpublish_keeps_time(self) -> None:
        post = Post(status="published", published_at=EARLIER)
        apply_status(post, "archived", now=NOW)
        assert post.status == "archived"
        assert post.published_at == EARLIER

    def test_publish_again_after_unpublish_restamps(self) -> None:
        post = Post(status="draft", published_at=EARLIER)
        apply_status(post, "published", now=NOW)
        assert post.published_at == NOW


class TestCounters:
    """Tests for like counting and bulk publish."""

    def test_like_and_unlike(self) -> None:
        assert apply_like(0, "like") == 1
        assert apply_like(3, "unlike") == 2
        assert apply_like(0, "unlike") == 0

    def test_bulk_publish_statement_skips_published(self) -> None:
        sql = str(bulk_publish_statement([1, 2], now=NOW))
        assert sql.startswith("UPDATE posts SET")
        assert "posts.status !=" in sql
        assert "posts.id IN" in sql

    def test_like_statement_updates_in_place(self) -> None:
        like_sql = str(like_statement(7, "like"))
        unlike_sql = str(like_statement(7, "unlike"))

        assert like_sql.startswith("UPDATE posts SET")
        assert "posts.likes +" in like_sql
        assert "RETURNING posts.likes" in like_sql
        assert "CASE WHEN" in unlike_sql
        assert "posts.likes >" in unlike_sql
        assert "updated_at=posts.updated_at" in unlike_sql
