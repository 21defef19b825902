"""Tests for forum API endpoints."""

from datetime import UTC, datetime

import pytest
from httpx import AsyncClient

from renaspress.models.forum import ForumTopic


@pytest.fixture
def make_topic(session_factory):
    """Factory that stores a topic started by ``author``."""

    async def _make_topic(author, **overrides) -> ForumTopic:
        now = datetime.now(UTC)
        fields = {
            "title": "Where to volunteer this weekend?",
            "content": "Looking for charity drives in Riyadh.",
            "author_id": author.id,
            "category": "general",
            "tags": [],
            "is_pinned": False,
            "is_locked": False,
            "views": 0,
            "replies": 0,
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        topic = ForumTopic(**fields)
        async with session_factory() as session:
            session.add(topic)
            await session.commit()
        return topic

    return _make_topic


class TestTopics:
    """Tests for topic listing, creation and detail."""

    async def test_create_topic(self, client: AsyncClient, make_user, auth_headers) -> None:
        user = await make_user(role="subscriber")

        response = await client.post(
            "/api/forum/topics",
            json={"title": "Match day thread", "content": "Who is watching?", "tags": ["sports"]},
            headers=auth_headers(user),
        )

        assert response.status_code == 201
        topic = response.json()["topic"]
        assert topic["category"] == "general"
        assert topic["tags"] == ["sports"]
        assert topic["author"]["id"] == user.id
        assert topic["replies"] == 0
        assert topic["last_reply"] is None

    async def test_create_topic_requires_auth(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/forum/topics", json={"title": "Anonymous", "content": "Hello"}
        )

        assert response.status_code == 401

    async def test_pinned_topics_first(self, client: AsyncClient, make_user, make_topic) -> None:
        user = await make_user()
        older = await make_topic(user, title="Older")
        pinned = await make_topic(user, title="Pinned", is_pinned=True)
        newer = await make_topic(user, title="Newer")

        response = await client.get("/api/forum/topics")

        ids = [topic["id"] for topic in response.json()["topics"]]
        assert ids == [pinned.id, newer.id, older.id]

    async def test_filter_and_search(self, client: AsyncClient, make_user, make_topic) -> None:
        user = await make_user()
        sports = await make_topic(user, title="Derby predictions", category="sports")
        await make_topic(user, title="Bake sale", category="charity")

        by_category = await client.get("/api/forum/topics", params={"category": "sports"})
        by_search = await client.get("/api/forum/topics", params={"search": "derby"})

        assert [t["id"] for t in by_category.json()["topics"]] == [sports.id]
        assert [t["id"] for t in by_search.json()["topics"]] == [sports.id]

    async def test_topic_detail_counts_views(
        self, client: AsyncClient, make_user, make_topic
    ) -> None:
        topic = await make_topic(await make_user())

        await client.get(f"/api/forum/topics/{topic.id}")
        response = await client.get(f"/api/forum/topics/{topic.id}")

        assert response.status_code == 200
        assert response.json()["topic"]["views"] == 2
        assert response.json()["comments"] == []

    async def test_topic_view_keeps_updated_at(
        self, client: AsyncClient, make_user, make_topic
    ) -> None:
        edited = datetime(2024, 1, 1, 8, 0, 0, tzinfo=UTC)
        topic = await make_topic(await make_user(), updated_at=edited)

        response = await client.get(f"/api/forum/topics/{topic.id}")

        assert response.json()["topic"]["views"] == 1
        assert response.json()["topic"]["updated_at"] == "2024-01-01T08:00:00Z"

    async def test_missing_topic(self, client: AsyncClient) -> None:
        response = await client.get("/api/forum/topics/9999")

        assert response.status_code == 404
        assert response.json()["error"] == "Topic not found"


class TestComments:
    """Tests for commenting on topics."""

    async def test_signed_in_comment_updates_topic(
        self, client: AsyncClient, make_user, make_topic, auth_headers
    ) -> None:
        starter = await make_user()
        replier = await make_user(name="Replier")
        topic = await make_topic(starter)

        response = await client.post(
            "/api/forum/comments",
            json={"topic_id": topic.id, "content": "Count me in", "author_name": "ignored"},
            headers=auth_headers(replier),
        )

        assert response.status_code == 201
        comment = response.json()["comment"]
        assert comment["author_name"] == "Replier"
        assert comment["author"]["id"] == replier.id
        assert response.json()["message"] == "Comment added successfully"

        detail = (await client.get(f"/api/forum/topics/{topic.id}")).json()
        assert detail["topic"]["replies"] == 1
        assert detail["topic"]["last_reply"]["author"]["id"] == replier.id
        assert [c["content"] for c in detail["comments"]] == ["Count me in"]

    async def test_anonymous_comment_needs_name(
        self, client: AsyncClient, make_user, make_topic
    ) -> None:
        topic = await make_topic(await make_user())

        missing = await client.post(
            "/api/forum/comments", json={"topic_id": topic.id, "content": "Hi"}
        )
        assert missing.status_code == 400
        assert missing.json()["error"] == "Author name is required for anonymous comments"

        named = await client.post(
            "/api/forum/comments",
            json={"topic_id": topic.id, "content": "Hi", "author_name": "Visitor"},
        )
        assert named.status_code == 201
        assert named.json()["comment"]["author"] is None
        assert named.json()["comment"]["author_name"] == "Visitor"

    async def test_locked_topic(self, client: AsyncClient, make_user, make_topic) -> None:
        topic = await make_topic(await make_user(), is_locked=True)

        response = await client.post(
            "/api/forum/comments",
            json={"topic_id": topic.id, "content": "Hi", "author_name": "Visitor"},
        )

        assert response.status_code == 403
        assert response.json()["error"] == "This topic is locked and cannot accept new comments"

    async def test_unknown_topic(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/forum/comments",
            json={"topic_id": 9999, "content": "Hi", "author_name": "Visitor"},
        )

        assert response.status_code == 404

    async def test_parent_must_belong_to_topic(
        self, client: AsyncClient, make_user, make_topic
    ) -> None:
        user = await make_user()
        first = await make_topic(user)
        second = await make_topic(user)
        parent = await client.post(
            "/api/forum/comments",
            json={"topic_id": first.id, "content": "Parent", "author_name": "Visitor"},
        )
        parent_id = parent.json()["comment"]["id"]

        reply = await client.post(
            "/api/forum/comments",
            json={
                "topic_id": first.id,
                "content": "Reply",
                "author_name": "Visitor",
                "parent_id": parent_id,
            },
        )
        cross = await client.post(
            "/api/forum/comments",
            json={
                "topic_id": second.id,
                "content": "Wrong thread",
                "author_name": "Visitor",
                "parent_id": parent_id,
            },
        )

        assert reply.status_code == 201
        assert reply.json()["comment"]["parent_id"] == parent_id
        assert cross.status_code == 400
        assert cross.json()["error"] == "Invalid parent comment"
