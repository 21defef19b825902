"""Tests for user administration endpoints."""

from httpx import AsyncClient
from sqlalchemy import func, select

from renaspress.models.post import Post
from renaspress.models.user import User
from renaspress.utils.security import verify_password


class TestListUsers:
    """Tests for listing accounts."""

    async def test_admin_lists_with_filters(
        self, client: AsyncClient, make_user, auth_headers
    ) -> None:
        admin = await make_user(role="admin")
        await make_user(role="editor", name="Layla Editor", email="layla@example.com")
        await make_user(role="author", name="Omar Author", email="omar@example.com")

        response = await client.get("/api/users", headers=auth_headers(admin))
        assert response.status_code == 200
        assert response.json()["pagination"]["total"] == 3

        response = await client.get(
            "/api/users", params={"role": "editor"}, headers=auth_headers(admin)
        )
        assert [u["email"] for u in response.json()["users"]] == ["layla@example.com"]

        response = await client.get(
            "/api/users", params={"search": "OMAR"}, headers=auth_headers(admin)
        )
        assert [u["email"] for u in response.json()["users"]] == ["omar@example.com"]

    async def test_non_admin_forbidden(
        self, client: AsyncClient, make_user, auth_headers
    ) -> None:
        editor = await make_user(role="editor")

        response = await client.get("/api/users", headers=auth_headers(editor))

        assert response.status_code == 403
        assert response.json()["error"] == "Admin access required"


class TestCreateUser:
    """Tests for admin account creation."""

    async def test_admin_creates_editor(
        self, client: AsyncClient, make_user, auth_headers
    ) -> None:
        admin = await make_user(role="admin")

        response = await client.post(
            "/api/users",
            json={
                "name": "  Sara  ",
                "email": "Sara@Example.com",
                "password": "password123",
                "role": "editor",
            },
            headers=auth_headers(admin),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "User created successfully"
        assert data["user"]["name"] == "Sara"
        assert data["user"]["email"] == "sara@example.com"
        assert data["user"]["role"] == "editor"

    async def test_invalid_role_rejected(
        self, client: AsyncClient, make_user, auth_headers
    ) -> None:
        admin = await make_user(role="admin")

        response = await client.post(
            "/api/users",
            json={
                "name": "Sara",
                "email": "sara@example.com",
                "password": "password123",
                "role": "overlord",
            },
            headers=auth_headers(admin),
        )

        assert response.status_code == 400

    async def test_duplicate_email(self, client: AsyncClient, make_user, auth_headers) -> None:
        admin = await make_user(role="admin")
        await make_user(email="taken@example.com")

        response = await client.post(
            "/api/users",
            json={"name": "Dup", "email": "taken@example.com", "password": "password123"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 400


class TestGetUser:
    """Tests for fetching a profile."""

    async def test_self_and_admin_can_view(
        self, client: AsyncClient, make_user, auth_headers
    ) -> None:
        admin = await make_user(role="admin")
        author = await make_user()

        own = await client.get(f"/api/users/{author.id}", headers=auth_headers(author))
        by_admin = await client.get(f"/api/users/{author.id}", headers=auth_headers(admin))

        assert own.status_code == 200
        assert by_admin.json()["user"]["id"] == author.id

    async def test_other_user_denied(self, client: AsyncClient, make_user, auth_headers) -> None:
        author = await make_user()
        other = await make_user()

        response = await client.get(f"/api/users/{other.id}", headers=auth_headers(author))

        assert response.status_code == 403
        assert response.json()["error"] == "Access denied"

    async def test_missing_user(self, client: AsyncClient, make_user, auth_headers) -> None:
        admin = await make_user(role="admin")

        response = await client.get("/api/users/9999", headers=auth_headers(admin))

        assert response.status_code == 404


class TestUpdateUser:
    """Tests for profile updates."""

    async def test_self_updates_profile_and_password(
        self, client: AsyncClient, make_user, auth_headers, session_factory
    ) -> None:
        author = await make_user()

        response = await client.put(
            f"/api/users/{author.id}",
            json={"name": "Renamed", "password": "newpassword1"},
            headers=auth_headers(author),
        )

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Renamed"
        async with session_factory() as session:
            stored = await session.get(User, author.id)
        assert verify_password("newpassword1", stored.hashed_password)

    async def test_self_cannot_change_role(
        self, client: AsyncClient, make_user, auth_headers
    ) -> None:
        author = await make_user()

        response = await client.put(
            f"/api/users/{author.id}", json={"role": "admin"}, headers=auth_headers(author)
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Only admins can change role or active status"

    async def test_admin_changes_role_and_deactivates(
        self, client: AsyncClient, make_user, auth_headers
    ) -> None:
        admin = await make_user(role="admin")
        author = await make_user()

        response = await client.put(
            f"/api/users/{author.id}",
            json={"role": "editor", "is_active": False},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "editor"
        assert response.json()["user"]["is_active"] is False

    async def test_email_taken_by_another_user(
        self, client: AsyncClient, make_user, auth_headers
    ) -> None:
        author = await make_user(email="mine@example.com")
        await make_user(email="theirs@example.com")

        keep_own = await client.put(
            f"/api/users/{author.id}",
            json={"email": "mine@example.com"},
            headers=auth_headers(author),
        )
        assert keep_own.status_code == 200

        response = await client.put(
            f"/api/users/{author.id}",
            json={"email": "theirs@example.com"},
            headers=auth_headers(author),
        )
        assert response.status_code == 400
        assert response.json()["error"] == "This email is already taken"


class TestDeleteUser:
    """Tests for account deletion."""

    async def test_admin_cannot_delete_self(
        self, client: AsyncClient, make_user, auth_headers
    ) -> None:
        admin = await make_user(role="admin")

        response = await client.delete(f"/api/users/{admin.id}", headers=auth_headers(admin))

        assert response.status_code == 403
        assert response.json()["error"] == "Cannot delete your own account"

    async def test_user_with_posts_needs_cascade(
        self, client: AsyncClient, make_user, make_post, auth_headers, session_factory
    ) -> None:
        admin = await make_user(role="admin")
        author = await make_user()
        await make_post(author)
        await make_post(author)

        refused = await client.delete(f"/api/users/{author.id}", headers=auth_headers(admin))

        assert refused.status_code == 400
        assert refused.json()["error"].startswith("Cannot delete user with 2 posts.")

        deleted = await client.delete(
            f"/api/users/{author.id}",
            params={"delete_posts": "true"},
            headers=auth_headers(admin),
        )

        assert deleted.status_code == 200
        assert deleted.json()["message"] == "User deleted successfully"
        async with session_factory() as session:
            assert await session.get(User, author.id) is None
            post_count = (await session.execute(select(func.count(Post.id)))).scalar_one()
        assert post_count == 0

    async def test_non_admin_cannot_delete(
        self, client: AsyncClient, make_user, auth_headers
    ) -> None:
        editor = await make_user(role="editor")
        author = await make_user()

        response = await client.delete(f"/api/users/{author.id}", headers=auth_headers(editor))

        assert response.status_code == 403
