"""Pytest fixtures and configuration."""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import UTC, datetime
from itertools import count

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing the app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-at-least-32-characters-long")
os.environ.setdefault("DEBUG", "true")

from renaspress.database import Base, get_db, json_serializer
from renaspress.main import app
from renaspress.models import Post, User
from renaspress.utils.security import create_user_token, hash_password

TEST_PASSWORD = "securepassword123"
# Hashed once; bcrypt is deliberately slow
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)

_sequence = count(1)


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession]]:
    """Session factory bound to a fresh in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        json_serializer=json_serializer,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints against the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[User]]:
    """Factory that stores a user and returns it."""

    async def _make_user(
        role: str = "author",
        name: str | None = None,
        email: str | None = None,
        is_active: bool = True,
        hashed_password: str | None = TEST_PASSWORD_HASH,
        provider: str = "credentials",
    ) -> User:
        n = next(_sequence)
        now = datetime.now(UTC)
        user = User(
            name=name or f"{role.title()} {n}",
            email=email or f"{role}{n}@example.com",
            hashed_password=hashed_password,
            role=role,
            is_active=is_active,
            provider=provider,
            created_at=now,
            updated_at=now,
        )
        async with session_factory() as session:
            session.add(user)
            await session.commit()
        return user

    return _make_user


@pytest.fixture
def make_post(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[Post]]:
    """Factory that stores a post owned by ``author`` and returns it."""

    async def _make_post(author: User, **overrides) -> Post:
        n = next(_sequence)
        now = datetime.now(UTC)
        fields = {
            "title": f"Post {n}",
            "content": f"<p>Body of post {n}</p>",
            "excerpt": None,
            "slug": f"post-{n}",
            "status": "published",
            "author_id": author.id,
            "category": "general",
            "tags": [],
            "featured_image": "https://cdn.example.com/images/cover.jpg",
            "media": [],
            "views": 0,
            "likes": 0,
            "published_at": now,
            "original_language": "en",
            "translations": {},
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        post = Post(**fields)
        async with session_factory() as session:
            session.add(post)
            await session.commit()
        return post

    return _make_post


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Build an Authorization header for a user."""

    def _auth_headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_user_token(user)}"}

    return _auth_headers
