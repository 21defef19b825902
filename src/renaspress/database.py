"""Database engine, session factory and request-scoped session dependency."""

import json
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, event
from sqlalchemy.engine import Dialect, Engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from renaspress.config import get_settings


def utcnow() -> datetime:
    return datetime.now(UTC)


def json_serializer(value: Any) -> str:
    """Serialize JSON columns without escaping non-ASCII text."""
    return json.dumps(value, ensure_ascii=False)


class UTCDateTime(TypeDecorator[datetime]):
    """Timestamp stored as naive UTC and always loaded as an aware UTC datetime."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(UTC).replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    type_annotation_map = {datetime: UTCDateTime}


settings = get_settings()

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    json_serializer=json_serializer,
)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    """Turn on FK enforcement so ON DELETE rules apply under SQLite."""
    if "sqlite" not in type(dbapi_connection).__module__:
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Dependency that provides an async database session.

    Commits when the request handler returns and rolls back if it raises.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
