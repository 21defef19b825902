"""User ORM model and the saved-posts association table."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from renaspress.database import Base, utcnow

if TYPE_CHECKING:
    from renaspress.models.post import Post

USER_ROLES = ("admin", "author", "editor", "subscriber")
AUTH_PROVIDERS = ("credentials", "google", "facebook")

# Roles allowed to author posts
POST_AUTHOR_ROLES = ("admin", "author", "editor")

saved_posts = Table(
    "saved_posts",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("post_id", ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """Account used for authentication, post ownership and saved posts."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(20), default="author", index=True)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True)
    provider: Mapped[str] = mapped_column(String(20), default="credentials")
    provider_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    # Relationships
    posts: Mapped[list[Post]] = relationship(back_populates="author", passive_deletes=True)
    saved_posts: Mapped[list[Post]] = relationship(secondary=saved_posts, passive_deletes=True)
