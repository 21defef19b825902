"""Post ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from renaspress.database import Base, utcnow

if TYPE_CHECKING:
    from renaspress.models.user import User

POST_CATEGORIES = ("daily-news", "political-news", "sports", "woman", "charity", "general")
POST_STATUSES = ("draft", "pending", "published", "archived")
SUPPORTED_LANGUAGES = ("en", "ar")


class Post(Base):
    """News article owned by a single author."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text)
    excerpt: Mapped[str | None] = mapped_column(String(500), nullable=True)
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    status: Mapped[str] = mapped_column(String(20), default="draft", index=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    category: Mapped[str] = mapped_column(String(30), index=True)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    featured_image: Mapped[str] = mapped_column(String(500))
    # Ordered list of {"type", "url", "title", "description"}
    media: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    views: Mapped[int] = mapped_column(default=0)
    likes: Mapped[int] = mapped_column(default=0)
    published_at: Mapped[datetime | None] = mapped_column(nullable=True, index=True)
    original_language: Mapped[str] = mapped_column(String(5), default="en")
    # Language code -> {"title", "content", "excerpt", "translated_at"}
    translations: Mapped[dict[str, dict[str, Any]]] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    # Relationships
    author: Mapped[User] = relationship(back_populates="posts")
