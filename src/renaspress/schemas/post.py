"""Pydantic schemas for post API endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from renaspress.schemas.common import Pagination
from renaspress.schemas.user import AuthorSummary
from renaspress.services.posts import normalize_status

Category = Literal["daily-news", "political-news", "sports", "woman", "charity", "general"]
# "publish" is the dashboard's spelling of "published"
StatusInput = Literal["draft", "pending", "publish", "published", "archived"]
Language = Literal["en", "ar"]


class MediaItem(BaseModel):
    """Image or video attached to a post."""

    type: Literal["image", "video"]
    url: str = Field(min_length=1)
    title: str | None = None
    description: str | None = Field(default=None, description="Caption")


class _PostBody(BaseModel):
    """Fields shared by create and update requests."""

    title: str = Field(max_length=200)
    content: str
    excerpt: str | None = Field(default=None, max_length=500)

    @field_validator("title", "content")
    @classmethod
    def require_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title and content are required")
        return v

    @field_validator("excerpt")
    @classmethod
    def strip_excerpt(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else v

    @field_validator("status", check_fields=False)
    @classmethod
    def collapse_status_alias(cls, v: str | None) -> str | None:
        return normalize_status(v) if v is not None else v


class PostCreate(_PostBody):
    """Schema for creating a post."""

    status: StatusInput = "draft"
    category: Category = "general"
    tags: list[str] = Field(default_factory=list)
    media: list[MediaItem] = Field(default_factory=list)
    featured_image: str = Field(description="Featured image URL")
    original_language: Language = "en"

    @field_validator("featured_image")
    @classmethod
    def require_featured_image(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Featured image is required")
        return v


class PostUpdate(_PostBody):
    """Schema for updating a post. Omitted optional fields are left unchanged."""

    status: StatusInput | None = None
    category: Category | None = None
    tags: list[str] | None = None
    media: list[MediaItem] | None = None
    featured_image: str | None = None


class PostTranslation(BaseModel):
    """Cached translation of a post into one language."""

    title: str
    content: str
    excerpt: str | None = None
    translated_at: datetime | None = None


class PostResponse(BaseModel):
    """Response schema for a post with its author summary."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    content: str
    excerpt: str | None = None
    status: str
    category: str
    tags: list[str]
    featured_image: str
    media: list[MediaItem]
    views: int
    likes: int
    published_at: datetime | None = None
    original_language: str
    translations: dict[str, PostTranslation] = Field(default_factory=dict)
    author: AuthorSummary | None = None
    created_at: datetime
    updated_at: datetime


class PostDetailResponse(BaseModel):
    success: bool = True
    post: PostResponse
    message: str | None = None


class PostListResponse(BaseModel):
    success: bool = True
    posts: list[PostResponse]
    pagination: Pagination


class SavedPostsResponse(BaseModel):
    success: bool = True
    posts: list[PostResponse]


class LikeRequest(BaseModel):
    action: Literal["like", "unlike"]


class LikeResponse(BaseModel):
    success: bool = True
    likes: int
    message: str


class SavePostRequest(BaseModel):
    post_id: int
    action: Literal["save", "unsave"]


class BulkPublishRequest(BaseModel):
    post_ids: list[int] = Field(min_length=1, description="Posts to publish")


class BulkPublishResponse(BaseModel):
    success: bool = True
    published_count: int
    message: str


class PostTranslateRequest(BaseModel):
    target_language: Language


class PostTranslationResponse(BaseModel):
    success: bool = True
    message: str | None = None
    translation: PostTranslation


class PostTranslationsResponse(BaseModel):
    success: bool = True
    original_language: str
    translations: dict[str, PostTranslation]
