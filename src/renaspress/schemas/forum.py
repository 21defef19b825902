"""Pydantic schemas for forum API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from renaspress.schemas.common import Pagination
from renaspress.schemas.user import AuthorSummary


class TopicCreate(BaseModel):
    """Schema for starting a topic."""

    title: str = Field(max_length=200)
    content: str
    category: str = "general"
    tags: list[str] = Field(default_factory=list)

    @field_validator("title", "content")
    @classmethod
    def require_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title and content are required")
        return v


class LastReply(BaseModel):
    author: AuthorSummary | None = None
    created_at: datetime


class TopicResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    category: str
    tags: list[str]
    is_pinned: bool
    is_locked: bool
    views: int
    replies: int
    last_reply: LastReply | None = None
    author: AuthorSummary | None = None
    created_at: datetime
    updated_at: datetime


class TopicDetailResponse(BaseModel):
    success: bool = True
    topic: TopicResponse
    comments: list["CommentResponse"]
    pagination: Pagination


class TopicListResponse(BaseModel):
    success: bool = True
    topics: list[TopicResponse]
    pagination: Pagination


class TopicCreateResponse(BaseModel):
    success: bool = True
    topic: TopicResponse
    message: str


class CommentCreate(BaseModel):
    """Comment on a topic; anonymous callers must give a display name."""

    topic_id: int
    content: str
    author_name: str | None = Field(default=None, max_length=100)
    parent_id: int | None = None

    @field_validator("content")
    @classmethod
    def require_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Topic ID and content are required")
        return v


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    topic_id: int
    parent_id: int | None = None
    content: str
    author: AuthorSummary | None = None
    author_name: str
    likes: int
    created_at: datetime


class CommentCreateResponse(BaseModel):
    success: bool = True
    comment: CommentResponse
    message: str


TopicDetailResponse.model_rebuild()
