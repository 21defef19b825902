"""Pydantic schemas for request/response validation."""

from renaspress.schemas.common import MessageResponse, Pagination
from renaspress.schemas.forum import (
    CommentCreate,
    CommentCreateResponse,
    CommentResponse,
    LastReply,
    TopicCreate,
    TopicCreateResponse,
    TopicDetailResponse,
    TopicListResponse,
    TopicResponse,
)
from renaspress.schemas.media import UploadResponse
from renaspress.schemas.newsapi import ImportedPost, NewsImportResponse
from renaspress.schemas.post import (
    BulkPublishRequest,
    BulkPublishResponse,
    LikeRequest,
    LikeResponse,
    MediaItem,
    PostCreate,
    PostDetailResponse,
    PostListResponse,
    PostResponse,
    PostTranslateRequest,
    PostTranslation,
    PostTranslationResponse,
    PostTranslationsResponse,
    PostUpdate,
    SavedPostsResponse,
    SavePostRequest,
)
from renaspress.schemas.translation import (
    LanguagesResponse,
    SupportedLanguage,
    TextTranslationResult,
    TranslateRequest,
    TranslateResponse,
)
from renaspress.schemas.user import (
    AuthorSummary,
    AuthResponse,
    UserCreate,
    UserDetailResponse,
    UserListResponse,
    UserLogin,
    UserRegister,
    UserResponse,
    UserUpdate,
)

__all__ = [
    # Shared
    "MessageResponse",
    "Pagination",
    # User schemas
    "AuthorSummary",
    "AuthResponse",
    "UserCreate",
    "UserDetailResponse",
    "UserListResponse",
    "UserLogin",
    "UserRegister",
    "UserResponse",
    "UserUpdate",
    # Post schemas
    "BulkPublishRequest",
    "BulkPublishResponse",
    "LikeRequest",
    "LikeResponse",
    "MediaItem",
    "PostCreate",
    "PostDetailResponse",
    "PostListResponse",
    "PostResponse",
    "PostTranslateRequest",
    "PostTranslation",
    "PostTranslationResponse",
    "PostTranslationsResponse",
    "PostUpdate",
    "SavedPostsResponse",
    "SavePostRequest",
    # Forum schemas
    "CommentCreate",
    "CommentCreateResponse",
    "CommentResponse",
    "LastReply",
    "TopicCreate",
    "TopicCreateResponse",
    "TopicDetailResponse",
    "TopicListResponse",
    "TopicResponse",
    # Media, news import and translation
    "UploadResponse",
    "ImportedPost",
    "NewsImportResponse",
    "LanguagesResponse",
    "SupportedLanguage",
    "TextTranslationResult",
    "TranslateRequest",
    "TranslateResponse",
]
