"""Business logic and external API clients."""

from renaspress.services.base import (
    APIError,
    BaseAPIClient,
    NotFoundError,
    RateLimitError,
)
from renaspress.services.newsapi import NewsAPIClient, get_newsapi_client
from renaspress.services.storage import (
    BunnyStorageClient,
    StorageConfigError,
    StorageUnauthorizedError,
    get_storage_client,
)
from renaspress.services.translation import (
    GoogleTranslateClient,
    TranslationService,
    get_translation_service,
)

__all__ = [
    "APIError",
    "BaseAPIClient",
    "NotFoundError",
    "RateLimitError",
    "BunnyStorageClient",
    "StorageConfigError",
    "StorageUnauthorizedError",
    "get_storage_client",
    "GoogleTranslateClient",
    "TranslationService",
    "get_translation_service",
    "NewsAPIClient",
    "get_newsapi_client",
]
