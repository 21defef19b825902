"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "RenasPress API"
    debug: bool = False
    secret_key: str  # Required, no default

    # Database
    database_url: str = "sqlite+aiosqlite:///./renaspress.db"

    # JWT Authentication
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24 * 7

    # BunnyCDN storage
    bunnycdn_storage_zone_name: str = ""
    bunnycdn_access_key: str = ""
    bunnycdn_hostname: str = "storage.bunnycdn.com"
    bunnycdn_base_url: str = ""

    # Google Cloud Translation
    google_translate_api_key: str = ""
    google_translate_base_url: str = "https://translation.googleapis.com/language/translate"

    # NewsAPI
    newsapi_key: str = ""
    newsapi_base_url: str = "https://newsapi.org/v2"
    newsapi_country: str = "sa"

    # Author account for imported articles
    system_user_email: str = "system@renaspress.com"
    system_user_name: str = "RenasPress System"

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str, info) -> str:
        """Validate that secret_key is secure."""
        if not v:
            raise ValueError("SECRET_KEY is required")

        # In production mode, ensure secret key is strong
        debug = info.data.get("debug", False)
        if not debug:
            if len(v) < 32:
                raise ValueError("SECRET_KEY must be at least 32 characters in production mode")
            if v in ("change-me-in-production", "secret", "password", "changeme"):
                raise ValueError("SECRET_KEY must not be a common weak value")

        return v

    @property
    def storage_configured(self) -> bool:
        """Whether all BunnyCDN settings needed for uploads are present."""
        return bool(
            self.bunnycdn_storage_zone_name
            and self.bunnycdn_access_key
            and self.bunnycdn_hostname
            and self.bunnycdn_base_url
        )

    def validate_runtime_config(self) -> list[str]:
        """Validate runtime configuration and return warnings."""
        warnings = []

        if not self.storage_configured:
            warnings.append("BUNNYCDN_* settings are incomplete - media uploads will fail")

        if not self.google_translate_api_key:
            warnings.append(
                "GOOGLE_TRANSLATE_API_KEY is not set - translations will return original text"
            )

        if not self.newsapi_key:
            warnings.append("NEWSAPI_KEY is not set - news import will not work")

        # Warn about debug mode in production
        if self.debug:
            warnings.append("DEBUG mode is enabled - should be disabled in production")

        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
