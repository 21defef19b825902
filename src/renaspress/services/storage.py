"""BunnyCDN Storage API client."""

import logging

from renaspress.config import get_settings
from renaspress.services.base import APIError, BaseAPIClient

logger = logging.getLogger(__name__)

UNAUTHORIZED_HINT = (
    "Unauthorized uploading to BunnyCDN Storage. Verify that BUNNYCDN_STORAGE_ZONE_NAME "
    "matches your Storage Zone name and BUNNYCDN_ACCESS_KEY is the Storage Zone password "
    "(not the API key)."
)


class StorageConfigError(ValueError):
    """Raised when the storage zone settings are incomplete."""


class StorageUnauthorizedError(APIError):
    """Raised when the storage zone rejects the access key."""

    def __init__(self, details: str = "") -> None:
        super().__init__(UNAUTHORIZED_HINT, status_code=401)
        self.details = details


class BunnyStorageClient(BaseAPIClient):
    """Client for a single BunnyCDN storage zone.

    Files are written with ``PUT https://<hostname>/<zone>/<path>`` and served
    from the zone's pull-zone base URL.
    """

    def __init__(
        self,
        storage_zone: str | None = None,
        access_key: str | None = None,
        hostname: str | None = None,
        public_base_url: str | None = None,
        timeout: float = 120.0,
    ) -> None:
        settings = get_settings()
        self.storage_zone = storage_zone or settings.bunnycdn_storage_zone_name
        self._access_key = access_key or settings.bunnycdn_access_key
        self.hostname = hostname or settings.bunnycdn_hostname
        self.public_base_url = (public_base_url or settings.bunnycdn_base_url).rstrip("/")

        super().__init__(base_url=f"https://{self.hostname}/{self.storage_zone}", timeout=timeout)

    @property
    def default_headers(self) -> dict[str, str]:
        return {"AccessKey": self._access_key}

    @property
    def configured(self) -> bool:
        return bool(
            self.storage_zone and self._access_key and self.hostname and self.public_base_url
        )

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{path}"

    async def upload(self, path: str, data: bytes) -> str:
        """Store raw bytes at ``path`` and return the public URL.

        Raises:
            StorageConfigError: If the zone settings are incomplete.
            StorageUnauthorizedError: If the zone rejects the access key.
            APIError: For any other upload failure.
        """
        if not self.configured:
            raise StorageConfigError(
                "BunnyCDN configuration missing. Please check environment variables."
            )

        logger.info("Uploading %d bytes to storage path %s", len(data), path)
        try:
            await self.put(
                path,
                content=data,
                headers={"Content-Type": "application/octet-stream"},
            )
        except APIError as e:
            logger.error("BunnyCDN upload error: %s", e)
            if e.status_code == 401:
                raise StorageUnauthorizedError(details=str(e)) from e
            raise
        return self.public_url(path)


async def get_storage_client() -> BunnyStorageClient:
    """Factory function to create a storage client.

    Can be used as a FastAPI dependency. Missing configuration is reported
    when an upload is attempted, after the file itself has been checked.
    """
    return BunnyStorageClient()
