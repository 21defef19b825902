"""Upload validation and storage-key generation for the media relay."""

import secrets
import time
from dataclasses import dataclass

MB = 1024 * 1024


@dataclass(frozen=True)
class MediaKind:
    """Upload rules for one kind of media."""

    name: str
    folder: str
    id_prefix: str
    allowed_types: tuple[str, ...]
    max_size: int
    default_extension: str
    type_error: str

    @property
    def size_error(self) -> str:
        return f"File too large. Maximum size is {self.max_size // MB}MB."


IMAGE = MediaKind(
    name="image",
    folder="images",
    id_prefix="img",
    allowed_types=("image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"),
    max_size=10 * MB,
    default_extension="jpg",
    type_error="Invalid file type. Only JPEG, PNG, GIF, and WebP images are allowed.",
)

VIDEO = MediaKind(
    name="video",
    folder="videos",
    id_prefix="vid",
    allowed_types=("video/mp4", "video/webm", "video/ogg", "video/avi", "video/mov"),
    max_size=100 * MB,
    default_extension="mp4",
    type_error="Invalid file type. Only MP4, WebM, OGG, AVI, and MOV videos are allowed.",
)


class MediaValidationError(ValueError):
    """Raised when an upload breaks the rules for its kind."""


def validate_upload(kind: MediaKind, content_type: str | None, size: int) -> None:
    """Check the declared MIME type against the allow-list, then the size ceiling."""
    if content_type not in kind.allowed_types:
        raise MediaValidationError(kind.type_error)
    if size > kind.max_size:
        raise MediaValidationError(kind.size_error)


def file_extension(filename: str | None, default: str) -> str:
    if filename and "." in filename:
        extension = filename.rsplit(".", 1)[-1]
        if extension:
            return extension
    return default


def build_storage_key(
    kind: MediaKind,
    filename: str | None,
    timestamp: int | None = None,
    suffix: str | None = None,
) -> str:
    """Return ``<folder>/<epoch ms>_<random>.<ext>`` for a new upload."""
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    if suffix is None:
        suffix = secrets.token_hex(6)
    extension = file_extension(filename, kind.default_extension)
    return f"{kind.folder}/{timestamp}_{suffix}.{extension}"
