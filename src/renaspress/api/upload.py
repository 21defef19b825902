"""Media upload relay endpoints."""

import logging
import time

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from renaspress.schemas.media import UploadResponse
from renaspress.services.base import APIError
from renaspress.services.media import (
    IMAGE,
    VIDEO,
    MediaKind,
    MediaValidationError,
    build_storage_key,
    validate_upload,
)
from renaspress.services.storage import (
    BunnyStorageClient,
    StorageUnauthorizedError,
    get_storage_client,
)
from renaspress.utils.security import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])


async def relay_upload(
    kind: MediaKind,
    file: UploadFile | None,
    storage: BunnyStorageClient,
) -> UploadResponse:
    """Validate an uploaded file and write it to object storage."""
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    data = await file.read()
    try:
        validate_upload(kind, file.content_type, len(data))
    except MediaValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    timestamp = int(time.time() * 1000)
    key = build_storage_key(kind, file.filename, timestamp=timestamp)

    try:
        url = await storage.upload(key, data)
    except StorageUnauthorizedError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    except APIError as e:
        logger.error("Failed to upload %s %s: %s", kind.name, key, e)
        raise HTTPException(
            status_code=500, detail=f"Failed to upload {kind.name} to storage"
        ) from e
    finally:
        await storage.close()

    return UploadResponse(
        id=f"{kind.id_prefix}_{timestamp}",
        url=url,
        filename=key.split("/", 1)[1],
        type=file.content_type,
        size=len(data),
        message=f"{kind.name.capitalize()} uploaded successfully",
    )


@router.post("/image", response_model=UploadResponse)
async def upload_image(
    current_user: CurrentUser,  # noqa: ARG001 - Required for auth enforcement
    file: UploadFile | None = File(None),
    storage: BunnyStorageClient = Depends(get_storage_client),
) -> UploadResponse:
    """Upload an image (JPEG, PNG, GIF or WebP, up to 10MB)."""
    return await relay_upload(IMAGE, file, storage)


@router.post("/video", response_model=UploadResponse)
async def upload_video(
    current_user: CurrentUser,  # noqa: ARG001 - Required for auth enforcement
    file: UploadFile | None = File(None),
    storage: BunnyStorageClient = Depends(get_storage_client),
) -> UploadResponse:
    """Upload a video (MP4, WebM, OGG, AVI or MOV, up to 100MB)."""
    return await relay_upload(VIDEO, file, storage)
