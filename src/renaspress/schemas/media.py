"""Pydantic schemas for media upload endpoints."""

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Result of relaying a file to object storage."""

    success: bool = True
    id: str = Field(description="Upload id, e.g. img_<timestamp>")
    url: str = Field(description="Public URL of the stored file")
    filename: str = Field(description="Stored file name without folder")
    type: str = Field(description="Declared MIME type")
    size: int = Field(description="Size in bytes")
    message: str
