"""Pydantic schemas for image upload."""

from app.schemas.base import CamelModel


class UploadResponse(CamelModel):
    """Processed image, ready to be sent back as a review's imageData."""

    image_data: str
    mime_type: str
    width: int
    height: int
    size: int
