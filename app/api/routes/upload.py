"""Image upload endpoint."""

from typing import Annotated

from fastapi import APIRouter, File, UploadFile

from app.core.auth import CurrentUser
from app.schemas.upload import UploadResponse
from app.services.image_processing import process_upload

router = APIRouter(tags=["upload"])


@router.post("/upload", response_model=UploadResponse)
async def upload_image(
    current_user: CurrentUser,
    image: Annotated[UploadFile, File(description="JPEG, PNG or WebP image, max 5MB")],
) -> UploadResponse:
    """
    Resize and re-encode an image for use as a review cover.

    Returns base64 WebP data the client sends back as the review's imageData.
    """
    processed = await process_upload(image)
    return UploadResponse(
        image_data=processed.to_base64(),
        mime_type=processed.mime_type,
        width=processed.width,
        height=processed.height,
        size=processed.size,
    )
