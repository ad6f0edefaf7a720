"""
Image upload processing: validation, resize and WebP re-encoding.

Uploaded cover images are stored base64-encoded on the review row, so they
are shrunk to fit MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT and re-encoded as WebP
before being handed back to the client.
"""

import asyncio
import base64
from dataclasses import dataclass
from io import BytesIO

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from app.config import settings
from app.core.errors import ValidationFailed
from app.core.logging import get_logger
from app.schemas.review import ALLOWED_IMAGE_MIME_TYPES

logger = get_logger(__name__)

OUTPUT_MIME_TYPE = "image/webp"


@dataclass(frozen=True)
class ProcessedImage:
    data: bytes
    mime_type: str
    width: int
    height: int

    @property
    def size(self) -> int:
        return len(self.data)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


def validate_upload(content_type: str | None, size: int) -> None:
    """
    Check declared type and size of an uploaded image.

    Raises:
        ValidationFailed: 400 for a disallowed type or an oversized file
    """
    if content_type not in ALLOWED_IMAGE_MIME_TYPES:
        raise ValidationFailed(
            [f"Invalid file type. Allowed types: {', '.join(ALLOWED_IMAGE_MIME_TYPES)}"]
        )
    if size > settings.MAX_UPLOAD_SIZE:
        raise ValidationFailed(
            [f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB"]
        )


def fit_within(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Dimensions scaled down (never up) to fit the box, preserving aspect ratio."""
    if width <= max_width and height <= max_height:
        return width, height
    ratio = min(max_width / width, max_height / height)
    return max(1, round(width * ratio)), max(1, round(height * ratio))


def process_image(content: bytes) -> ProcessedImage:
    """
    Decode, resize and re-encode an image as WebP.

    Args:
        content: Raw uploaded bytes

    Returns:
        ProcessedImage with the WebP bytes and final dimensions

    Raises:
        ValidationFailed: 400 if the bytes are not a decodable image
    """
    try:
        with Image.open(BytesIO(content)) as probe:
            probe.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ValidationFailed(["File is not a valid image"]) from e

    # verify() leaves the image unusable, so reopen for processing
    with Image.open(BytesIO(content)) as img:
        width, height = fit_within(
            img.width, img.height, settings.MAX_IMAGE_WIDTH, settings.MAX_IMAGE_HEIGHT
        )
        if (width, height) != img.size:
            img = img.resize((width, height), Image.Resampling.LANCZOS)

        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGBA" if "transparency" in img.info else "RGB")

        output = BytesIO()
        img.save(output, format="WEBP", quality=settings.WEBP_QUALITY)

    return ProcessedImage(
        data=output.getvalue(), mime_type=OUTPUT_MIME_TYPE, width=width, height=height
    )


async def process_upload(file: UploadFile) -> ProcessedImage:
    """
    Validate and process an uploaded image.

    Decoding and encoding run in the default executor to keep the event loop free.
    """
    content = await file.read()
    validate_upload(file.content_type, len(content))

    loop = asyncio.get_running_loop()
    processed = await loop.run_in_executor(None, process_image, content)

    logger.info(
        "image_processed",
        filename=file.filename,
        original_size=len(content),
        size=processed.size,
        width=processed.width,
        height=processed.height,
    )
    return processed
