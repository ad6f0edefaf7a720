"""Review image serving."""

import base64
import binascii

from fastapi import APIRouter, Response
from fastapi.responses import RedirectResponse

from app.config import ReviewStatus, settings
from app.core.auth import OptionalCurrentUser
from app.core.errors import NotFound
from app.core.logging import get_logger
from app.services.reviews import ReviewServiceDep

logger = get_logger(__name__)

router = APIRouter(prefix="/images", tags=["images"])


@router.get("/{review_id}", response_model=None)
async def get_review_image(
    review_id: str,
    current_user: OptionalCurrentUser,
    service: ReviewServiceDep,
) -> Response:
    """
    Serve a review's image.

    Stored bytes are returned with their mime type; otherwise the client is
    redirected to the external cover URL. Images of unpublished reviews are
    only served to their author or an admin.
    """
    review = await service.get(review_id)

    if review.status != ReviewStatus.PUBLISHED and not (
        current_user is not None
        and (current_user.id == review.author_id or current_user.is_admin)
    ):
        raise NotFound("Image not found")

    if review.image_data:
        try:
            content = base64.b64decode(review.image_data)
        except (binascii.Error, ValueError):
            logger.error("stored_image_corrupt", review_id=review.id)
            raise NotFound("Image not found") from None
        return Response(
            content=content,
            media_type=review.image_mime_type or "application/octet-stream",
            headers={
                "Cache-Control": (
                    f"public, max-age={settings.IMAGE_CACHE_MAX_AGE}, must-revalidate"
                )
            },
        )

    if review.cover_image:
        return RedirectResponse(url=review.cover_image, status_code=302)

    raise NotFound("Image not found")
