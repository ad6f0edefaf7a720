"""Review API endpoints (authenticated create/read/update/delete)."""

from fastapi import APIRouter, status

from app.config import ReviewStatus
from app.core.auth import CurrentUser, OptionalCurrentUser, ensure_owner_or_admin
from app.core.errors import Unauthorized
from app.schemas.base import MessageResponse
from app.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from app.services.reviews import ReviewServiceDep

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    payload: ReviewCreate,
    current_user: CurrentUser,
    service: ReviewServiceDep,
) -> ReviewResponse:
    """
    Create a review authored by the current user.

    The slug is derived from the primary title; duplicates get a numeric suffix.
    """
    review = await service.create(payload, current_user)
    return ReviewResponse.from_review(review, author_name=current_user.name)


@router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(
    review_id: str,
    current_user: OptionalCurrentUser,
    service: ReviewServiceDep,
) -> ReviewResponse:
    """
    Get a single review by id.

    Published reviews are visible to anyone; drafts and archived reviews only
    to their author or an admin.
    """
    review, author_name = await service.get_with_author(review_id)

    if review.status != ReviewStatus.PUBLISHED:
        if current_user is None:
            raise Unauthorized()
        ensure_owner_or_admin(current_user, review)

    return ReviewResponse.from_review(review, author_name=author_name)


@router.put("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: str,
    payload: ReviewUpdate,
    current_user: CurrentUser,
    service: ReviewServiceDep,
) -> ReviewResponse:
    """
    Update a review (author or admin).

    Omitted fields keep their stored values, so image bytes need not be resent.
    """
    review = await service.get(review_id)
    ensure_owner_or_admin(current_user, review)

    review = await service.update(review, payload)
    author_name = await service.author_name(review.author_id)
    return ReviewResponse.from_review(review, author_name=author_name)


@router.delete("/{review_id}", response_model=MessageResponse)
async def delete_review(
    review_id: str,
    current_user: CurrentUser,
    service: ReviewServiceDep,
) -> MessageResponse:
    """Permanently delete a review (author or admin)."""
    review = await service.get(review_id)
    ensure_owner_or_admin(current_user, review)

    await service.delete(review)
    return MessageResponse(message="Review deleted successfully")
