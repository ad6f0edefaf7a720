"""Public (anonymous) review endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.config import Locale
from app.schemas.review import ReviewListParams, ReviewResponse
from app.services.reviews import ReviewServiceDep

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/reviews", response_model=list[ReviewResponse])
async def list_public_reviews(
    params: Annotated[ReviewListParams, Depends()],
    service: ReviewServiceDep,
) -> list[ReviewResponse]:
    """List published reviews, newest first, optionally filtered by category."""
    rows = await service.list_published(category=params.category, limit=params.limit)
    return [
        ReviewResponse.from_review(review, author_name=author_name, locale=params.locale)
        for review, author_name in rows
    ]


@router.get("/reviews/{slug}", response_model=ReviewResponse)
async def get_public_review(
    slug: str,
    service: ReviewServiceDep,
    locale: Annotated[str | None, Query(pattern=f"^({'|'.join(Locale.ALL)})$")] = None,
) -> ReviewResponse:
    """Get a published review by slug."""
    review, author_name = await service.get_published_by_slug(slug)
    return ReviewResponse.from_review(review, author_name=author_name, locale=locale)
