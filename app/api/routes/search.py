"""Review search endpoint."""

from typing import Annotated

from fastapi import APIRouter, Query

from app.config import Locale
from app.schemas.review import ReviewResponse
from app.services.reviews import ReviewServiceDep

router = APIRouter(tags=["search"])


@router.get("/search", response_model=list[ReviewResponse])
async def search_reviews(
    service: ReviewServiceDep,
    q: Annotated[str, Query(max_length=100, description="Search term")] = "",
    locale: Annotated[str | None, Query(pattern=f"^({'|'.join(Locale.ALL)})$")] = None,
) -> list[ReviewResponse]:
    """
    Search published reviews by title and content, in every language.

    A blank query returns an empty list.
    """
    rows = await service.search(q)
    return [
        ReviewResponse.from_review(review, author_name=author_name, locale=locale)
        for review, author_name in rows
    ]
