"""
Admin API endpoints.

Every route here requires the caller's persisted role to be admin; a token
that merely claims the role is not enough.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.auth import AdminUser
from app.schemas.admin import AdminStatsResponse, RecentActivity
from app.schemas.review import AdminReviewListParams, ReviewResponse
from app.services.reviews import ReviewServiceDep, primary_title

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(
    _admin: AdminUser,
    service: ReviewServiceDep,
) -> AdminStatsResponse:
    """Review counts by category group and status, plus recent activity."""
    stats = await service.stats()
    return AdminStatsResponse(
        total_reviews=stats["total_reviews"],
        anime_and_manga_reviews=stats["anime_and_manga_reviews"],
        video_game_reviews=stats["video_game_reviews"],
        by_status=stats["by_status"],
        recent_activity=[
            RecentActivity(
                id=review.id,
                title=primary_title(review) or "",
                author_name=author_name,
                updated_at=review.updated_at,
                status=review.status,
            )
            for review, author_name in stats["recent"]
        ],
    )


@router.get("/reviews", response_model=list[ReviewResponse])
async def list_all_reviews(
    _admin: AdminUser,
    params: Annotated[AdminReviewListParams, Depends()],
    service: ReviewServiceDep,
) -> list[ReviewResponse]:
    """List every review regardless of status, newest first."""
    rows = await service.list_all(
        category=params.category, status=params.status, limit=params.limit
    )
    return [
        ReviewResponse.from_review(review, author_name=author_name)
        for review, author_name in rows
    ]
