"""Pydantic schemas for admin endpoints."""

from app.schemas.base import CamelModel, UTCDatetime


class RecentActivity(CamelModel):
    """One entry of the admin dashboard's activity feed."""

    id: str
    title: str
    action: str = "Updated"
    author_name: str | None = None
    updated_at: UTCDatetime
    status: str


class AdminStatsResponse(CamelModel):
    """Aggregate review counts for the admin dashboard."""

    total_reviews: int
    anime_and_manga_reviews: int
    video_game_reviews: int
    by_status: dict[str, int]
    recent_activity: list[RecentActivity]
