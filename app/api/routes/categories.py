"""Category catalogue endpoint."""

from fastapi import APIRouter

from app.schemas.review import CategoriesResponse, CategoryPlatforms
from app.services.reviews import ReviewServiceDep

router = APIRouter(tags=["categories"])


@router.get("/categories", response_model=CategoriesResponse)
async def list_categories(service: ReviewServiceDep) -> CategoriesResponse:
    """Categories with at least one published review, and the platforms seen in each."""
    catalogue, has_reviews = await service.categories()
    return CategoriesResponse(
        categories=[
            CategoryPlatforms(category=category, platforms=platforms)
            for category, platforms in sorted(catalogue.items())
        ],
        has_reviews=has_reviews,
    )
