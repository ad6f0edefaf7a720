"""
API Router
"""

from fastapi import APIRouter

from app.api.routes import admin, auth, categories, csrf, images, public, reviews, search, upload

router = APIRouter()

# Include all endpoint routers
router.include_router(auth.router)
router.include_router(csrf.router)
router.include_router(reviews.router)
router.include_router(public.router)
router.include_router(search.router)
router.include_router(categories.router)
router.include_router(images.router)
router.include_router(upload.router)
router.include_router(admin.router)

__all__ = ["router"]
