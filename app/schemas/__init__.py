"""
Pydantic schemas for API responses and requests
"""

from app.models.review import ReviewBase  # Re-export from models
from app.models.user import UserBase  # Re-export from models
from app.schemas.admin import AdminStatsResponse, RecentActivity
from app.schemas.auth import (
    CsrfTokenResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserResponse,
)
from app.schemas.base import CamelModel, MessageResponse, UTCDatetime
from app.schemas.review import (
    AdminReviewListParams,
    CategoriesResponse,
    CategoryPlatforms,
    LocalizedContent,
    ReviewCreate,
    ReviewListParams,
    ReviewResponse,
    ReviewUpdate,
)
from app.schemas.upload import UploadResponse

__all__ = [
    "AdminReviewListParams",
    "AdminStatsResponse",
    "CamelModel",
    "CategoriesResponse",
    "CategoryPlatforms",
    "CsrfTokenResponse",
    "LocalizedContent",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "RecentActivity",
    "RegisterRequest",
    "ReviewBase",
    "ReviewCreate",
    "ReviewListParams",
    "ReviewResponse",
    "ReviewUpdate",
    "UTCDatetime",
    "UploadResponse",
    "UserBase",
    "UserResponse",
]
