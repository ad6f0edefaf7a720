"""
Authentication schemas for request/response validation.

This module defines Pydantic models for authentication-related API operations:
- Registration and login credentials
- Session and CSRF token responses
"""

from pydantic import EmailStr, Field, field_validator

from app.core.security import validate_password_strength
from app.models.user import Users
from app.schemas.base import CamelModel, UTCDatetime


class RegisterRequest(CamelModel):
    """Request schema for user registration."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=255)
    name: str | None = Field(default=None, min_length=2, max_length=50)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Validate password strength."""
        is_valid, error_message = validate_password_strength(v)
        if not is_valid:
            raise ValueError(error_message)
        return v


class LoginRequest(CamelModel):
    """Request schema for credential login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=255)


class UserResponse(CamelModel):
    """Public view of an account."""

    id: str
    email: str
    name: str | None = None
    role: str
    created_at: UTCDatetime

    @classmethod
    def from_user(cls, user: Users) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            created_at=user.created_at,
        )


class LoginResponse(CamelModel):
    """Response schema for successful authentication."""

    user: UserResponse
    expires_in: int = Field(..., description="Session lifetime in seconds from now")


class CsrfTokenResponse(CamelModel):
    token: str
