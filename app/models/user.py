"""
SQLModel-based User models with inheritance for security

This module defines the Users database model using SQLModel, which combines
SQLAlchemy and Pydantic functionality. The inheritance structure is:

UserBase (shared public fields)
    ├─> Users (database table, adds internal/sensitive fields)
    └─> UserResponse (API schema, defined in app/schemas)

This approach eliminates field duplication while maintaining security boundaries.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from app.config import UserRole


class UserBase(SQLModel):
    """
    Base model with shared public fields for Users.

    These fields are safe to expose via the API.
    """

    name: str | None = Field(default=None, max_length=100)


class Users(UserBase, table=True):
    """
    Database table for user accounts.

    Internal/sensitive fields (should NOT be exposed via public API):
    - password_hash: Authentication (highly sensitive); absent for accounts
      linked through the external identity provider
    - email: Privacy-sensitive
    - role: Access control. Always read from this row for privileged checks,
      never from session token claims.
    """

    __tablename__ = "users"

    __table_args__ = (Index("ix_users_email", "email", unique=True),)

    # Primary key
    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True, max_length=32)

    # Contact info (privacy-sensitive)
    email: str = Field(max_length=255)

    # Authentication (highly sensitive - never expose)
    password_hash: str | None = Field(default=None, max_length=255)

    # Access control; changed out-of-band only (see scripts/manage_users.py)
    role: str = Field(default=UserRole.USER, max_length=10)

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
