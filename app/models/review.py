"""
SQLModel-based Review models with inheritance for security

This module defines the Reviews database model. The inheritance structure is:

ReviewBase (shared public fields)
    ├─> Reviews (database table, adds identity, image bytes and ownership)
    └─> ReviewResponse (API schema, defined in app/schemas)

Uploaded image bytes are kept base64-encoded in a text column next to the
review. Responses never carry them; they are served by /api/images/{id}.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, ForeignKeyConstraint, Index, Text
from sqlalchemy.dialects.mysql import LONGTEXT
from sqlmodel import Field, SQLModel

from app.config import ReviewStatus

# MySQL TEXT caps at 64KB, too small for base64 images and long reviews
LongText = Text().with_variant(LONGTEXT(), "mysql", "mariadb")


class ReviewBase(SQLModel):
    """
    Base model with shared public fields for Reviews.

    Localized fields: ``title_es``/``title_en`` and ``content_es``/``content_en``
    are translations; ``title``/``content`` are the legacy single-language
    columns used as fallback.
    """

    title: str | None = Field(default=None, max_length=200)
    title_es: str | None = Field(default=None, max_length=200)
    title_en: str | None = Field(default=None, max_length=200)

    category: str = Field(max_length=50)
    platform: str | None = Field(default=None, max_length=50)
    rating: float | None = Field(default=None, ge=0, le=10)

    cover_image: str | None = Field(default=None, max_length=2048)
    image_mime_type: str | None = Field(default=None, max_length=50)
    youtube_url: str | None = Field(default=None, max_length=255)

    status: str = Field(default=ReviewStatus.DRAFT, max_length=20)


class Reviews(ReviewBase, table=True):
    """
    Database table for reviews.

    Extends ReviewBase with:
    - Primary key and unique slug
    - Long text columns (content variants, base64 image data)
    - Author reference (immutable after creation)
    - Timestamps
    """

    __tablename__ = "reviews"

    __table_args__ = (
        ForeignKeyConstraint(
            ["author_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="fk_reviews_author_id",
        ),
        Index("ix_reviews_slug", "slug", unique=True),
        Index("ix_reviews_status_created", "status", "created_at"),
        Index("ix_reviews_category", "category"),
    )

    # Primary key
    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True, max_length=32)
    slug: str = Field(max_length=255)

    content: str | None = Field(default=None, sa_column=Column(LongText, nullable=True))
    content_es: str | None = Field(default=None, sa_column=Column(LongText, nullable=True))
    content_en: str | None = Field(default=None, sa_column=Column(LongText, nullable=True))

    # Base64-encoded uploaded image
    image_data: str | None = Field(default=None, sa_column=Column(LongText, nullable=True))

    author_id: str = Field(max_length=32)

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Note: Relationships are intentionally omitted.
    # Author names are fetched with an explicit join where needed.
