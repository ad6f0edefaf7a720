"""Pydantic schemas for Review endpoints."""

import base64
import binascii
from collections.abc import Callable
from typing import Any, Literal

from pydantic import (
    BaseModel,
    Field,
    ModelWrapValidatorHandler,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import InitErrorDetails, PydanticCustomError

from app.models.review import Reviews
from app.schemas.base import CamelModel, UTCDatetime
from app.utils.locale import has_locale, resolve
from app.utils.youtube import embed_url, extract_video_id, is_valid_youtube_url

ReviewStatusValue = Literal["draft", "published", "archived"]

ALLOWED_IMAGE_MIME_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")

TEXT_FIELDS = (
    "title",
    "title_es",
    "title_en",
    "content",
    "content_es",
    "content_en",
    "category",
    "platform",
    "cover_image",
    "image_data",
    "image_mime_type",
    "youtube_url",
)


def _raw_value(data: dict[str, Any], name: str) -> object:
    """Value of ``name`` in unvalidated input, by field name or camelCase alias."""
    value = data.get(name, data.get(to_camel(name)))
    if isinstance(value, str):
        return value.strip() or None
    return value


def _missing_variants(get: Callable[[str], object]) -> list[str]:
    problems = []
    if not (get("title") or get("title_es") or get("title_en")):
        problems.append("At least one of title, titleEs or titleEn is required")
    if not (get("content") or get("content_es") or get("content_en")):
        problems.append("At least one of content, contentEs or contentEn is required")
    if get("image_data") and not get("image_mime_type"):
        problems.append("imageMimeType is required when imageData is provided")
    return problems


class ReviewFields(CamelModel):
    """
    Field constraints shared by create and update payloads.

    Blank strings are treated as absent.
    """

    title: str | None = Field(default=None, min_length=3, max_length=200)
    title_es: str | None = Field(default=None, min_length=3, max_length=200)
    title_en: str | None = Field(default=None, min_length=3, max_length=200)

    content: str | None = Field(default=None, min_length=10, max_length=50000)
    content_es: str | None = Field(default=None, min_length=10, max_length=50000)
    content_en: str | None = Field(default=None, min_length=10, max_length=50000)

    category: str | None = Field(default=None, min_length=1, max_length=50)
    platform: str | None = Field(default=None, min_length=1, max_length=50)
    rating: float | None = Field(default=None, ge=0, le=10)

    cover_image: str | None = Field(default=None, max_length=2048, pattern=r"^https?://\S+$")
    image_data: str | None = None
    image_mime_type: str | None = None
    youtube_url: str | None = Field(default=None, max_length=255)

    status: ReviewStatusValue | None = None

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("image_data")
    @classmethod
    def check_base64(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("imageData must be base64-encoded") from None
        return v

    @field_validator("image_mime_type")
    @classmethod
    def check_mime_type(cls, v: str | None) -> str | None:
        if v is not None and v not in ALLOWED_IMAGE_MIME_TYPES:
            raise ValueError(f"imageMimeType must be one of: {', '.join(ALLOWED_IMAGE_MIME_TYPES)}")
        return v

    @field_validator("youtube_url")
    @classmethod
    def check_youtube_url(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_youtube_url(v):
            raise ValueError(
                "youtubeUrl must be a youtube.com/watch?v=, youtu.be/ or youtube.com/embed/ URL"
            )
        return v


class ReviewCreate(ReviewFields):
    """
    Schema for creating a review, and for validating an updated review as a whole.

    At least one title variant and one content variant are required, and
    uploaded image data needs its mime type.
    """

    category: str = Field(min_length=1, max_length=50)
    status: ReviewStatusValue = "draft"

    @model_validator(mode="wrap")
    @classmethod
    def check_required_variants(
        cls, data: Any, handler: ModelWrapValidatorHandler["ReviewCreate"]
    ) -> "ReviewCreate":
        """
        Require a title, a content and a mime type for image data.

        When field validation fails these checks run on the raw input, so
        every violation is reported in one error.
        """
        line_errors: list[InitErrorDetails] = []
        review = None
        try:
            review = handler(data)
        except ValidationError as e:
            line_errors = [
                {
                    "type": PydanticCustomError(error["type"], error["msg"]),
                    "loc": error["loc"],
                    "input": error["input"],
                }
                for error in e.errors()
            ]
            if not isinstance(data, dict):
                raise

        if review is not None:
            problems = _missing_variants(lambda name: getattr(review, name))
        else:
            problems = _missing_variants(lambda name: _raw_value(data, name))
        line_errors.extend(
            {"type": PydanticCustomError("missing_variant", problem), "loc": (), "input": data}
            for problem in problems
        )

        if line_errors:
            raise ValidationError.from_exception_data(cls.__name__, line_errors)
        return review  # type: ignore[return-value]


class ReviewUpdate(ReviewFields):
    """
    Schema for updating a review.

    Fields left out keep their stored value; explicit null clears optional
    fields. The merged record is validated with ReviewCreate rules.
    """


class LocalizedContent(CamelModel):
    """Title and content picked for one locale."""

    locale: str
    title: str
    content: str
    title_translated: bool
    content_translated: bool


class ReviewResponse(CamelModel):
    """Schema for review responses. Never carries raw image bytes."""

    id: str
    slug: str
    title: str | None = None
    title_es: str | None = None
    title_en: str | None = None
    content: str | None = None
    content_es: str | None = None
    content_en: str | None = None
    category: str
    platform: str | None = None
    rating: float | None = None
    cover_image: str | None = None
    has_image_data: bool = False
    image_mime_type: str | None = None
    image_url: str | None = None
    youtube_url: str | None = None
    youtube_embed_url: str | None = None
    status: str
    author_id: str
    author_name: str | None = None
    created_at: UTCDatetime
    updated_at: UTCDatetime
    localized: LocalizedContent | None = None

    @classmethod
    def from_review(
        cls,
        review: Reviews,
        author_name: str | None = None,
        locale: str | None = None,
    ) -> "ReviewResponse":
        """Build the public representation, replacing image bytes with a presence flag."""
        has_image_data = bool(review.image_data)
        video_id = extract_video_id(review.youtube_url)

        localized = None
        if locale:
            localized = LocalizedContent(
                locale=locale,
                title=resolve(review, "title", locale),
                content=resolve(review, "content", locale),
                title_translated=has_locale(review, "title", locale),
                content_translated=has_locale(review, "content", locale),
            )

        return cls(
            id=review.id,
            slug=review.slug,
            title=review.title,
            title_es=review.title_es,
            title_en=review.title_en,
            content=review.content,
            content_es=review.content_es,
            content_en=review.content_en,
            category=review.category,
            platform=review.platform,
            rating=review.rating,
            cover_image=review.cover_image,
            has_image_data=has_image_data,
            image_mime_type=review.image_mime_type,
            image_url=(
                f"/api/images/{review.id}" if has_image_data or review.cover_image else None
            ),
            youtube_url=review.youtube_url,
            youtube_embed_url=embed_url(video_id) if video_id else None,
            status=review.status,
            author_id=review.author_id,
            author_name=author_name,
            created_at=review.created_at,
            updated_at=review.updated_at,
            localized=localized,
        )


class ReviewListParams(BaseModel):
    """Query parameters for public listing."""

    category: str | None = Field(default=None, max_length=50, description="Category filter")
    limit: int | None = Field(default=None, ge=1, le=100, description="Maximum number of reviews")
    locale: Literal["es", "en"] | None = Field(default=None, description="Locale for display text")


class AdminReviewListParams(BaseModel):
    """Query parameters for the admin listing."""

    category: str | None = Field(default=None, max_length=50)
    status: ReviewStatusValue | None = None
    limit: int | None = Field(default=None, ge=1, le=100)


class CategoryPlatforms(CamelModel):
    category: str
    platforms: list[str]


class CategoriesResponse(CamelModel):
    """Published categories with the platforms used in each."""

    categories: list[CategoryPlatforms]
    has_reviews: bool
