"""
Review repository façade.

Validates and maps review payloads onto persistence calls: create, update,
delete, public listing, search, admin listing, category catalogue and
statistics. Slugs are derived from the primary title (Spanish, then English,
then legacy) and kept unique with a numeric suffix policy.
"""

import asyncio
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import Depends, Request
from pydantic import ValidationError
from sqlalchemy import desc, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import ReviewCategory, ReviewStatus, settings
from app.core.database import get_db
from app.core.errors import (
    NotFound,
    ValidationFailed,
    classify_persistence_error,
    format_validation_errors,
)
from app.core.logging import get_logger
from app.models.review import Reviews
from app.models.user import Users
from app.schemas.review import ReviewCreate, ReviewFields, ReviewUpdate
from app.utils.slug import next_available_slug, slugify

logger = get_logger(__name__)

SEARCH_COLUMNS = (
    Reviews.title,
    Reviews.title_es,
    Reviews.title_en,
    Reviews.content,
    Reviews.content_es,
    Reviews.content_en,
)

ReviewRow = tuple[Reviews, str | None]


def primary_title(data: ReviewFields | Reviews) -> str | None:
    """Title the slug is derived from: Spanish, then English, then legacy."""
    return data.title_es or data.title_en or data.title


def _reviews_with_author_query():  # type: ignore[no-untyped-def]
    """Base query selecting reviews plus author name from users join."""
    return select(
        Reviews,
        Users.name,  # type: ignore[call-overload]
    ).join(Users, Reviews.author_id == Users.id)  # type: ignore[arg-type]


class ReviewService:
    """
    Review persistence operations for one request.

    Args:
        db: Database session owned by the request
        slug_lock: Process-wide lock serialising slug allocation with insert
    """

    def __init__(self, db: AsyncSession, slug_lock: asyncio.Lock | None = None) -> None:
        self.db = db
        self.slug_lock = slug_lock or asyncio.Lock()

    async def _commit(self, action: str, **context: object) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise classify_persistence_error(e, action=action, **context) from e

    async def allocate_slug(self, title: str | None, exclude_id: str | None = None) -> str:
        """
        Compute a unique slug for ``title``.

        Looks up every stored slug in the same family (``base`` and
        ``base-N``) and takes the next free suffix.
        """
        base = slugify(title)
        query = select(Reviews.slug).where(  # type: ignore[call-overload]
            or_(Reviews.slug == base, Reviews.slug.like(f"{base}-%"))  # type: ignore[attr-defined]
        )
        if exclude_id is not None:
            query = query.where(Reviews.id != exclude_id)
        result = await self.db.execute(query)
        return next_available_slug(base, result.scalars().all())

    async def get(self, review_id: str) -> Reviews:
        """Fetch a review by id, regardless of status."""
        review = await self.db.get(Reviews, review_id)
        if review is None:
            raise NotFound("Review not found")
        return review

    async def get_with_author(self, review_id: str) -> ReviewRow:
        result = await self.db.execute(
            _reviews_with_author_query().where(Reviews.id == review_id)  # type: ignore[no-untyped-call]
        )
        row = result.one_or_none()
        if row is None:
            raise NotFound("Review not found")
        return row[0], row[1]

    async def author_name(self, author_id: str) -> str | None:
        result = await self.db.execute(select(Users.name).where(Users.id == author_id))  # type: ignore[call-overload]
        return result.scalar_one_or_none()

    async def create(self, payload: ReviewCreate, author: Users) -> Reviews:
        """
        Persist a new review authored by ``author``.

        Either the review is stored with a fresh id, a unique slug and both
        timestamps set to now, or nothing is stored.
        """
        async with self.slug_lock:
            slug = await self.allocate_slug(primary_title(payload))
            now = datetime.now(UTC)
            review = Reviews(
                **payload.model_dump(),
                slug=slug,
                author_id=author.id,
                created_at=now,
                updated_at=now,
            )
            self.db.add(review)
            await self._commit("create_review", slug=slug)

        logger.info("review_created", review_id=review.id, slug=review.slug, author_id=author.id)
        return review

    async def update(self, review: Reviews, payload: ReviewUpdate) -> Reviews:
        """
        Apply ``payload`` to ``review``.

        Provided fields replace stored values and the merged record is
        validated with the create rules. The slug changes only when the
        primary title does. The author never changes.

        Raises:
            ValidationFailed: 400 if the merged record breaks a constraint
        """
        current = {field: getattr(review, field) for field in ReviewFields.model_fields}
        merged: dict[str, Any] = {**current, **payload.model_dump(exclude_unset=True)}
        try:
            validated = ReviewCreate.model_validate(merged)
        except ValidationError as e:
            raise ValidationFailed(format_validation_errors(e.errors())) from e

        async with self.slug_lock:
            new_title = primary_title(validated)
            if new_title != primary_title(review):
                review.slug = await self.allocate_slug(new_title, exclude_id=review.id)

            for field in ReviewFields.model_fields:
                setattr(review, field, getattr(validated, field))
            review.updated_at = datetime.now(UTC)
            await self._commit("update_review", review_id=review.id)

        logger.info("review_updated", review_id=review.id, slug=review.slug)
        return review

    async def delete(self, review: Reviews) -> None:
        """Delete permanently; nothing is kept behind."""
        review_id = review.id
        await self.db.delete(review)
        await self._commit("delete_review", review_id=review_id)
        logger.info("review_deleted", review_id=review_id)

    async def list_published(
        self, category: str | None = None, limit: int | None = None
    ) -> Sequence[ReviewRow]:
        """Published reviews, newest first."""
        query = (
            _reviews_with_author_query()  # type: ignore[no-untyped-call]
            .where(Reviews.status == ReviewStatus.PUBLISHED)
            .order_by(desc(Reviews.created_at))  # type: ignore[arg-type]
        )
        if category:
            query = query.where(Reviews.category == category)
        if limit:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return [(review, name) for review, name in result.all()]

    async def get_published_by_slug(self, slug: str) -> ReviewRow:
        result = await self.db.execute(
            _reviews_with_author_query().where(  # type: ignore[no-untyped-call]
                Reviews.slug == slug, Reviews.status == ReviewStatus.PUBLISHED
            )
        )
        row = result.one_or_none()
        if row is None:
            raise NotFound("Review not found")
        return row[0], row[1]

    async def search(self, term: str) -> Sequence[ReviewRow]:
        """Case-insensitive substring match over titles and content, published only."""
        needle = term.strip().lower()
        if not needle:
            return []
        query = (
            _reviews_with_author_query()  # type: ignore[no-untyped-call]
            .where(
                Reviews.status == ReviewStatus.PUBLISHED,
                or_(
                    *(
                        func.lower(column).contains(needle, autoescape=True)
                        for column in SEARCH_COLUMNS
                    )
                ),
            )
            .order_by(desc(Reviews.created_at))  # type: ignore[arg-type]
        )
        result = await self.db.execute(query)
        return [(review, name) for review, name in result.all()]

    async def list_all(
        self,
        category: str | None = None,
        status: str | None = None,
        limit: int | None = None,
    ) -> Sequence[ReviewRow]:
        """Every review regardless of status, newest first (admin listing)."""
        query = _reviews_with_author_query().order_by(  # type: ignore[no-untyped-call]
            desc(Reviews.created_at)  # type: ignore[arg-type]
        )
        if category:
            query = query.where(Reviews.category == category)
        if status:
            query = query.where(Reviews.status == status)
        if limit:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return [(review, name) for review, name in result.all()]

    async def categories(self) -> tuple[dict[str, list[str]], bool]:
        """
        Categories in use by published reviews, each with its platforms.

        Returns:
            Tuple of (category -> sorted platforms, whether any published review exists)
        """
        result = await self.db.execute(
            select(Reviews.category, Reviews.platform).where(  # type: ignore[call-overload]
                Reviews.status == ReviewStatus.PUBLISHED
            )
        )
        rows = result.all()

        platforms: dict[str, set[str]] = {}
        for category, platform in rows:
            if not category:
                continue
            platforms.setdefault(category, set())
            if platform:
                platforms[category].add(platform)

        return {category: sorted(values) for category, values in platforms.items()}, bool(rows)

    async def stats(self) -> dict[str, Any]:
        """Aggregate counts and the most recently updated reviews."""
        total = (await self.db.execute(select(func.count()).select_from(Reviews))).scalar() or 0

        by_category_result = await self.db.execute(
            select(Reviews.category, func.count()).group_by(Reviews.category)  # type: ignore[call-overload]
        )
        by_category = {category: count for category, count in by_category_result.all()}

        by_status_result = await self.db.execute(
            select(Reviews.status, func.count()).group_by(Reviews.status)  # type: ignore[call-overload]
        )
        by_status = {status: 0 for status in ReviewStatus.ALL}
        by_status.update({status: count for status, count in by_status_result.all()})

        recent_result = await self.db.execute(
            _reviews_with_author_query()  # type: ignore[no-untyped-call]
            .order_by(desc(Reviews.updated_at))  # type: ignore[arg-type]
            .limit(settings.RECENT_ACTIVITY_SIZE)
        )

        return {
            "total_reviews": total,
            "anime_and_manga_reviews": by_category.get(ReviewCategory.ANIME, 0)
            + by_category.get(ReviewCategory.MANGA, 0),
            "video_game_reviews": by_category.get(ReviewCategory.VIDEO_GAMES, 0),
            "by_status": by_status,
            "recent": [(review, name) for review, name in recent_result.all()],
        }


def get_review_service(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReviewService:
    """Dependency wiring the request session and the app-wide slug lock."""
    return ReviewService(db, request.app.state.slug_lock)


ReviewServiceDep = Annotated[ReviewService, Depends(get_review_service)]
