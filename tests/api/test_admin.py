"""
Tests for admin endpoints.

Admin access is decided by the stored role, never by the role claimed in the
session token.
"""

from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import ReviewStatus, UserRole
from app.models.user import Users
from tests.conftest import create_review

BASE_TIME = datetime(2024, 3, 1, tzinfo=UTC)


async def seed(db_session: AsyncSession, author: Users) -> None:
    """Two anime, one manga, three video game reviews across all statuses."""
    seed_rows = [
        ("a1", "anime", ReviewStatus.PUBLISHED),
        ("a2", "anime", ReviewStatus.DRAFT),
        ("m1", "manga", ReviewStatus.PUBLISHED),
        ("g1", "video-games", ReviewStatus.PUBLISHED),
        ("g2", "video-games", ReviewStatus.ARCHIVED),
        ("g3", "video-games", ReviewStatus.DRAFT),
    ]
    for offset, (slug, category, status) in enumerate(seed_rows):
        await create_review(
            db_session,
            author,
            slug,
            category=category,
            status=status,
            created_at=BASE_TIME + timedelta(hours=offset),
        )


class TestAdminStats:
    """Tests for GET /api/admin/stats."""

    async def test_stats(self, client_factory, admin_user, test_user, db_session):
        await seed(db_session, test_user)
        client = await client_factory(admin_user)

        response = await client.get("/api/admin/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["totalReviews"] == 6
        assert data["animeAndMangaReviews"] == 3
        assert data["videoGameReviews"] == 3
        assert data["byStatus"] == {"draft": 2, "published": 3, "archived": 1}

        activity = data["recentActivity"]
        assert [entry["title"] for entry in activity] == ["G3", "G2", "G1", "M1", "A2"]
        assert activity[0]["action"] == "Updated"
        assert activity[0]["authorName"] == "Ana Autora"
        assert activity[0]["status"] == "draft"

    async def test_empty_stats(self, client_factory, admin_user):
        client = await client_factory(admin_user)

        response = await client.get("/api/admin/stats")

        assert response.json() == {
            "totalReviews": 0,
            "animeAndMangaReviews": 0,
            "videoGameReviews": 0,
            "byStatus": {"draft": 0, "published": 0, "archived": 0},
            "recentActivity": [],
        }

    async def test_regular_user_forbidden(self, client_factory, test_user):
        client = await client_factory(test_user)

        response = await client.get("/api/admin/stats")

        assert response.status_code == 403

    async def test_claimed_admin_role_is_not_trusted(self, client_factory, test_user):
        """A token claiming admin for a stored 'user' is still refused."""
        client = await client_factory(test_user, role_claim=UserRole.ADMIN)

        response = await client.get("/api/admin/stats")

        assert response.status_code == 403

    async def test_promotion_applies_without_new_token(
        self, client_factory, test_user, db_session
    ):
        """Role changes take effect on the next request."""
        client = await client_factory(test_user)
        test_user.role = UserRole.ADMIN
        await db_session.commit()

        response = await client.get("/api/admin/stats")

        assert response.status_code == 200

    async def test_anonymous(self, client):
        response = await client.get("/api/admin/stats")

        assert response.status_code == 401


class TestAdminListReviews:
    """Tests for GET /api/admin/reviews."""

    async def test_lists_every_status_newest_first(
        self, client_factory, admin_user, test_user, db_session
    ):
        await seed(db_session, test_user)
        client = await client_factory(admin_user)

        response = await client.get("/api/admin/reviews")

        assert response.status_code == 200
        assert [r["slug"] for r in response.json()] == ["g3", "g2", "g1", "m1", "a2", "a1"]

    async def test_filters(self, client_factory, admin_user, test_user, db_session):
        await seed(db_session, test_user)
        client = await client_factory(admin_user)

        response = await client.get(
            "/api/admin/reviews", params={"status": "draft", "category": "video-games"}
        )

        assert [r["slug"] for r in response.json()] == ["g3"]

    async def test_invalid_status_filter(self, client_factory, admin_user):
        client = await client_factory(admin_user)

        response = await client.get("/api/admin/reviews", params={"status": "deleted"})

        assert response.status_code == 400

    async def test_regular_user_forbidden(self, client_factory, test_user):
        client = await client_factory(test_user)

        response = await client.get("/api/admin/reviews")

        assert response.status_code == 403
