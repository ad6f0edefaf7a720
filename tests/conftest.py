"""
Pytest configuration and shared fixtures.

This file provides common fixtures for all tests. Every test function gets
its own application instance backed by a fresh in-memory SQLite database, so
tests never touch a dev or prod database.
"""

import os

# Settings are read at import time; these must be set before importing app
os.environ["SECRET_KEY"] = "test-secret-key-that-is-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "development"
os.environ["RATE_LIMIT_BACKEND"] = "memory"

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from datetime import UTC, datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.config import ReviewStatus, UserRole, settings  # noqa: E402
from app.core.database import Database  # noqa: E402
from app.core.security import (  # noqa: E402
    create_session_token,
    generate_csrf_token,
    get_password_hash,
)
from app.main import create_app  # noqa: E402
from app.models.review import Reviews  # noqa: E402
from app.models.user import Users  # noqa: E402
from app.services.rate_limit import InMemoryRateLimitStore, RateLimiter  # noqa: E402

TEST_PASSWORD = "Sup3r$ecret"

ClientFactory = Callable[..., Awaitable[AsyncClient]]


@pytest.fixture(scope="function")
async def database() -> AsyncGenerator[Database, None]:
    """
    Fresh in-memory database with all tables created.

    Function-scoped so the engine lives on the same event loop as the test.
    """
    db = Database("sqlite+aiosqlite://")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture(scope="function")
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and inspecting test data directly."""
    async with database.session() as session:
        yield session


@pytest.fixture(scope="function")
def app(database: Database) -> FastAPI:
    """Application instance wired to the test database and an in-memory limiter."""
    return create_app(
        database=database,
        rate_limiter=RateLimiter(InMemoryRateLimitStore(), max_requests=1000, window_seconds=60),
    )


def authenticate(client: AsyncClient, user: Users, role_claim: str | None = None) -> AsyncClient:
    """
    Give ``client`` a session for ``user`` plus a matching CSRF cookie and header.

    ``role_claim`` overrides the role written into the token, to check that
    the server trusts the stored role instead.
    """
    token = create_session_token(user.id, email=user.email, role=role_claim or user.role)
    csrf_token = generate_csrf_token()
    client.cookies.set(settings.SESSION_COOKIE_NAME, token)
    client.cookies.set(settings.CSRF_COOKIE_NAME, csrf_token)
    client.headers[settings.CSRF_HEADER_NAME] = csrf_token
    return client


@pytest.fixture(scope="function")
async def client_factory(app: FastAPI) -> AsyncGenerator[ClientFactory, None]:
    """
    Build HTTP clients against the test app, optionally logged in.

    Usage:
        async def test_endpoint(client_factory, test_user):
            client = await client_factory(test_user)
            response = await client.get("/api/...")
    """
    clients: list[AsyncClient] = []

    async def make(user: Users | None = None, role_claim: str | None = None) -> AsyncClient:
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(client)
        if user is not None:
            authenticate(client, user, role_claim=role_claim)
        return client

    yield make

    for client in clients:
        await client.aclose()


@pytest.fixture(scope="function")
async def client(client_factory: ClientFactory) -> AsyncClient:
    """Anonymous HTTP client."""
    return await client_factory()


# ===== Database object fixtures =====


async def create_user(
    db_session: AsyncSession,
    email: str,
    name: str | None = None,
    role: str = UserRole.USER,
    password: str | None = TEST_PASSWORD,
) -> Users:
    user = Users(
        email=email,
        name=name,
        role=role,
        password_hash=get_password_hash(password) if password else None,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session: AsyncSession) -> Users:
    """Regular account with a password."""
    return await create_user(db_session, "author@example.com", name="Ana Autora")


@pytest.fixture
async def other_user(db_session: AsyncSession) -> Users:
    """Second regular account, never the author of test reviews."""
    return await create_user(db_session, "other@example.com", name="Otro Usuario")


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> Users:
    """Account whose stored role is admin."""
    return await create_user(db_session, "admin@example.com", name="Admin", role=UserRole.ADMIN)


async def create_review(
    db_session: AsyncSession,
    author: Users,
    slug: str,
    status: str = ReviewStatus.PUBLISHED,
    created_at: datetime | None = None,
    **fields: object,
) -> Reviews:
    """Insert a review directly, bypassing the API."""
    if not any(fields.get(name) for name in ("title", "title_es", "title_en")):
        fields["title_es"] = slug.replace("-", " ").title()
    if not any(fields.get(name) for name in ("content", "content_es", "content_en")):
        fields["content_es"] = "Contenido de prueba suficientemente largo."
    fields.setdefault("category", "anime")
    now = created_at or datetime.now(UTC)
    review = Reviews(
        slug=slug,
        status=status,
        author_id=author.id,
        created_at=now,
        updated_at=now,
        **fields,
    )
    db_session.add(review)
    await db_session.commit()
    await db_session.refresh(review)
    return review


@pytest.fixture
def sample_review_data() -> dict:
    """Valid create payload, as the admin client sends it."""
    return {
        "titleEs": "Hola Mundo",
        "titleEn": "Hello World",
        "contentEs": "Una reseña de prueba con suficiente texto.",
        "contentEn": "A test review with enough text in it.",
        "category": "anime",
        "rating": 8.5,
        "youtubeUrl": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    }
