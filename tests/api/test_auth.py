"""
Tests for credentials authentication and CSRF token issuance.

These tests cover the /api/auth endpoints and GET /api/csrf.
"""

from app.config import settings
from app.core.security import create_session_token, verify_session_token
from tests.conftest import TEST_PASSWORD, create_user


class TestRegister:
    """Tests for POST /api/auth/register."""

    async def test_register(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "New.User@Example.com", "password": "Str0ng!Pass", "name": "Nuevo"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new.user@example.com"
        assert data["role"] == "user"
        assert "passwordHash" not in data

    async def test_duplicate_email(self, client, test_user):
        response = await client.post(
            "/api/auth/register",
            json={"email": "AUTHOR@example.com", "password": "Str0ng!Pass"},
        )

        assert response.status_code == 409

    async def test_weak_password(self, client):
        response = await client.post(
            "/api/auth/register", json={"email": "weak@example.com", "password": "password"}
        )

        assert response.status_code == 400
        assert "uppercase" in response.json()["detail"]

    async def test_invalid_email(self, client):
        response = await client.post(
            "/api/auth/register", json={"email": "not-an-email", "password": "Str0ng!Pass"}
        )

        assert response.status_code == 400


class TestLogin:
    """Tests for POST /api/auth/login."""

    async def test_login_sets_session_cookie(self, client, test_user):
        response = await client.post(
            "/api/auth/login", json={"email": test_user.email, "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == test_user.id
        assert data["expiresIn"] == settings.SESSION_EXPIRE_MINUTES * 60

        token = response.cookies[settings.SESSION_COOKIE_NAME]
        claims = verify_session_token(token)
        assert claims is not None
        assert claims.user_id == test_user.id
        assert "httponly" in response.headers["set-cookie"].lower()

    async def test_wrong_password(self, client, test_user):
        response = await client.post(
            "/api/auth/login", json={"email": test_user.email, "password": "Wr0ng!Pass"}
        )

        assert response.status_code == 401
        assert settings.SESSION_COOKIE_NAME not in response.cookies

    async def test_unknown_email(self, client):
        response = await client.post(
            "/api/auth/login", json={"email": "ghost@example.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 401

    async def test_account_without_password(self, client, db_session):
        """Accounts from the external identity provider cannot use credentials login."""
        user = await create_user(db_session, "oauth@example.com", password=None)

        response = await client.post(
            "/api/auth/login", json={"email": user.email, "password": TEST_PASSWORD}
        )

        assert response.status_code == 401


class TestSession:
    """Tests for GET /api/auth/session and POST /api/auth/logout."""

    async def test_current_session(self, client_factory, test_user):
        client = await client_factory(test_user)

        response = await client.get("/api/auth/session")

        assert response.status_code == 200
        assert response.json()["email"] == test_user.email

    async def test_bearer_header(self, client, test_user):
        token = create_session_token(test_user.id)

        response = await client.get(
            "/api/auth/session", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200

    async def test_anonymous(self, client):
        response = await client.get("/api/auth/session")

        assert response.status_code == 401

    async def test_logout_clears_cookies(self, client_factory, test_user):
        client = await client_factory(test_user)

        response = await client.post("/api/auth/logout")

        assert response.status_code == 200
        set_cookies = response.headers.get_list("set-cookie")
        assert any(c.startswith(f"{settings.SESSION_COOKIE_NAME}=") for c in set_cookies)
        assert any(c.startswith(f"{settings.CSRF_COOKIE_NAME}=") for c in set_cookies)


class TestIssueCsrfToken:
    """Tests for GET /api/csrf."""

    async def test_requires_session(self, client):
        response = await client.get("/api/csrf")

        assert response.status_code == 401

    async def test_issues_token_in_body_and_cookie(self, client_factory, test_user):
        client = await client_factory(test_user)

        response = await client.get("/api/csrf")

        assert response.status_code == 200
        token = response.json()["token"]
        assert len(token) == 64
        assert response.cookies[settings.CSRF_COOKIE_NAME] == token
        cookie_header = response.headers["set-cookie"].lower()
        assert "httponly" in cookie_header
        assert "samesite=lax" in cookie_header
        assert "max-age=86400" in cookie_header

    async def test_issued_token_authorizes_mutation(
        self, client_factory, test_user, sample_review_data
    ):
        """Echoing the issued token in the header passes the CSRF check."""
        client = await client_factory(test_user)
        token = (await client.get("/api/csrf")).json()["token"]
        client.cookies.set(settings.CSRF_COOKIE_NAME, token)
        client.headers[settings.CSRF_HEADER_NAME] = token

        response = await client.post("/api/reviews", json=sample_review_data)

        assert response.status_code == 201
