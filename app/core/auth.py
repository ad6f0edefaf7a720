"""
Authentication dependencies for FastAPI route protection.

This module provides dependency functions for:
- Extracting and verifying the signed session token from requests
- Loading the current user from the database
- Gating owner-or-admin and admin-only operations

Session claims are trusted only for the cheap "is someone logged in" check.
Every privileged or mutating decision re-loads the user row so role changes
take effect immediately, without waiting for a new token.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.database import get_db
from app.core.errors import Forbidden, Unauthorized
from app.core.security import SessionClaims, verify_session_token
from app.models.review import Reviews
from app.models.user import Users

# Bearer scheme for OpenAPI documentation; the cookie is the primary transport
bearer_scheme = HTTPBearer(auto_error=False)


def extract_session_token(request: Request) -> str | None:
    """
    Read the raw session token from the session cookie or a Bearer header.

    Args:
        request: Incoming request

    Returns:
        Token string, or None if the request carries none
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def read_session_claims(request: Request) -> SessionClaims | None:
    """Verify the request's session token and return its claims, if valid."""
    token = extract_session_token(request)
    if not token:
        return None
    return verify_session_token(token)


async def get_session_claims(
    request: Request,
    _credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> SessionClaims:
    """
    Require a valid session, trusting the token claims only.

    Raises:
        Unauthorized: 401 if the token is missing, invalid, or expired
    """
    claims = read_session_claims(request)
    if claims is None:
        raise Unauthorized()
    return claims


async def get_current_user(
    claims: Annotated[SessionClaims, Depends(get_session_claims)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Users:
    """
    Load the current user from the database using the verified token.

    Returns:
        User row (carrying the authoritative role)

    Raises:
        Unauthorized: 401 if the user no longer exists
    """
    result = await db.execute(select(Users).where(Users.id == claims.user_id))  # type: ignore[arg-type]
    user = result.scalar_one_or_none()

    if user is None:
        raise Unauthorized("User not found")

    return user


async def get_optional_current_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Users | None:
    """
    Get current user if authenticated, otherwise return None.

    Useful for endpoints that behave differently for anonymous callers.
    """
    claims = read_session_claims(request)
    if claims is None:
        return None
    result = await db.execute(select(Users).where(Users.id == claims.user_id))  # type: ignore[arg-type]
    return result.scalar_one_or_none()


async def require_admin(
    current_user: Annotated[Users, Depends(get_current_user)],
) -> Users:
    """
    Require current user to be an admin, per the persisted role.

    Raises:
        Forbidden: 403 if user is not an admin
    """
    if not current_user.is_admin:
        raise Forbidden("Admin privileges required")
    return current_user


def ensure_owner_or_admin(user: Users, review: Reviews) -> None:
    """
    Allow the review's author or any admin.

    Raises:
        Forbidden: 403 for anyone else
    """
    if review.author_id != user.id and not user.is_admin:
        raise Forbidden()


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    X-Forwarded-For is only honoured when the direct peer is one of
    ``settings.TRUSTED_PROXIES``; otherwise the peer address is the key.
    """
    peer = request.client.host if request.client else "unknown"
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded and peer in settings.TRUSTED_PROXIES:
        # X-Forwarded-For can contain multiple IPs, take the first (client)
        return forwarded.split(",")[0].strip()
    return peer


# Type aliases for dependency injection
Session = Annotated[SessionClaims, Depends(get_session_claims)]
CurrentUser = Annotated[Users, Depends(get_current_user)]
OptionalCurrentUser = Annotated[Users | None, Depends(get_optional_current_user)]
AdminUser = Annotated[Users, Depends(require_admin)]
