"""
Credentials authentication endpoints.

Login issues a signed session token in an HTTP-only cookie. The token only
identifies the caller; roles are always re-read from the users table.
"""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import UserRole, settings
from app.core.auth import CurrentUser
from app.core.database import get_db
from app.core.errors import Conflict, Unauthorized
from app.core.logging import get_logger
from app.core.security import create_session_token, get_password_hash, verify_password
from app.models.user import Users
from app.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from app.schemas.base import MessageResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, session_token: str) -> None:
    """Set the session token as an HTTPOnly cookie."""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_token,
        httponly=True,  # Prevent JavaScript access (XSS protection)
        secure=settings.ENVIRONMENT == "production",  # HTTPS only in production
        samesite="lax",
        path="/",
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,  # Match JWT expiration
    )


def _clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")
    response.delete_cookie(key=settings.CSRF_COOKIE_NAME, path="/")


async def _find_user_by_email(db: AsyncSession, email: str) -> Users | None:
    result = await db.execute(
        select(Users).where(func.lower(Users.email) == email.lower())  # type: ignore[arg-type]
    )
    return result.scalar_one_or_none()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """
    Create an account with the default user role.

    Admin rights are never granted here; see scripts/manage_users.py.
    """
    email = payload.email.lower()
    if await _find_user_by_email(db, email):
        raise Conflict("Email already registered")

    user = Users(
        email=email,
        name=payload.name,
        password_hash=get_password_hash(payload.password),
        role=UserRole.USER,
        created_at=datetime.now(UTC),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise Conflict("Email already registered") from e

    logger.info("user_registered", user_id=user.id)
    return UserResponse.from_user(user)


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LoginResponse:
    """
    Verify email and password, then start a session.

    Accounts linked through the external identity provider have no password
    and cannot log in here.
    """
    user = await _find_user_by_email(db, credentials.email)

    if (
        user is None
        or not user.password_hash
        or not verify_password(credentials.password, user.password_hash)
    ):
        logger.info("login_failed", email_domain=credentials.email.split("@")[-1])
        raise Unauthorized("Incorrect email or password")

    session_token = create_session_token(user.id, email=user.email, role=user.role)
    _set_session_cookie(response, session_token)

    logger.info("login_succeeded", user_id=user.id)
    return LoginResponse(
        user=UserResponse.from_user(user),
        expires_in=settings.SESSION_EXPIRE_MINUTES * 60,
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """
    End the session by clearing the session and CSRF cookies.

    Tokens are stateless; a copied token stays valid until it expires.
    """
    _clear_auth_cookies(response)
    return MessageResponse(message="Successfully logged out")


@router.get("/session", response_model=UserResponse)
async def get_session(current_user: CurrentUser) -> UserResponse:
    """Return the logged-in user, with the role as currently stored."""
    return UserResponse.from_user(current_user)
