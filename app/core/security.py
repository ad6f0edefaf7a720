"""
Security utilities for authentication and request admission.

This module provides:
- Password hashing and verification using bcrypt
- Signed session token generation and verification (JWT)
- CSRF token generation and double-submit comparison
"""

import base64
import hashlib
import re
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt

from app.config import settings

SESSION_TOKEN_TYPE = "session"


@dataclass(frozen=True)
class SessionClaims:
    """
    Claims carried by a verified session token.

    ``role`` is a hint only. Privileged decisions re-load the user row.
    """

    user_id: str
    email: str | None
    role: str | None


def validate_password_strength(password: str) -> tuple[bool, str | None]:
    """
    Validate password meets security requirements.

    Requirements:
    - At least 8 characters
    - Contains at least one uppercase letter
    - Contains at least one lowercase letter
    - Contains at least one digit
    - Contains at least one special character

    Args:
        password: The password to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if len(password) < 8:
        return False, "Password must be at least 8 characters long"

    if not re.search(r"[A-Z]", password):
        return False, "Password must contain at least one uppercase letter"

    if not re.search(r"[a-z]", password):
        return False, "Password must contain at least one lowercase letter"

    if not re.search(r"\d", password):
        return False, "Password must contain at least one digit"

    if not re.search(r'[!@#$%^&*(),.?":{}|<>_\-+=\[\]\\\/~`]', password):
        return False, "Password must contain at least one special character"

    return True, None


def _prepare_password_for_bcrypt(password: str) -> str:
    """
    Prepare password for bcrypt by handling long passwords.

    Bcrypt has a 72 byte limit. For passwords longer than 72 bytes,
    we SHA256 hash them first and encode as base64.
    """
    password_bytes = password.encode("utf-8")

    if len(password_bytes) <= 72:
        return password

    hashed = hashlib.sha256(password_bytes).digest()
    return base64.b64encode(hashed).decode("ascii")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The bcrypt hashed password

    Returns:
        True if password matches, False otherwise
    """
    prepared_password = _prepare_password_for_bcrypt(plain_password)
    try:
        return bcrypt.checkpw(prepared_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: The plain text password to hash

    Returns:
        The bcrypt hashed password
    """
    prepared_password = _prepare_password_for_bcrypt(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(prepared_password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def create_session_token(
    user_id: str,
    email: str | None = None,
    role: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed session token.

    Args:
        user_id: The user ID to encode as the subject
        email: Email claim
        role: Role claim (informational only)
        expires_delta: Optional custom lifetime (defaults to settings.SESSION_EXPIRE_MINUTES)

    Returns:
        Encoded JWT string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)

    payload = {
        "sub": user_id,
        "email": email,
        "role": role,
        "exp": datetime.now(UTC) + expires_delta,
        "type": SESSION_TOKEN_TYPE,
    }

    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_session_token(token: str) -> SessionClaims | None:
    """
    Verify and decode a session token.

    Args:
        token: The JWT token to verify

    Returns:
        SessionClaims if the token is valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"verify_exp": True, "verify_signature": True},
        )
    except jwt.PyJWTError:
        # Expired, malformed or badly signed
        return None

    if payload.get("type") != SESSION_TOKEN_TYPE:
        return None

    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        return None

    return SessionClaims(user_id=user_id, email=payload.get("email"), role=payload.get("role"))


def generate_csrf_token() -> str:
    """
    Generate a CSRF token.

    Returns:
        256 random bits, hex-encoded (64 characters)
    """
    return secrets.token_hex(32)


def csrf_tokens_match(header_token: str, cookie_token: str) -> bool:
    """Byte-equality of the double-submitted tokens, in constant time."""
    return secrets.compare_digest(header_token.encode("utf-8"), cookie_token.encode("utf-8"))
