"""
Double-submit CSRF protection.

A token is issued to an authenticated caller both in the response body and
as an HTTP-only cookie. State-changing requests must echo it back in the
X-CSRF-Token header; the header and cookie values must be identical.
"""

from dataclasses import dataclass

from fastapi import Response, status

from app.config import settings
from app.core.security import csrf_tokens_match

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


@dataclass(frozen=True)
class CsrfResult:
    """Outcome of a CSRF check. ``status_code`` is set only on failure."""

    passed: bool
    status_code: int | None = None
    reason: str | None = None


CSRF_PASS = CsrfResult(passed=True)


def validate_csrf(
    method: str,
    session_present: bool,
    header_token: str | None,
    cookie_token: str | None,
) -> CsrfResult:
    """
    Check a request against the double-submit rule.

    Safe methods always pass. State-changing requests need a session (401
    otherwise) and matching header and cookie tokens (403 otherwise).

    Args:
        method: HTTP method
        session_present: Whether the request carries a valid session token
        header_token: Value of the CSRF header, if any
        cookie_token: Value of the CSRF cookie, if any

    Returns:
        CsrfResult
    """
    if method.upper() in SAFE_METHODS:
        return CSRF_PASS

    if not session_present:
        return CsrfResult(False, status.HTTP_401_UNAUTHORIZED, "Unauthorized")

    if not header_token or not cookie_token:
        return CsrfResult(False, status.HTTP_403_FORBIDDEN, "CSRF token missing")

    if not csrf_tokens_match(header_token, cookie_token):
        return CsrfResult(False, status.HTTP_403_FORBIDDEN, "Invalid CSRF token")

    return CSRF_PASS


def set_csrf_cookie(response: Response, token: str) -> None:
    """Store the issued token in an HTTP-only cookie valid for the whole origin."""
    response.set_cookie(
        key=settings.CSRF_COOKIE_NAME,
        value=token,
        httponly=True,  # Prevent JavaScript access (XSS protection)
        secure=settings.ENVIRONMENT == "production",  # HTTPS only in production
        samesite="lax",
        path="/",
        max_age=settings.CSRF_TOKEN_MAX_AGE,
    )
