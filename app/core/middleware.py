"""
Request admission middleware.

Runs the first two stages of the request pipeline, in order:

1. Rate limit per client IP (429 with Retry-After on rejection)
2. CSRF double-submit check for state-changing API requests

Authorization and the business operation follow inside the route, through
its dependencies. Any stage that rejects short-circuits the rest.
"""

import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import settings
from app.core.auth import get_client_ip, read_session_claims
from app.core.logging import clear_request_context, get_logger, set_request_context
from app.services.csrf import validate_csrf
from app.services.rate_limit import RateLimiter

logger = get_logger(__name__)

# Paths that are never rate limited
RATE_LIMIT_EXEMPT_PATHS = {
    "/health",
    "/api/csrf",
}
RATE_LIMIT_EXEMPT_PREFIXES = ("/static/",)

# Credential login and registration happen before a session (and token) exists
CSRF_EXEMPT_PREFIXES = ("/api/auth/",)


def is_rate_limit_exempt(path: str) -> bool:
    return path in RATE_LIMIT_EXEMPT_PATHS or path.startswith(RATE_LIMIT_EXEMPT_PREFIXES)


def requires_csrf_check(path: str) -> bool:
    return path.startswith("/api/") and not path.startswith(CSRF_EXEMPT_PREFIXES)


class AdmissionMiddleware(BaseHTTPMiddleware):
    """Rate limiting then CSRF validation, before any route runs."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        path = request.url.path
        claims = read_session_claims(request)

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        set_request_context(request_id, claims.user_id if claims else None)
        try:
            rate_limit_headers: dict[str, str] = {}

            if not is_rate_limit_exempt(path):
                limiter: RateLimiter = request.app.state.rate_limiter
                decision = await limiter.check(get_client_ip(request))
                if not decision.allowed:
                    return JSONResponse(
                        status_code=429,
                        content={
                            "detail": "Rate limit exceeded. Please try again later.",
                            "resetTime": decision.reset_time_iso,
                        },
                        headers={
                            "Retry-After": str(decision.retry_after),
                            "X-RateLimit-Limit": str(decision.limit),
                            "X-RateLimit-Remaining": "0",
                            "X-RateLimit-Reset": decision.reset_time_iso,
                        },
                    )
                rate_limit_headers = {
                    "X-RateLimit-Limit": str(decision.limit),
                    "X-RateLimit-Remaining": str(decision.remaining),
                }

            if requires_csrf_check(path):
                result = validate_csrf(
                    request.method,
                    session_present=claims is not None,
                    header_token=request.headers.get(settings.CSRF_HEADER_NAME),
                    cookie_token=request.cookies.get(settings.CSRF_COOKIE_NAME),
                )
                if not result.passed:
                    logger.info(
                        "csrf_rejected",
                        method=request.method,
                        path=path,
                        reason=result.reason,
                    )
                    return JSONResponse(
                        status_code=result.status_code or 403,
                        content={"detail": result.reason},
                    )

            response = await call_next(request)
            response.headers.update(rate_limit_headers)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_request_context()
