"""
HTTP error taxonomy for the review API.

Each error is an ``HTTPException`` so routes and dependencies can raise them
directly and FastAPI renders them as ``{"detail": ...}`` with the right status.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, NoResultFound

from app.core.logging import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_DETAIL = "Internal server error"


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ValidationFailed(HTTPException):
    """400 carrying every violated constraint, joined into one message."""

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages = list(messages)
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="; ".join(self.messages) or "Validation failed",
        )


def format_validation_errors(errors: Sequence[Mapping[str, Any]]) -> list[str]:
    """
    Turn pydantic error dicts into readable "field: message" strings.

    Args:
        errors: Output of ``ValidationError.errors()`` / ``RequestValidationError.errors()``

    Returns:
        One message per violated constraint
    """
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        msg = str(error.get("msg", "Invalid value"))
        msg = msg.removeprefix("Value error, ")
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


def classify_persistence_error(exc: Exception, **context: object) -> HTTPException:
    """
    Map a persistence-layer failure onto the HTTP error taxonomy.

    Unique constraint violations become 409, missing rows 404. Anything else
    becomes a generic 500; the underlying cause is only logged.

    Args:
        exc: Exception raised by the database layer
        **context: Extra fields for the server-side log entry

    Returns:
        HTTPException to raise to the caller
    """
    message = str(exc).lower()

    if isinstance(exc, IntegrityError) or "unique" in message or "duplicate" in message:
        logger.info("persistence_conflict", error=str(exc), **context)
        return Conflict()

    if isinstance(exc, NoResultFound) or "not found" in message:
        return NotFound()

    logger.error(
        "persistence_error",
        error=str(exc),
        error_type=type(exc).__name__,
        **context,
    )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=GENERIC_ERROR_DETAIL,
    )
