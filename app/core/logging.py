"""
structlog setup for the review API.

Every entry is an event name plus key/value fields, e.g.
``logger.info("review_created", review_id=..., slug=...)``. The admission
middleware binds ``request_id`` (and ``user_id`` when a session is present)
for the duration of a request, so entries written by routes, services and
error handlers carry them without passing them around.

``LOG_FORMAT=console`` renders coloured lines in development; anything else
renders one JSON object per line.
"""

import logging
import sys
from typing import cast

import structlog
from structlog.types import Processor

from app.config import settings

# Third-party loggers that drown out application events at INFO
NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite")


def _renderer() -> list[Processor]:
    if settings.ENVIRONMENT == "development" and settings.LOG_FORMAT != "json":
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def configure_logging() -> None:
    """Configure structlog and route stdlib logging to stdout at LOG_LEVEL."""
    level = getattr(logging, settings.LOG_LEVEL.upper())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            *_renderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if settings.ENVIRONMENT != "development":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger for a module; pass ``__name__``."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def set_request_context(request_id: str, user_id: str | None = None) -> None:
    """Bind request-scoped fields to every entry logged until cleared."""
    structlog.contextvars.clear_contextvars()
    if user_id:
        structlog.contextvars.bind_contextvars(request_id=request_id, user_id=user_id)
    else:
        structlog.contextvars.bind_contextvars(request_id=request_id)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
