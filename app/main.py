"""
FastAPI Application - Review API
Backend for the multilingual anime, manga and video game review blog
"""

import asyncio
import contextlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import router as api_router
from app.config import settings
from app.core.database import Database
from app.core.errors import GENERIC_ERROR_DETAIL, ValidationFailed, format_validation_errors
from app.core.logging import configure_logging, get_logger
from app.core.middleware import AdmissionMiddleware
from app.core.redis import create_redis_client
from app.services.rate_limit import (
    InMemoryRateLimitStore,
    RateLimiter,
    RateLimitStore,
    RedisRateLimitStore,
)

logger = get_logger(__name__)


def build_rate_limiter(redis_client=None) -> RateLimiter:  # type: ignore[no-untyped-def]
    """Rate limiter backed by redis when configured, else by process memory."""
    store: RateLimitStore
    if redis_client is not None:
        store = RedisRateLimitStore(redis_client)
    else:
        store = InMemoryRateLimitStore()
    return RateLimiter(
        store,
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup and shutdown events"""
    # Startup
    configure_logging()
    logger.info(
        "api_starting",
        environment=settings.ENVIRONMENT,
        database=(
            settings.DATABASE_URL.split("@")[1] if "@" in settings.DATABASE_URL else "configured"
        ),
        rate_limit_backend=settings.RATE_LIMIT_BACKEND,
    )

    limiter: RateLimiter = app.state.rate_limiter
    sweeper = asyncio.create_task(
        limiter.run_sweeper(settings.RATE_LIMIT_SWEEP_INTERVAL_SECONDS),
        name="rate-limit-sweeper",
    )
    try:
        yield
    finally:
        # Shutdown
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper

        redis_client = app.state.redis
        if redis_client is not None:
            await redis_client.aclose()
        await app.state.database.dispose()
        logger.info("api_stopped")


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render request and merged-record validation failures as one 400 message."""
    if isinstance(exc, ValidationFailed):
        messages = exc.messages
    else:
        messages = format_validation_errors(exc.errors())  # type: ignore[attr-defined]
    return JSONResponse(
        status_code=400,
        content={"detail": "; ".join(messages) or "Validation failed", "errors": messages},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Never leak internals; the cause goes to the server log only."""
    logger.exception(
        "unhandled_exception",
        method=request.method,
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return JSONResponse(status_code=500, content={"detail": GENERIC_ERROR_DETAIL})


def create_app(
    database: Database | None = None,
    rate_limiter: RateLimiter | None = None,
) -> FastAPI:
    """
    Build the application with its own persistence handle and rate limiter.

    Args:
        database: Persistence handle; built from settings when omitted
        rate_limiter: Admission rate limiter; built from settings when omitted
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Multilingual anime, manga and video game review blog",
        version=settings.VERSION,
        debug=settings.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    redis_client = None
    if rate_limiter is None:
        if settings.RATE_LIMIT_BACKEND == "redis":
            redis_client = create_redis_client()
        rate_limiter = build_rate_limiter(redis_client)

    app.state.database = database or Database.from_settings(settings)
    app.state.rate_limiter = rate_limiter
    app.state.redis = redis_client
    app.state.slug_lock = asyncio.Lock()

    app.add_middleware(AdmissionMiddleware)
    # Outermost, so admission rejections carry CORS headers too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationFailed, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint - API information"""
        return {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "status": "running",
            "docs": "/docs",
        }

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint"""
        return {"status": "healthy"}

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
