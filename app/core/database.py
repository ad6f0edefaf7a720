"""
Database configuration and session management.

The persistence handle is an explicit object owned by the application
instance (``app.state.database``) rather than a module-level engine, so its
lifecycle follows process startup and shutdown.
"""

from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from app.config import Settings


class Database:
    """Async engine plus session factory for one application instance."""

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any) -> None:
        if url.startswith("sqlite"):
            # In-memory SQLite must share one connection across sessions
            engine_kwargs.setdefault("poolclass", StaticPool)
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        else:
            engine_kwargs.setdefault("pool_pre_ping", True)  # Verify connections before using
            engine_kwargs.setdefault("pool_recycle", 3600)

        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the handle from application settings."""
        if settings.DATABASE_URL.startswith("sqlite"):
            return cls(settings.DATABASE_URL, echo=settings.DB_ECHO)
        return cls(
            settings.DATABASE_URL,
            echo=settings.DB_ECHO,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )

    def session(self) -> AsyncSession:
        """
        Get a standalone async session.

        Use with 'async with':
            async with database.session() as db:
                await db.execute(...)
                await db.commit()

        Note: Caller is responsible for committing/rolling back.
        """
        return self.session_factory()

    async def create_all(self) -> None:
        """Create all tables registered on the SQLModel metadata."""
        # Import models so their tables are registered
        import app.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database sessions.

    Usage in FastAPI:
        @router.get("/items")
        async def read_items(db: Annotated[AsyncSession, Depends(get_db)]):
            result = await db.execute(select(Item))
            return result.scalars().all()
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
