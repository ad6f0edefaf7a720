import redis.asyncio as redis

from app.config import settings


def create_redis_client(url: str | None = None) -> redis.Redis:  # type: ignore[type-arg]
    """
    Build an async redis client for the shared rate-limit store.

    The client is owned by the application instance and closed at shutdown.
    """
    return redis.from_url(
        str(url or settings.REDIS_URL),
        encoding="utf-8",
        decode_responses=True,
    )
