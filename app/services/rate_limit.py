"""
Per-client request rate limiting.

Every client key (the caller's IP address) gets a counter and a window reset
time. The first request of a window starts a fresh counter; requests beyond
the configured maximum are denied until the window resets. Limits are global
per client, not per endpoint.

Two stores are available behind the same interface:
- InMemoryRateLimitStore: a dict guarded by an asyncio lock, for a single
  process. Expired entries are removed by a periodic sweep.
- RedisRateLimitStore: INCR + PEXPIRE, for deployments with several
  processes sharing one limit. Expiry is handled by Redis key TTLs.
"""

import asyncio
import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

import redis.asyncio as redis

from app.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RateLimitEntry:
    """Counter state for one client key."""

    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate limit check."""

    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after: int = 0

    @property
    def reset_time_iso(self) -> str:
        return datetime.fromtimestamp(self.reset_at, tz=UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


class RateLimitStore(Protocol):
    """Storage for per-key counters."""

    async def hit(self, key: str, now: float, window: float) -> RateLimitEntry | None:
        """
        Record one request for ``key`` and return the updated entry.

        Returns None when the store cannot be reached; the caller then
        admits the request.
        """
        ...

    async def sweep(self, now: float) -> int:
        """Drop expired entries and return how many were removed."""
        ...


class InMemoryRateLimitStore:
    """Process-local counters; one read-modify-write per request under a lock."""

    def __init__(self) -> None:
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    async def hit(self, key: str, now: float, window: float) -> RateLimitEntry:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None or now >= entry.reset_at:
                entry = RateLimitEntry(count=1, reset_at=now + window)
                self._entries[key] = entry
            else:
                entry.count += 1
            return RateLimitEntry(count=entry.count, reset_at=entry.reset_at)

    async def sweep(self, now: float) -> int:
        async with self._lock:
            expired = [key for key, entry in self._entries.items() if now >= entry.reset_at]
            for key in expired:
                del self._entries[key]
            return len(expired)


class RedisRateLimitStore:
    """
    Counters shared through Redis.

    Gracefully degrades if Redis is unavailable (the request is admitted).
    """

    def __init__(self, client: redis.Redis, prefix: str = "rate_limit") -> None:  # type: ignore[type-arg]
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    async def hit(self, key: str, now: float, window: float) -> RateLimitEntry | None:
        redis_key = self._key(key)
        window_ms = int(window * 1000)
        try:
            pipe = self.client.pipeline()
            pipe.incr(redis_key)
            pipe.pttl(redis_key)
            count, ttl_ms = await pipe.execute()

            if ttl_ms is None or ttl_ms < 0:
                # First request of the window (or the expiry was lost)
                await self.client.pexpire(redis_key, window_ms)
                ttl_ms = window_ms
        except Exception:
            logger.warning("rate_limit_redis_error", key=key, exc_info=True)
            return None

        return RateLimitEntry(count=int(count), reset_at=now + ttl_ms / 1000)

    async def sweep(self, now: float) -> int:
        # Keys expire on their own
        return 0


class RateLimiter:
    """
    Admission control capping requests per client within a time window.

    Args:
        store: Counter storage
        max_requests: Requests allowed per window
        window_seconds: Window length
        clock: Returns the current time in seconds (injectable for tests)
    """

    def __init__(
        self,
        store: RateLimitStore,
        max_requests: int = 120,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock

    async def check(self, client_key: str) -> RateLimitDecision:
        """
        Count one request from ``client_key`` and decide whether to admit it.

        Returns:
            RateLimitDecision; when denied, ``retry_after`` is the number of
            whole seconds until the window resets (at least 1)
        """
        now = self.clock()
        entry = await self.store.hit(client_key, now, self.window_seconds)

        if entry is None:
            return RateLimitDecision(
                allowed=True,
                limit=self.max_requests,
                remaining=self.max_requests,
                reset_at=now + self.window_seconds,
            )

        if entry.count > self.max_requests:
            retry_after = max(1, math.ceil(entry.reset_at - now))
            logger.warning(
                "rate_limit_exceeded",
                client=client_key,
                count=entry.count,
                limit=self.max_requests,
                retry_after=retry_after,
            )
            return RateLimitDecision(
                allowed=False,
                limit=self.max_requests,
                remaining=0,
                reset_at=entry.reset_at,
                retry_after=retry_after,
            )

        return RateLimitDecision(
            allowed=True,
            limit=self.max_requests,
            remaining=self.max_requests - entry.count,
            reset_at=entry.reset_at,
        )

    async def sweep(self) -> int:
        """Remove expired entries from the store."""
        removed = await self.store.sweep(self.clock())
        if removed:
            logger.debug("rate_limit_sweep", removed=removed)
        return removed

    async def run_sweeper(self, interval_seconds: float) -> None:
        """Sweep forever on a fixed interval; run as one background task."""
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await self.sweep()
            except Exception:
                logger.error("rate_limit_sweep_failed", exc_info=True)
