"""Fixed-window submission counters backed by Redis.

Each key counts completed submissions. The first increment starts the
window by setting the key's TTL; the window resets when the key expires.

Key format: ``{prefix}:{kind}:{identity}``, e.g. ``feedback:ip:<sha256>``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    """State of one window counter."""

    allowed: bool
    count: int
    limit: int
    remaining: int
    reset_at: datetime


class WindowRateLimiter:
    """Redis INCR/EXPIRE window counter.

    Errors from Redis are not caught here; callers decide whether to fail
    open or closed.
    """

    def __init__(self, redis_client: Any, prefix: str = "feedback") -> None:
        self._redis = redis_client
        self._prefix = prefix

    def key(self, kind: str, identity: str) -> str:
        return f"{self._prefix}:{kind}:{identity}"

    async def _reset_at(self, key: str, window_seconds: int) -> datetime:
        ttl = await self._redis.ttl(key)
        seconds = ttl if ttl and ttl > 0 else window_seconds
        return datetime.now(timezone.utc) + timedelta(seconds=seconds)

    async def peek(self, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        """Read the current window without counting a new hit.

        Allowed while fewer than ``limit`` hits were recorded in the window.
        """
        raw = await self._redis.get(key)
        count = int(raw) if raw else 0
        reset_at = await self._reset_at(key, window_seconds)
        return RateLimitResult(
            allowed=count < limit,
            count=count,
            limit=limit,
            remaining=max(0, limit - count),
            reset_at=reset_at,
        )

    async def hit(self, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        """Count one hit and report whether it stayed within the limit."""
        count = await self._redis.incr(key)
        if count == 1:
            await self._redis.expire(key, window_seconds)

        ttl = await self._redis.ttl(key)
        if ttl is None or ttl < 0:
            # Key survived without an expiry (e.g. EXPIRE lost); restart the window
            await self._redis.expire(key, window_seconds)
            ttl = window_seconds

        return RateLimitResult(
            allowed=count <= limit,
            count=count,
            limit=limit,
            remaining=max(0, limit - count),
            reset_at=datetime.now(timezone.utc) + timedelta(seconds=ttl),
        )
