"""Redis client and request throttling for upload URL issuance."""
import logging
import time

import redis.asyncio as redis
from redis.exceptions import RedisError

from fitcoach.config.settings import settings

logger = logging.getLogger(__name__)

# In-memory fallback for development when Redis is not available
_memory_counters: dict[str, tuple[int, float]] = {}
_use_memory_fallback = False
_client: redis.Redis | None = None


async def get_redis() -> redis.Redis | None:
    """Get the shared Redis client, or None when falling back to memory."""
    global _use_memory_fallback, _client

    if _use_memory_fallback:
        return None
    if _client is not None:
        return _client

    try:
        pool = redis.ConnectionPool.from_url(settings.REDIS_URL, decode_responses=True)
        client = redis.Redis(connection_pool=pool)
        await client.ping()
    except (RedisError, OSError) as e:
        logger.warning(f"Redis not available, using in-memory fallback: {e}")
        _use_memory_fallback = True
        return None

    _client = client
    return _client


def use_memory_fallback() -> None:
    """Force the in-memory backend (tests, local runs without Redis)."""
    global _use_memory_fallback
    _use_memory_fallback = True
    _memory_counters.clear()


class RateLimiter:
    """Fixed-window rate limiter keyed by action and actor."""

    RATE_LIMIT_PREFIX = "ratelimit:"

    @classmethod
    def _key(cls, identifier: str, action: str) -> str:
        return f"{cls.RATE_LIMIT_PREFIX}{action}:{identifier}"

    @classmethod
    async def check_rate_limit(
        cls,
        identifier: str,
        action: str,
        max_requests: int,
        window_seconds: int = 3600,
    ) -> tuple[bool, int]:
        """Count one request and report whether it is within the limit.

        Args:
            identifier: Unique identifier (e.g., client user id)
            action: Action being rate limited (e.g., "upload_url")
            max_requests: Maximum requests allowed in the window
            window_seconds: Time window in seconds (default: 1 hour)

        Returns:
            Tuple of (is_allowed, current_count)
        """
        key = cls._key(identifier, action)
        client = await get_redis()

        if client:
            current = await client.incr(key)
            if current == 1:
                await client.expire(key, window_seconds)
            return current <= max_requests, current

        now = time.time()
        count, expiry = _memory_counters.get(key, (0, 0.0))
        if now >= expiry:
            count, expiry = 0, now + window_seconds
            for stale in [k for k, (_, exp) in _memory_counters.items() if exp <= now]:
                del _memory_counters[stale]
        count += 1
        _memory_counters[key] = (count, expiry)
        return count <= max_requests, count

    @classmethod
    async def get_remaining(cls, identifier: str, action: str, max_requests: int) -> int:
        """Get remaining requests in the current window."""
        key = cls._key(identifier, action)
        client = await get_redis()

        if client:
            current = await client.get(key)
            if current is None:
                return max_requests
            return max(0, max_requests - int(current))

        count, expiry = _memory_counters.get(key, (0, 0.0))
        if time.time() >= expiry:
            return max_requests
        return max(0, max_requests - count)
