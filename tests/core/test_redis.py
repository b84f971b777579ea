"""Tests for the upload rate limiter."""
from unittest.mock import AsyncMock, patch

import pytest

from fitcoach.core.redis import RateLimiter, _memory_counters


@pytest.fixture(autouse=True)
def clear_memory_counters():
    """Clear the memory counters before and after each test."""
    _memory_counters.clear()
    yield
    _memory_counters.clear()


@pytest.fixture
def mock_redis_unavailable():
    """Mock Redis as unavailable (use memory fallback)."""
    with patch("fitcoach.core.redis.get_redis", return_value=None):
        yield


class TestRateLimiterMemoryFallback:
    """Tests for RateLimiter without Redis."""

    async def test_allows_requests_within_limit(self, mock_redis_unavailable):
        for expected in range(1, 4):
            allowed, count = await RateLimiter.check_rate_limit("client-1", "upload_url", max_requests=3)
            assert allowed is True
            assert count == expected

    async def test_blocks_requests_over_limit(self, mock_redis_unavailable):
        for _ in range(3):
            await RateLimiter.check_rate_limit("client-1", "upload_url", max_requests=3)

        allowed, count = await RateLimiter.check_rate_limit("client-1", "upload_url", max_requests=3)

        assert allowed is False
        assert count == 4

    async def test_counters_are_per_identifier(self, mock_redis_unavailable):
        for _ in range(3):
            await RateLimiter.check_rate_limit("client-1", "upload_url", max_requests=3)

        allowed, count = await RateLimiter.check_rate_limit("client-2", "upload_url", max_requests=3)

        assert allowed is True
        assert count == 1

    async def test_window_expiry_resets_counter(self, mock_redis_unavailable):
        await RateLimiter.check_rate_limit("client-1", "upload_url", max_requests=1, window_seconds=0)

        allowed, count = await RateLimiter.check_rate_limit(
            "client-1", "upload_url", max_requests=1, window_seconds=0
        )

        assert allowed is True
        assert count == 1

    async def test_get_remaining(self, mock_redis_unavailable):
        assert await RateLimiter.get_remaining("client-1", "upload_url", max_requests=5) == 5

        await RateLimiter.check_rate_limit("client-1", "upload_url", max_requests=5)
        await RateLimiter.check_rate_limit("client-1", "upload_url", max_requests=5)

        assert await RateLimiter.get_remaining("client-1", "upload_url", max_requests=5) == 3

    async def test_expired_counters_are_evicted(self, mock_redis_unavailable):
        _memory_counters["ratelimit:upload_url:departed"] = (7, 0.0)

        await RateLimiter.check_rate_limit("client-1", "upload_url", max_requests=5)

        assert "ratelimit:upload_url:departed" not in _memory_counters
        assert _memory_counters["ratelimit:upload_url:client-1"][0] == 1

    async def test_live_counters_survive_eviction(self, mock_redis_unavailable):
        await RateLimiter.check_rate_limit("client-1", "upload_url", max_requests=5)

        await RateLimiter.check_rate_limit("client-2", "upload_url", max_requests=5)

        assert _memory_counters["ratelimit:upload_url:client-1"][0] == 1


class TestRateLimiterRedis:
    """Tests for RateLimiter against a Redis client."""

    async def test_first_hit_sets_expiry(self):
        client = AsyncMock()
        client.incr.return_value = 1

        with patch("fitcoach.core.redis.get_redis", return_value=client):
            allowed, count = await RateLimiter.check_rate_limit(
                "client-1", "upload_url", max_requests=2, window_seconds=60
            )

        assert (allowed, count) == (True, 1)
        client.expire.assert_awaited_once_with("ratelimit:upload_url:client-1", 60)

    async def test_over_limit(self):
        client = AsyncMock()
        client.incr.return_value = 3

        with patch("fitcoach.core.redis.get_redis", return_value=client):
            allowed, count = await RateLimiter.check_rate_limit("client-1", "upload_url", max_requests=2)

        assert (allowed, count) == (False, 3)
        client.expire.assert_not_awaited()
