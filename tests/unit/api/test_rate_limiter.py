"""
Unit tests for the rate limiter stores.
"""

from unittest.mock import MagicMock

import pytest
import redis

from safercosmetics.api.config import APISettings
from safercosmetics.api.services.rate_limiter import (
    InMemoryRateLimiter,
    RedisRateLimiter,
    create_rate_limiter,
)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return InMemoryRateLimiter(max_requests=3, window_seconds=60, max_clients=100, clock=clock)


class TestInMemoryRateLimiter:
    def test_allows_up_to_limit(self, limiter):
        results = [limiter.check("products:1.2.3.4") for _ in range(4)]

        assert [r.allowed for r in results] == [True, True, True, False]
        assert [r.count for r in results] == [1, 2, 3, 4]
        assert results[2].remaining == 0

    def test_window_resets_after_expiry(self, limiter, clock):
        for _ in range(4):
            limiter.check("products:1.2.3.4")

        clock.advance(60)
        result = limiter.check("products:1.2.3.4")

        assert result.allowed
        assert result.count == 1

    def test_retry_after_counts_down(self, limiter, clock):
        limiter.check("companies:a")
        clock.advance(45.5)

        assert limiter.check("companies:a").retry_after == 15

    def test_keys_are_independent(self, limiter):
        for _ in range(4):
            limiter.check("products:a")

        assert limiter.check("products:b").allowed
        assert limiter.check("companies:a").allowed

    def test_least_recently_seen_client_is_evicted(self, clock):
        limiter = InMemoryRateLimiter(max_requests=1, window_seconds=60, max_clients=2, clock=clock)
        limiter.check("a")
        limiter.check("b")
        limiter.check("a")
        limiter.check("c")

        assert len(limiter) == 2
        # "b" was dropped, so it starts a fresh window
        assert limiter.check("b").count == 1
        # "a" was dropped when "b" came back
        assert limiter.check("a").count == 1

    def test_reset(self, limiter):
        limiter.check("a")
        limiter.reset()

        assert len(limiter) == 0


class TestRedisRateLimiter:
    def _client(self, count, ttl):
        client = MagicMock()
        client.pipeline.return_value.execute.return_value = [count, ttl]
        return client

    def test_first_request_sets_expiry(self):
        client = self._client(1, -1)
        limiter = RedisRateLimiter(client, max_requests=2, window_seconds=60)

        result = limiter.check("products:1.2.3.4")

        assert result.allowed
        assert result.retry_after == 60
        client.pipeline.return_value.incr.assert_called_once_with("ratelimit:products:1.2.3.4")
        client.expire.assert_called_once_with("ratelimit:products:1.2.3.4", 60)

    def test_over_limit(self):
        client = self._client(3, 42)
        limiter = RedisRateLimiter(client, max_requests=2, window_seconds=60)

        result = limiter.check("products:1.2.3.4")

        assert not result.allowed
        assert result.retry_after == 42
        client.expire.assert_not_called()

    def test_fails_open_when_redis_is_down(self):
        client = MagicMock()
        client.pipeline.return_value.execute.side_effect = redis.ConnectionError("refused")
        limiter = RedisRateLimiter(client, max_requests=2, window_seconds=60)

        assert limiter.check("products:1.2.3.4").allowed


class TestCreateRateLimiter:
    def test_memory_backend(self):
        settings = APISettings(API_RATE_LIMIT_REQUESTS=5, API_RATE_LIMIT_MAX_CLIENTS=50)

        limiter = create_rate_limiter(settings)

        assert isinstance(limiter, InMemoryRateLimiter)
        assert limiter.max_requests == 5
        assert limiter.max_clients == 50

    def test_redis_backend(self):
        settings = APISettings(API_RATE_LIMIT_BACKEND="redis")

        assert isinstance(create_rate_limiter(settings), RedisRateLimiter)


def test_default_window_allows_hundred_requests(clock):
    limiter = InMemoryRateLimiter(clock=clock)

    results = [limiter.check("products:203.0.113.5") for _ in range(101)]

    assert all(r.allowed for r in results[:100])
    assert not results[100].allowed

    clock.advance(60)
    assert limiter.check("products:203.0.113.5").allowed
