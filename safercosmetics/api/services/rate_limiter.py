"""
Rate Limiter
Fixed-window request limiting per client identifier.

Two stores are available:
- InMemoryRateLimiter: bounded LRU of windows, local to the process
- RedisRateLimiter: INCR/EXPIRE counters shared by every worker
"""

import logging
import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

import redis

from ..config import get_settings, APISettings

logger = logging.getLogger(__name__)


@dataclass
class RateLimitResult:
    """Outcome of a single rate limit check."""

    allowed: bool
    count: int
    limit: int
    retry_after: int  # seconds until the window resets

    @property
    def remaining(self) -> int:
        return max(self.limit - self.count, 0)


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Base class for rate limit stores."""

    def __init__(self, max_requests: int, window_seconds: int):
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    def check(self, key: str) -> RateLimitResult:
        """Record one request for key and report whether it is allowed."""
        raise NotImplementedError

    def reset(self) -> None:
        """Forget all windows."""
        raise NotImplementedError


class InMemoryRateLimiter(RateLimiter):
    """
    Process-local fixed-window limiter.

    Windows live in an LRU capped at max_clients entries; the least recently
    seen client is dropped first. An expired window is replaced on the next
    request from that client.
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: int = 60,
        max_clients: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(max_requests, window_seconds)
        self.max_clients = max_clients
        self.clock = clock
        self._windows: "OrderedDict[str, _Window]" = OrderedDict()
        self._lock = threading.Lock()

    def check(self, key: str) -> RateLimitResult:
        now = self.clock()

        with self._lock:
            window = self._windows.get(key)

            if window is None or now >= window.reset_at:
                window = _Window(count=1, reset_at=now + self.window_seconds)
                self._windows[key] = window
            else:
                window.count += 1

            self._windows.move_to_end(key)
            self._evict()

            return RateLimitResult(
                allowed=window.count <= self.max_requests,
                count=window.count,
                limit=self.max_requests,
                retry_after=math.ceil(window.reset_at - now),
            )

    def _evict(self) -> None:
        while len(self._windows) > self.max_clients:
            evicted, _ = self._windows.popitem(last=False)
            logger.debug(f"Evicted rate limit window for {evicted}")

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)


class RedisRateLimiter(RateLimiter):
    """
    Fixed-window limiter backed by Redis.

    Fails open: if Redis is unreachable the request is allowed and the
    error is logged.
    """

    def __init__(
        self,
        client: "redis.Redis",
        max_requests: int = 100,
        window_seconds: int = 60,
        prefix: str = "ratelimit",
    ):
        super().__init__(max_requests, window_seconds)
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def check(self, key: str) -> RateLimitResult:
        redis_key = self._key(key)

        try:
            pipe = self.client.pipeline()
            pipe.incr(redis_key)
            pipe.ttl(redis_key)
            count, ttl = pipe.execute()

            # First hit of a window, or a key that lost its expiry
            if count == 1 or ttl is None or ttl < 0:
                self.client.expire(redis_key, self.window_seconds)
                ttl = self.window_seconds

        except redis.RedisError as e:
            logger.warning(f"Rate limit check failed for '{key}', allowing request: {e}")
            return RateLimitResult(allowed=True, count=0, limit=self.max_requests, retry_after=0)

        return RateLimitResult(
            allowed=count <= self.max_requests,
            count=count,
            limit=self.max_requests,
            retry_after=int(ttl),
        )

    def reset(self) -> None:
        try:
            for redis_key in self.client.scan_iter(match=f"{self.prefix}:*"):
                self.client.delete(redis_key)
        except redis.RedisError as e:
            logger.warning(f"Failed to reset rate limit keys: {e}")


def create_rate_limiter(settings: APISettings) -> RateLimiter:
    """Build the limiter selected by settings."""
    if settings.rate_limit_backend == "redis":
        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            socket_timeout=1,
            socket_connect_timeout=1,
        )
        logger.info(
            f"Using Redis rate limiter: {settings.redis_host}:{settings.redis_port} (db={settings.redis_db})"
        )
        return RedisRateLimiter(
            client,
            max_requests=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window,
        )

    logger.info(
        f"Using in-memory rate limiter: {settings.rate_limit_requests} requests / "
        f"{settings.rate_limit_window}s, max {settings.rate_limit_max_clients} clients"
    )
    return InMemoryRateLimiter(
        max_requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window,
        max_clients=settings.rate_limit_max_clients,
    )


# Global rate limiter
_rate_limiter: Optional[RateLimiter] = None
_rate_limiter_lock = threading.Lock()


def get_rate_limiter() -> RateLimiter:
    """Get global rate limiter (singleton)."""
    global _rate_limiter
    if _rate_limiter is None:
        with _rate_limiter_lock:
            if _rate_limiter is None:
                _rate_limiter = create_rate_limiter(get_settings())
    return _rate_limiter


def reset_rate_limiter() -> None:
    """Drop the global rate limiter (useful for testing)."""
    global _rate_limiter
    _rate_limiter = None
