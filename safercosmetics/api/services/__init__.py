"""
API Services
Business logic services for API endpoints.
"""

from .alternatives_service import AlternativesService
from .rate_limiter import (
    InMemoryRateLimiter,
    RateLimiter,
    RateLimitResult,
    RedisRateLimiter,
    get_rate_limiter,
    reset_rate_limiter,
)

__all__ = [
    "AlternativesService",
    "InMemoryRateLimiter",
    "RateLimiter",
    "RateLimitResult",
    "RedisRateLimiter",
    "get_rate_limiter",
    "reset_rate_limiter",
]
