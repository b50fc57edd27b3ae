"""
Request Timing Middleware
Adds response time headers and flags slow requests.
"""

import logging
import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to track request timing.

    Adds an X-Response-Time header and logs requests slower than
    slow_request_ms. Database calls have no timeout of their own, so this
    is where a hung query becomes visible.
    """

    def __init__(self, app, slow_request_ms: int = 300):
        """
        Initialize timing middleware.

        Args:
            app: FastAPI application
            slow_request_ms: Threshold for slow request warnings
        """
        super().__init__(app)
        self.slow_request_ms = slow_request_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and track timing."""
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        if duration_ms > self.slow_request_ms:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} ({duration_ms:.0f}ms)",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": duration_ms,
                },
            )

        return response
