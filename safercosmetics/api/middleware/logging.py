"""
Request Logging Middleware
One log record per request, tagged with the client identifier used for rate
limiting and a request ID.
"""

import logging
import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..dependencies import get_client_ip

logger = logging.getLogger(__name__)

QUIET_PATHS = frozenset({"/api/health"})


def _level_for(status_code: int, path: str) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    if path in QUIET_PATHS:
        return logging.DEBUG
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log HTTP requests.

    4xx responses (validation failures, missing records, rate limiting) are
    logged as warnings and 5xx as errors. Health probes are logged at debug.
    The request ID is taken from X-Request-ID or generated, and echoed back.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        client = get_client_ip(request)
        path = request.url.path
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"{request.method} {path} raised after {(time.perf_counter() - start) * 1000:.1f}ms",
                extra={"request_id": request_id, "client": client, "path": path},
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        logger.log(
            _level_for(response.status_code, path),
            f"{request.method} {path} -> {response.status_code} ({duration_ms:.1f}ms) client={client}",
            extra={
                "request_id": request_id,
                "client": client,
                "path": path,
                "query": request.url.query or None,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        response.headers["X-Request-ID"] = request_id
        return response
