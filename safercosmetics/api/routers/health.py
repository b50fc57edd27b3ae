"""
Health Check Endpoints
Endpoint for health checks and status monitoring.
"""

import logging
import time
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..config import get_settings, APISettings
from ..dependencies import get_product_repository
from ..models.health import DatabaseStatus, HealthResponse
from ...db.queries import ProductRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])

_started_at = time.monotonic()


@router.get("/health", response_model=HealthResponse)
def health_check(
    settings: APISettings = Depends(get_settings),
    repository: ProductRepository = Depends(get_product_repository),
) -> JSONResponse:
    """
    Health check.

    Counts product rows to verify the database is reachable.

    Returns:
        200 with the record count when healthy, 503 with the error otherwise
    """
    try:
        record_count = repository.count_products()
        database = DatabaseStatus(connected=True, record_count=record_count)
        health_status, status_code = "healthy", 200
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        database = DatabaseStatus(connected=False, error=str(e) or "Unknown database error")
        health_status, status_code = "unhealthy", 503

    health = HealthResponse(
        status=health_status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.version,
        environment=settings.environment,
        database=database,
        uptime=round(time.monotonic() - _started_at, 3),
    )

    return JSONResponse(
        status_code=status_code,
        content=health.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
