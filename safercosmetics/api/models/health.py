"""
Health Models
"""

from typing import Optional

from .common import APIModel


class DatabaseStatus(APIModel):
    connected: bool
    record_count: Optional[int] = None
    error: Optional[str] = None


class HealthResponse(APIModel):
    status: str
    timestamp: str
    version: str
    environment: str
    database: DatabaseStatus
    uptime: float
