"""
Domain Models Package
Domain values shared by the API and batch scripts.
"""

from .product import (
    ProductStatus,
    RiskLevel,
    calculate_risk_level,
    format_cancellation_reason,
    is_cancelled,
)

__all__ = [
    "ProductStatus",
    "RiskLevel",
    "calculate_risk_level",
    "format_cancellation_reason",
    "is_cancelled",
]
