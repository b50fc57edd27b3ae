"""
Product domain values.
Status literals, the derived risk level and display helpers.
"""

from enum import Enum
from typing import Optional, Union


class ProductStatus(str, Enum):
    """Product notification status options."""

    NOTIFIED = "notified"
    APPROVED = "approved"
    CANCELLED = "cancelled"
    NOT_FOUND = "not_found"


class RiskLevel(str, Enum):
    """Risk level derived from product status."""

    SAFE = "safe"
    UNSAFE = "unsafe"
    UNKNOWN = "unknown"


SAFE_STATUSES = frozenset({ProductStatus.NOTIFIED.value, ProductStatus.APPROVED.value})


def normalize_status(status: Union[str, ProductStatus, None]) -> str:
    """Lower-case a stored status ('Cancelled' -> 'cancelled')."""
    if status is None:
        return ""
    if isinstance(status, ProductStatus):
        return status.value
    return str(status).strip().lower()


def calculate_risk_level(status: Union[str, ProductStatus, None]) -> RiskLevel:
    """
    Derive the risk level for a product status.

    approved/notified -> safe, cancelled -> unsafe, anything else -> unknown.
    """
    value = normalize_status(status)
    if value in SAFE_STATUSES:
        return RiskLevel.SAFE
    if value == ProductStatus.CANCELLED.value:
        return RiskLevel.UNSAFE
    return RiskLevel.UNKNOWN


def is_cancelled(status: Union[str, ProductStatus, None]) -> bool:
    return normalize_status(status) == ProductStatus.CANCELLED.value


def format_cancellation_reason(reason: Optional[str]) -> str:
    """Capitalise the reason and make sure it ends with a period."""
    if not reason or not reason.strip():
        return "Reason not specified"

    reason = reason.strip()
    formatted = reason[0].upper() + reason[1:]
    return formatted if formatted.endswith(".") else formatted + "."
