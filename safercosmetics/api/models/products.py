"""
Product Models
Pydantic models for product search and alternatives endpoints.
"""

from datetime import date
from typing import List, Optional

from pydantic import Field, computed_field

from .common import APIModel, Pagination
from ...models.product import (
    RiskLevel,
    calculate_risk_level,
    format_cancellation_reason,
    is_cancelled,
)


class CompanyRef(APIModel):
    id: int
    name: str


class ProductSummary(APIModel):
    """Product with its risk level derived from status at read time."""

    id: int
    notif_no: str = Field(..., description="Regulator notification number")
    name: str
    category: str
    status: str
    reason_for_cancellation: Optional[str] = None
    date_notified: Optional[date] = None
    is_vertically_integrated: bool = False
    recency_score: Optional[float] = None
    applicant_company: Optional[CompanyRef] = None

    @computed_field(alias="riskLevel")
    @property
    def risk_level(self) -> RiskLevel:
        return calculate_risk_level(self.status)

    @computed_field(alias="formattedReason")
    @property
    def formatted_reason(self) -> Optional[str]:
        """Display form of the cancellation reason; null unless cancelled."""
        if not is_cancelled(self.status):
            return None
        return format_cancellation_reason(self.reason_for_cancellation)


class AlternativeProduct(ProductSummary):
    """A safer product suggested in place of a cancelled one."""

    brand_score: Optional[float] = None
    category_risk_score: Optional[float] = None
    relevance_score: Optional[float] = None


class ProductSearchData(APIModel):
    products: List[ProductSummary]
    total: int
    pagination: Pagination
    alternatives: Optional[List[AlternativeProduct]] = None


class AlternativesData(APIModel):
    alternatives: List[AlternativeProduct]
    total: int
    message: Optional[str] = None
