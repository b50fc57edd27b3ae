"""
Company Models
Pydantic models for company endpoints.
"""

from datetime import date
from typing import List, Optional

from .common import APIModel, Pagination
from .products import ProductSummary


class CompanyItem(APIModel):
    """Company joined with its metrics (metrics may be missing)."""

    id: int
    name: str
    total_notifs: Optional[int] = None
    first_notified_date: Optional[date] = None
    cancelled_count: Optional[int] = None
    reputation_score: Optional[float] = None


class CompanyListData(APIModel):
    companies: List[CompanyItem]
    total: int
    pagination: Pagination


class CompanyDetailData(APIModel):
    company: CompanyItem
    recent_products: List[ProductSummary]
