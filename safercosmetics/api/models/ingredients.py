"""
Ingredient Models
Pydantic models for banned ingredient endpoints.
"""

from datetime import date
from typing import List, Optional

from pydantic import Field

from .common import APIModel, Pagination
from .products import ProductSummary


class IngredientItem(APIModel):
    """Banned ingredient joined with its metrics."""

    id: int
    name: str
    alternative_names: Optional[str] = None
    health_risk_description: str
    regulatory_status: Optional[str] = None
    ewg_rating: Optional[int] = Field(None, description="EWG hazard rating (1-10)")
    occurrences_count: Optional[int] = None
    first_appearance_date: Optional[date] = None
    last_appearance_date: Optional[date] = None
    risk_score: Optional[float] = None


class IngredientDetail(IngredientItem):
    source_url: Optional[str] = None
    pubchem_cid: Optional[int] = None
    pubchem_url: Optional[str] = None


class IngredientListData(APIModel):
    ingredients: List[IngredientItem]
    total: int
    pagination: Pagination


class IngredientDetailData(APIModel):
    ingredient: IngredientDetail
    affected_products: List[ProductSummary]
