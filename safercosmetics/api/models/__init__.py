"""
Pydantic Models
Request/response models for API endpoints.
"""

from .common import ERROR_RESPONSES, APIModel, ErrorResponse, Pagination, SuccessResponse
from .products import (
    AlternativeProduct,
    AlternativesData,
    CompanyRef,
    ProductSearchData,
    ProductSummary,
)
from .companies import CompanyDetailData, CompanyItem, CompanyListData
from .ingredients import IngredientDetail, IngredientDetailData, IngredientItem, IngredientListData
from .health import DatabaseStatus, HealthResponse

__all__ = [
    "ERROR_RESPONSES",
    "APIModel",
    "ErrorResponse",
    "Pagination",
    "SuccessResponse",
    "AlternativeProduct",
    "AlternativesData",
    "CompanyRef",
    "ProductSearchData",
    "ProductSummary",
    "CompanyDetailData",
    "CompanyItem",
    "CompanyListData",
    "IngredientDetail",
    "IngredientDetailData",
    "IngredientItem",
    "IngredientListData",
    "DatabaseStatus",
    "HealthResponse",
]
