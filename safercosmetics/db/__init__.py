"""
Database Layer
ORM models, session factory and read-only query repositories.
"""

from .models import (
    Base,
    Company,
    CompanyMetrics,
    CategoryMetrics,
    Product,
    RecommendedAlternative,
    BannedIngredient,
    CancelledProductIngredient,
    BannedIngredientMetrics,
)
from .errors import DataAccessError, DataErrorKind

__all__ = [
    "Base",
    "Company",
    "CompanyMetrics",
    "CategoryMetrics",
    "Product",
    "RecommendedAlternative",
    "BannedIngredient",
    "CancelledProductIngredient",
    "BannedIngredientMetrics",
    "DataAccessError",
    "DataErrorKind",
]
