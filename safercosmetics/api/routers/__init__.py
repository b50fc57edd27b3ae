"""
API Routers
FastAPI route handlers for different endpoints.
"""

from .companies import router as companies_router
from .health import router as health_router
from .ingredients import router as ingredients_router
from .products import router as products_router

__all__ = [
    "health_router",
    "products_router",
    "companies_router",
    "ingredients_router",
]
