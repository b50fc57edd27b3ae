"""
Query Repositories
Read-only queries for products, companies and banned ingredients.

Name filters are case-insensitive substring matches; sort keys come from a
per-repository allow-list and unknown keys fall back to name ascending.
"""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import asc, desc, func
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.sql.elements import ColumnElement

from .errors import translate_errors
from .models import (
    BannedIngredient,
    BannedIngredientMetrics,
    CancelledProductIngredient,
    Company,
    CompanyMetrics,
    Product,
    RecommendedAlternative,
)
from ..models.product import ProductStatus, SAFE_STATUSES

logger = logging.getLogger(__name__)

RELATED_PRODUCTS_LIMIT = 10


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains(column, text: str) -> ColumnElement:
    """Case-insensitive substring match."""
    return column.ilike(f"%{escape_like(text)}%", escape="\\")


def order_clause(columns: Dict[str, ColumnElement], sort_by: str, sort_order: str):
    column = columns.get(sort_by, columns["name"])
    return desc(column) if sort_order == "desc" else asc(column)


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def _base_query(self):
        return self.db.query(Product).options(joinedload(Product.applicant_company))

    def search_products(
        self,
        query: str,
        limit: int = 10,
        offset: int = 0,
        status: Optional[ProductStatus] = None,
    ) -> Tuple[List[Product], int]:
        """
        Search products by name.

        Returns:
            (page of products, total number of matches)
        """
        filters = [contains(Product.name, query)]
        if status is not None:
            if status.value in SAFE_STATUSES:
                filters.append(func.lower(Product.status).in_(sorted(SAFE_STATUSES)))
            else:
                filters.append(func.lower(Product.status) == status.value)

        with translate_errors("product search"):
            products = (
                self._base_query()
                .filter(*filters)
                .order_by(asc(Product.name), asc(Product.id))
                .limit(limit)
                .offset(offset)
                .all()
            )
            total = self.db.query(func.count(Product.id)).filter(*filters).scalar() or 0

        logger.debug(f"Product search '{query}': {len(products)} of {total}")
        return products, total

    def get_safer_products(
        self,
        exclude_id: Optional[int] = None,
        category: Optional[str] = None,
        limit: int = 3,
    ) -> List[Product]:
        """Non-cancelled products, most recent first."""
        query = self._base_query().filter(
            func.lower(Product.status) != ProductStatus.CANCELLED.value
        )
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        if category:
            query = query.filter(func.lower(Product.category) == category.lower())

        with translate_errors("safer products lookup"):
            return (
                query.order_by(desc(Product.recency_score), asc(Product.id))
                .limit(limit)
                .all()
            )

    def get_recommended_alternatives(
        self,
        cancelled_product_id: int,
        category: Optional[str] = None,
        limit: int = 3,
    ) -> List[RecommendedAlternative]:
        """Stored recommendations for a cancelled product, best first."""
        query = (
            self.db.query(RecommendedAlternative)
            .join(Product, RecommendedAlternative.recommended_product_id == Product.id)
            .options(
                joinedload(RecommendedAlternative.recommended_product).joinedload(
                    Product.applicant_company
                )
            )
            .filter(RecommendedAlternative.cancelled_product_id == cancelled_product_id)
            .filter(func.lower(Product.status) != ProductStatus.CANCELLED.value)
        )
        if category:
            query = query.filter(func.lower(Product.category) == category.lower())

        with translate_errors("recommended alternatives lookup"):
            return (
                query.order_by(desc(RecommendedAlternative.relevance_score), asc(RecommendedAlternative.id))
                .limit(limit)
                .all()
            )

    def count_products(self) -> int:
        with translate_errors("product count"):
            return self.db.query(func.count(Product.id)).scalar() or 0


class CompanyRepository:
    SORT_COLUMNS = {
        "name": Company.name,
        "totalNotifs": CompanyMetrics.total_notifs,
        "reputationScore": CompanyMetrics.reputation_score,
        "cancelledCount": CompanyMetrics.cancelled_count,
    }

    def __init__(self, db: Session):
        self.db = db

    def _with_metrics(self):
        return self.db.query(
            Company.id.label("id"),
            Company.name.label("name"),
            CompanyMetrics.total_notifs.label("total_notifs"),
            CompanyMetrics.first_notified_date.label("first_notified_date"),
            CompanyMetrics.cancelled_count.label("cancelled_count"),
            CompanyMetrics.reputation_score.label("reputation_score"),
        ).outerjoin(CompanyMetrics, Company.id == CompanyMetrics.company_id)

    def list_companies(
        self,
        query: str = "",
        limit: int = 20,
        offset: int = 0,
        sort_by: str = "name",
        sort_order: str = "asc",
    ) -> Tuple[list, int]:
        filters = [contains(Company.name, query)] if query else []

        with translate_errors("company listing"):
            rows = (
                self._with_metrics()
                .filter(*filters)
                .order_by(order_clause(self.SORT_COLUMNS, sort_by, sort_order), asc(Company.id))
                .limit(limit)
                .offset(offset)
                .all()
            )
            total = self.db.query(func.count(Company.id)).filter(*filters).scalar() or 0

        return rows, total

    def get_company(self, company_id: int):
        with translate_errors("company lookup"):
            return self._with_metrics().filter(Company.id == company_id).first()

    def get_recent_products(self, company_id: int, limit: int = RELATED_PRODUCTS_LIMIT) -> List[Product]:
        with translate_errors("company products lookup"):
            return (
                self.db.query(Product)
                .options(joinedload(Product.applicant_company))
                .filter(Product.applicant_company_id == company_id)
                .order_by(desc(Product.date_notified), desc(Product.id))
                .limit(limit)
                .all()
            )


class IngredientRepository:
    SORT_COLUMNS = {
        "name": BannedIngredient.name,
        "occurrencesCount": BannedIngredientMetrics.occurrences_count,
        "riskScore": BannedIngredientMetrics.risk_score,
        "ewgRating": BannedIngredient.ewg_rating,
    }

    def __init__(self, db: Session):
        self.db = db

    def _with_metrics(self):
        return self.db.query(
            BannedIngredient.id.label("id"),
            BannedIngredient.name.label("name"),
            BannedIngredient.alternative_names.label("alternative_names"),
            BannedIngredient.health_risk_description.label("health_risk_description"),
            BannedIngredient.regulatory_status.label("regulatory_status"),
            BannedIngredient.source_url.label("source_url"),
            BannedIngredient.ewg_rating.label("ewg_rating"),
            BannedIngredient.pubchem_cid.label("pubchem_cid"),
            BannedIngredient.pubchem_url.label("pubchem_url"),
            BannedIngredientMetrics.occurrences_count.label("occurrences_count"),
            BannedIngredientMetrics.first_appearance_date.label("first_appearance_date"),
            BannedIngredientMetrics.last_appearance_date.label("last_appearance_date"),
            BannedIngredientMetrics.risk_score.label("risk_score"),
        ).outerjoin(
            BannedIngredientMetrics,
            BannedIngredient.id == BannedIngredientMetrics.ingredient_id,
        )

    def list_ingredients(
        self,
        query: str = "",
        limit: int = 20,
        offset: int = 0,
        sort_by: str = "name",
        sort_order: str = "asc",
    ) -> Tuple[list, int]:
        filters = [contains(BannedIngredient.name, query)] if query else []

        with translate_errors("ingredient listing"):
            rows = (
                self._with_metrics()
                .filter(*filters)
                .order_by(
                    order_clause(self.SORT_COLUMNS, sort_by, sort_order),
                    asc(BannedIngredient.id),
                )
                .limit(limit)
                .offset(offset)
                .all()
            )
            total = self.db.query(func.count(BannedIngredient.id)).filter(*filters).scalar() or 0

        return rows, total

    def get_ingredient(self, ingredient_id: int):
        with translate_errors("ingredient lookup"):
            return self._with_metrics().filter(BannedIngredient.id == ingredient_id).first()

    def get_affected_products(
        self, ingredient_id: int, limit: int = RELATED_PRODUCTS_LIMIT
    ) -> List[Product]:
        """Cancelled products that contained the ingredient, newest first."""
        with translate_errors("affected products lookup"):
            return (
                self.db.query(Product)
                .options(joinedload(Product.applicant_company))
                .join(
                    CancelledProductIngredient,
                    Product.id == CancelledProductIngredient.cancelled_product_id,
                )
                .filter(CancelledProductIngredient.banned_ingredient_id == ingredient_id)
                .order_by(desc(Product.date_notified), desc(Product.id))
                .limit(limit)
                .all()
            )
