"""
Alternatives Service
Finds safer (non-cancelled) products to suggest in place of a cancelled one.
"""

import logging
from typing import List, Optional

from ..models.products import AlternativeProduct, CompanyRef
from ...db.models import Product, RecommendedAlternative
from ...db.queries import ProductRepository

logger = logging.getLogger(__name__)

NO_ALTERNATIVES_MESSAGE = "No safer alternatives found"


class AlternativesService:
    """
    Service for looking up safer alternatives.

    Stored recommendations for the excluded (cancelled) product come first,
    ordered by relevance score. Without them, the most recent non-cancelled
    products are returned; that list carries no relevance ordering.
    """

    def __init__(self, repository: ProductRepository):
        """
        Initialize alternatives service.

        Args:
            repository: Product query repository
        """
        self.repository = repository

    def find_alternatives(
        self,
        exclude_id: Optional[int] = None,
        category: Optional[str] = None,
        limit: int = 3,
    ) -> List[AlternativeProduct]:
        """
        Get up to limit safer products.

        Args:
            exclude_id: Product to leave out (usually the cancelled one)
            category: Restrict to one product category
            limit: Maximum number of alternatives

        Returns:
            List of alternatives
        """
        if exclude_id is not None:
            recommendations = self.repository.get_recommended_alternatives(
                exclude_id, category=category, limit=limit
            )
            if recommendations:
                logger.debug(
                    f"Using {len(recommendations)} stored recommendations for product {exclude_id}"
                )
                return [self._from_recommendation(r) for r in recommendations]

        products = self.repository.get_safer_products(
            exclude_id=exclude_id, category=category, limit=limit
        )
        return [self._from_product(p) for p in products]

    @staticmethod
    def _from_product(product: Product) -> AlternativeProduct:
        return AlternativeProduct.model_validate(product)

    @staticmethod
    def _from_recommendation(recommendation: RecommendedAlternative) -> AlternativeProduct:
        product = recommendation.recommended_product
        company = product.applicant_company

        return AlternativeProduct(
            id=product.id,
            notif_no=product.notif_no,
            name=product.name,
            category=product.category,
            status=product.status,
            reason_for_cancellation=product.reason_for_cancellation,
            date_notified=product.date_notified,
            is_vertically_integrated=recommendation.is_vertically_integrated,
            recency_score=recommendation.recency_score,
            applicant_company=CompanyRef(id=company.id, name=company.name) if company else None,
            brand_score=recommendation.brand_score,
            category_risk_score=recommendation.category_risk_score,
            relevance_score=recommendation.relevance_score,
        )
