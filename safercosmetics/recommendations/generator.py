"""
Recommendation Generator
Rebuilds the recommended_alternatives table from product and metrics data.

Steps:
1. Recompute recency scores per category
2. Clear existing recommendations
3. Score notified products in the same category as each cancelled product
4. Insert the top N per cancelled product in batches

Products whose stored fields fail ProductRecord validation are left out of
every step.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..api.validation import ProductRecord, RecommendedAlternativeRecord
from ..db.models import CategoryMetrics, CompanyMetrics, Product, RecommendedAlternative
from ..models.product import ProductStatus, normalize_status
from .scoring import (
    ScoredCandidate,
    ScoringConfig,
    category_date_ranges,
    rank_candidates,
    recency_score,
    relevance_score,
)

logger = logging.getLogger(__name__)

TOP_N_RECOMMENDATIONS = 5
BATCH_SIZE = 500


@dataclass
class GenerationStats:
    """Counters reported at the end of a run."""

    invalid_products: int = 0
    recency_updated: int = 0
    cancelled_products: int = 0
    notified_products: int = 0
    recommendations: int = 0
    batches: int = 0
    skipped_categories: List[str] = field(default_factory=list)


def _as_float(value) -> float:
    return float(value) if value is not None else 0.0


class RecommendationGenerator:
    """
    Generates scored alternatives for every cancelled product.

    Runs inside the caller's session; the caller commits.
    """

    def __init__(
        self,
        session: Session,
        top_n: int = TOP_N_RECOMMENDATIONS,
        batch_size: int = BATCH_SIZE,
        config: Optional[ScoringConfig] = None,
    ):
        if top_n < 1:
            raise ValueError("top_n must be at least 1")
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self.session = session
        self.top_n = top_n
        self.batch_size = batch_size
        self.config = config or ScoringConfig()
        self.stats = GenerationStats()

    def run(self) -> GenerationStats:
        """Run all steps and return the run statistics."""
        products = self.valid_products(self.session.query(Product).all())

        logger.info("Step 1: updating recency scores")
        self.stats.recency_updated = self.update_recency_scores(products)

        logger.info("Step 2: clearing existing recommendations")
        deleted = self.session.query(RecommendedAlternative).delete(synchronize_session=False)
        logger.info(f"Removed {deleted} existing recommendations")

        logger.info("Step 3: scoring candidates")
        rows = self.score_all(products)
        self.stats.recommendations = len(rows)

        logger.info(f"Step 4: inserting {len(rows)} recommendations")
        self.insert_batches(rows)

        return self.stats

    def valid_products(self, products: List[Product]) -> List[Product]:
        """Drop products whose stored fields fail record validation."""
        valid = []
        for product in products:
            try:
                ProductRecord.model_validate(product)
            except ValidationError as e:
                self.stats.invalid_products += 1
                logger.warning(f"Skipping product {product.id}: {e.errors()[0]['msg']}")
                continue
            valid.append(product)
        return valid

    def update_recency_scores(self, products: List[Product]) -> int:
        """
        Set each product's recency score from its category's date range.

        Returns:
            Number of products updated
        """
        ranges = category_date_ranges((p.category, p.date_notified) for p in products)

        updated = 0
        for product in products:
            date_range = ranges.get(product.category)
            if date_range is None or product.date_notified is None:
                continue
            product.recency_score = recency_score(product.date_notified, *date_range)
            updated += 1

        self.session.flush()
        logger.info(f"Updated recency scores for {updated} products")
        return updated

    def score_all(self, products: List[Product]) -> List[dict]:
        """Score candidates for every cancelled product and keep the top N of each."""
        reputation: Dict[int, float] = {
            m.company_id: _as_float(m.reputation_score)
            for m in self.session.query(CompanyMetrics).all()
        }
        category_risk: Dict[str, float] = {
            m.product_category: _as_float(m.risk_score)
            for m in self.session.query(CategoryMetrics).all()
        }

        cancelled = []
        notified_by_category: Dict[str, List[Product]] = defaultdict(list)
        for product in products:
            status = normalize_status(product.status)
            if status == ProductStatus.CANCELLED.value:
                cancelled.append(product)
            elif status == ProductStatus.NOTIFIED.value:
                notified_by_category[product.category].append(product)

        self.stats.cancelled_products = len(cancelled)
        self.stats.notified_products = sum(len(v) for v in notified_by_category.values())
        logger.info(
            f"Found {self.stats.cancelled_products} cancelled products and "
            f"{self.stats.notified_products} notified candidates"
        )

        rows = []
        for product in cancelled:
            candidates = notified_by_category.get(product.category)
            if not candidates:
                if product.category not in self.stats.skipped_categories:
                    self.stats.skipped_categories.append(product.category)
                continue

            scored = [self._score(c, reputation, category_risk) for c in candidates]
            for candidate in rank_candidates(scored, self.top_n):
                record = RecommendedAlternativeRecord(
                    cancelled_product_id=product.id,
                    recommended_product_id=candidate.product_id,
                    brand_score=candidate.brand_score,
                    category_risk_score=candidate.category_risk_score,
                    is_vertically_integrated=candidate.is_vertically_integrated,
                    recency_score=candidate.recency_score,
                    relevance_score=candidate.relevance_score,
                )
                rows.append(record.model_dump())

        return rows

    def _score(
        self,
        candidate: Product,
        reputation: Dict[int, float],
        category_risk: Dict[str, float],
    ) -> ScoredCandidate:
        # Missing metrics count as 0
        brand = reputation.get(candidate.applicant_company_id, 0.0)
        manufacturer = (
            reputation.get(candidate.manufacturer_company_id, 0.0)
            if candidate.manufacturer_company_id is not None
            else 0.0
        )
        risk = category_risk.get(candidate.category, 0.0)
        recency = _as_float(candidate.recency_score)
        vertical = bool(candidate.is_vertically_integrated)

        return ScoredCandidate(
            product_id=candidate.id,
            brand_score=brand,
            manufacturer_score=manufacturer,
            category_risk_score=risk,
            recency_score=recency,
            is_vertically_integrated=vertical,
            relevance_score=relevance_score(brand, manufacturer, risk, recency, vertical, self.config),
        )

    def insert_batches(self, rows: List[dict]) -> None:
        for start in range(0, len(rows), self.batch_size):
            batch = rows[start:start + self.batch_size]
            self.session.add_all(RecommendedAlternative(**row) for row in batch)
            self.session.flush()
            self.stats.batches += 1
            logger.info(f"Inserted batch {self.stats.batches} ({len(batch)} rows)")


def generate_recommendations(
    session: Session,
    top_n: int = TOP_N_RECOMMENDATIONS,
    batch_size: int = BATCH_SIZE,
) -> GenerationStats:
    """
    Rebuild recommended alternatives and commit.

    Rolls back and re-raises on failure.
    """
    generator = RecommendationGenerator(session, top_n=top_n, batch_size=batch_size)
    try:
        stats = generator.run()
        session.commit()
    except Exception:
        session.rollback()
        raise
    return stats
