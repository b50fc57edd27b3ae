"""
Relevance Scoring
Scores notified products as replacements for a cancelled product.

Scoring Formula:
relevance = 0.35 × brand + 0.25 × manufacturer - 0.15 × category_risk
            + 0.10 × recency + 0.15 × vertical_integration
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

NEUTRAL_RECENCY = 0.5


@dataclass
class ScoringConfig:
    """Weights for the relevance formula. Category risk is subtracted."""

    brand_weight: float = 0.35
    manufacturer_weight: float = 0.25
    category_risk_weight: float = 0.15
    recency_weight: float = 0.10
    vertical_weight: float = 0.15

    def __post_init__(self):
        """Validate configuration."""
        for name, value in vars(self).items():
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")


@dataclass
class ScoredCandidate:
    """A candidate alternative with the signals that went into its score."""

    product_id: int
    brand_score: float
    manufacturer_score: float
    category_risk_score: float
    recency_score: float
    is_vertically_integrated: bool
    relevance_score: float


def relevance_score(
    brand: float,
    manufacturer: float,
    category_risk: float,
    recency: float,
    vertically_integrated: bool,
    config: Optional[ScoringConfig] = None,
) -> float:
    """
    Combine the scoring signals into one relevance value.

    Args:
        brand: Applicant company reputation (0-1)
        manufacturer: Manufacturer company reputation (0-1)
        category_risk: Cancellation rate of the product's category (0-1)
        recency: Normalized notification recency within the category (0-1)
        vertically_integrated: Whether applicant and manufacturer are the same company

    Returns:
        Relevance score, rounded to 4 decimal places
    """
    config = config or ScoringConfig()
    score = (
        config.brand_weight * brand
        + config.manufacturer_weight * manufacturer
        - config.category_risk_weight * category_risk
        + config.recency_weight * recency
        + config.vertical_weight * (1.0 if vertically_integrated else 0.0)
    )
    return round(score, 4)


def recency_score(notified: date, earliest: date, latest: date) -> float:
    """
    Position of a notification date within its category's date range.

    Returns 0.5 when the range is a single day.
    """
    span = latest.toordinal() - earliest.toordinal()
    if span == 0:
        return NEUTRAL_RECENCY
    return round((notified.toordinal() - earliest.toordinal()) / span, 4)


def category_date_ranges(rows: Iterable[Tuple[str, Optional[date]]]) -> Dict[str, Tuple[date, date]]:
    """
    Earliest and latest notification date per category.

    Args:
        rows: (category, date_notified) pairs; rows without a date are ignored

    Returns:
        Dict mapping category -> (earliest, latest)
    """
    ranges: Dict[str, Tuple[date, date]] = {}
    for category, notified in rows:
        if not category or notified is None:
            continue
        if category in ranges:
            earliest, latest = ranges[category]
            ranges[category] = (min(earliest, notified), max(latest, notified))
        else:
            ranges[category] = (notified, notified)
    return ranges


def rank_candidates(candidates: List[ScoredCandidate], top_n: int) -> List[ScoredCandidate]:
    """Highest relevance first; ties keep the lower product id first."""
    ordered = sorted(candidates, key=lambda c: (-c.relevance_score, c.product_id))
    return ordered[:top_n]
