"""
Recommendations
Offline scoring of safer alternatives for cancelled products.
"""

from .generator import (
    BATCH_SIZE,
    TOP_N_RECOMMENDATIONS,
    GenerationStats,
    RecommendationGenerator,
    generate_recommendations,
)
from .scoring import (
    ScoredCandidate,
    ScoringConfig,
    category_date_ranges,
    rank_candidates,
    recency_score,
    relevance_score,
)

__all__ = [
    "BATCH_SIZE",
    "TOP_N_RECOMMENDATIONS",
    "GenerationStats",
    "RecommendationGenerator",
    "generate_recommendations",
    "ScoredCandidate",
    "ScoringConfig",
    "category_date_ranges",
    "rank_candidates",
    "recency_score",
    "relevance_score",
]
