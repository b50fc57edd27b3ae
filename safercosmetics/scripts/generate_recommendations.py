#!/usr/bin/env python3
"""
Recommendation Generation Script
Rebuilds the recommended_alternatives table from the loaded product data.

Usage:
    python -m safercosmetics.scripts.generate_recommendations --top-n 5 --batch-size 500

Run after the product, company and category metrics tables are populated.
"""

import argparse
import logging
import sys

from safercosmetics.db.session import get_session_factory
from safercosmetics.recommendations import (
    BATCH_SIZE,
    TOP_N_RECOMMENDATIONS,
    generate_recommendations,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main(argv=None):
    """Main function to run recommendation generation."""
    parser = argparse.ArgumentParser(description="Generate safer alternatives for cancelled products")
    parser.add_argument(
        "--top-n",
        type=int,
        default=TOP_N_RECOMMENDATIONS,
        help=f"Recommendations kept per cancelled product (default: {TOP_N_RECOMMENDATIONS})",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=BATCH_SIZE,
        help=f"Rows inserted per batch (default: {BATCH_SIZE})",
    )

    args = parser.parse_args(argv)

    if args.top_n < 1 or args.batch_size < 1:
        logger.error("--top-n and --batch-size must be positive")
        return 1

    logger.info(f"Starting recommendation generation (top {args.top_n}, batch {args.batch_size})")

    session = get_session_factory()()
    try:
        stats = generate_recommendations(session, top_n=args.top_n, batch_size=args.batch_size)
    except Exception as e:
        logger.error(f"Recommendation generation failed: {e}", exc_info=True)
        return 1
    finally:
        session.close()

    # Display results
    logger.info("=" * 60)
    logger.info("GENERATION COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Recency scores updated: {stats.recency_updated}")
    logger.info(f"Cancelled products: {stats.cancelled_products}")
    logger.info(f"Notified candidates: {stats.notified_products}")
    logger.info(f"Recommendations inserted: {stats.recommendations} in {stats.batches} batches")
    if stats.invalid_products:
        logger.warning(f"Products skipped as invalid: {stats.invalid_products}")

    if stats.skipped_categories:
        logger.warning(f"Categories with no notified candidates: {len(stats.skipped_categories)}")
        for category in stats.skipped_categories[:5]:
            logger.warning(f"  - {category}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
