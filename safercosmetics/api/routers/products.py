"""
Product Endpoints
GET /api/products/search - Name search over product notifications
GET /api/products/alternatives - Safer alternatives for a cancelled product
"""

import logging
from fastapi import APIRouter, Depends, Request, status

from ..dependencies import get_alternatives_service, get_product_repository, rate_limit
from ..errors import from_data_access_error
from ..models.common import ERROR_RESPONSES, Pagination, SuccessResponse
from ..models.products import AlternativesData, ProductSearchData, ProductSummary
from ..services.alternatives_service import AlternativesService, NO_ALTERNATIVES_MESSAGE
from ..validation import AlternativesParams, SearchParams, validate_params
from ...db.errors import DataAccessError
from ...db.queries import ProductRepository
from ...models.product import is_cancelled

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/products",
    tags=["products"],
    dependencies=[Depends(rate_limit("products"))],
    responses=ERROR_RESPONSES,
)

SEARCH_ALTERNATIVES_LIMIT = 3


@router.get(
    "/search",
    response_model=SuccessResponse[ProductSearchData],
    status_code=status.HTTP_200_OK,
)
def search_products(
    request: Request,
    repository: ProductRepository = Depends(get_product_repository),
    alternatives_service: AlternativesService = Depends(get_alternatives_service),
) -> SuccessResponse[ProductSearchData]:
    """
    Search products by name.

    Query parameters: query (3-100 characters), limit (1-50), offset,
    status. When the page contains a cancelled product, safer alternatives
    for the first one are included.
    """
    params = validate_params(SearchParams, request.query_params)

    logger.info(f"Product search: query='{params.query}', limit={params.limit}, offset={params.offset}")

    try:
        products, total = repository.search_products(
            params.query, limit=params.limit, offset=params.offset, status=params.status
        )
        # Count and page come from separate queries
        if products:
            total = max(total, params.offset + len(products))

        alternatives = None
        cancelled = next((p for p in products if is_cancelled(p.status)), None)
        if cancelled is not None:
            alternatives = alternatives_service.find_alternatives(
                exclude_id=cancelled.id,
                category=cancelled.category,
                limit=SEARCH_ALTERNATIVES_LIMIT,
            )

    except DataAccessError as e:
        raise from_data_access_error(
            e,
            "Search failed",
            invalid_error="Invalid search query",
            invalid_message="The search could not be processed. Please adjust your query.",
        )

    return SuccessResponse(
        data=ProductSearchData(
            products=[ProductSummary.model_validate(p) for p in products],
            total=total,
            pagination=Pagination.build(params.limit, params.offset, total),
            alternatives=alternatives,
        )
    )


@router.get(
    "/alternatives",
    response_model=SuccessResponse[AlternativesData],
    status_code=status.HTTP_200_OK,
)
def get_alternatives(
    request: Request,
    alternatives_service: AlternativesService = Depends(get_alternatives_service),
) -> SuccessResponse[AlternativesData]:
    """
    Get safer alternatives.

    Query parameters: excludeId (product to leave out), category, limit (1-10).
    """
    params = validate_params(AlternativesParams, request.query_params)

    try:
        alternatives = alternatives_service.find_alternatives(
            exclude_id=params.exclude_id, category=params.category, limit=params.limit
        )
    except DataAccessError as e:
        raise from_data_access_error(e, "Failed to fetch alternatives")

    return SuccessResponse(
        data=AlternativesData(
            alternatives=alternatives,
            total=len(alternatives),
            message=None if alternatives else NO_ALTERNATIVES_MESSAGE,
        )
    )
