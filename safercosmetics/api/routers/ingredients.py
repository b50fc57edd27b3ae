"""
Banned Ingredient Endpoints
GET /api/ingredients - Banned ingredient listing with metrics
GET /api/ingredients/{id} - Ingredient details and affected products
"""

import logging
from fastapi import APIRouter, Depends, Request, status

from ..dependencies import get_ingredient_repository, rate_limit
from ..errors import ResourceNotFoundError, from_data_access_error
from ..models.common import ERROR_RESPONSES, Pagination, SuccessResponse
from ..models.ingredients import (
    IngredientDetail,
    IngredientDetailData,
    IngredientItem,
    IngredientListData,
)
from ..models.products import ProductSummary
from ..validation import ListParams, parse_entity_id, validate_params
from ...db.errors import DataAccessError
from ...db.queries import IngredientRepository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/ingredients",
    tags=["ingredients"],
    dependencies=[Depends(rate_limit("ingredients"))],
    responses=ERROR_RESPONSES,
)


@router.get("", response_model=SuccessResponse[IngredientListData], status_code=status.HTTP_200_OK)
def list_ingredients(
    request: Request,
    repository: IngredientRepository = Depends(get_ingredient_repository),
) -> SuccessResponse[IngredientListData]:
    """
    List banned ingredients with their metrics.

    Query parameters: query, limit (1-100), offset, sortBy (name,
    occurrencesCount, riskScore, ewgRating), sortOrder (asc, desc).
    """
    params = validate_params(ListParams, request.query_params)

    try:
        rows, total = repository.list_ingredients(
            query=params.query,
            limit=params.limit,
            offset=params.offset,
            sort_by=params.sort_by,
            sort_order=params.sort_order,
        )
    except DataAccessError as e:
        raise from_data_access_error(e, "Failed to fetch ingredients")

    return SuccessResponse(
        data=IngredientListData(
            ingredients=[IngredientItem.model_validate(row) for row in rows],
            total=total,
            pagination=Pagination.build(params.limit, params.offset, total),
        )
    )


@router.get(
    "/{ingredient_id}",
    response_model=SuccessResponse[IngredientDetailData],
    status_code=status.HTTP_200_OK,
)
def get_ingredient(
    ingredient_id: str,
    repository: IngredientRepository = Depends(get_ingredient_repository),
) -> SuccessResponse[IngredientDetailData]:
    """Get a banned ingredient with metrics and up to 10 affected products."""
    ingredient_pk = parse_entity_id(ingredient_id, "Ingredient")

    try:
        ingredient = repository.get_ingredient(ingredient_pk)
        if ingredient is None:
            raise ResourceNotFoundError("Ingredient", ingredient_pk)

        affected_products = repository.get_affected_products(ingredient_pk)
    except DataAccessError as e:
        raise from_data_access_error(e, "Failed to fetch ingredient details")

    return SuccessResponse(
        data=IngredientDetailData(
            ingredient=IngredientDetail.model_validate(ingredient),
            affected_products=[ProductSummary.model_validate(p) for p in affected_products],
        )
    )
