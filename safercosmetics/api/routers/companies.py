"""
Company Endpoints
GET /api/companies - Company listing with metrics
GET /api/companies/{id} - Company details and recent products
"""

import logging
from fastapi import APIRouter, Depends, Request, status

from ..dependencies import get_company_repository, rate_limit
from ..errors import ResourceNotFoundError, from_data_access_error
from ..models.common import ERROR_RESPONSES, Pagination, SuccessResponse
from ..models.companies import CompanyDetailData, CompanyItem, CompanyListData
from ..models.products import ProductSummary
from ..validation import ListParams, parse_entity_id, validate_params
from ...db.errors import DataAccessError
from ...db.queries import CompanyRepository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/companies",
    tags=["companies"],
    dependencies=[Depends(rate_limit("companies"))],
    responses=ERROR_RESPONSES,
)


@router.get("", response_model=SuccessResponse[CompanyListData], status_code=status.HTTP_200_OK)
def list_companies(
    request: Request,
    repository: CompanyRepository = Depends(get_company_repository),
) -> SuccessResponse[CompanyListData]:
    """
    List companies with their metrics.

    Query parameters: query, limit (1-100), offset, sortBy (name,
    totalNotifs, reputationScore, cancelledCount), sortOrder (asc, desc).
    """
    params = validate_params(ListParams, request.query_params)

    try:
        rows, total = repository.list_companies(
            query=params.query,
            limit=params.limit,
            offset=params.offset,
            sort_by=params.sort_by,
            sort_order=params.sort_order,
        )
    except DataAccessError as e:
        raise from_data_access_error(e, "Failed to fetch companies")

    return SuccessResponse(
        data=CompanyListData(
            companies=[CompanyItem.model_validate(row) for row in rows],
            total=total,
            pagination=Pagination.build(params.limit, params.offset, total),
        )
    )


@router.get(
    "/{company_id}",
    response_model=SuccessResponse[CompanyDetailData],
    status_code=status.HTTP_200_OK,
)
def get_company(
    company_id: str,
    repository: CompanyRepository = Depends(get_company_repository),
) -> SuccessResponse[CompanyDetailData]:
    """Get a company with metrics and its 10 most recent products."""
    company_pk = parse_entity_id(company_id, "Company")

    try:
        company = repository.get_company(company_pk)
        if company is None:
            raise ResourceNotFoundError("Company", company_pk)

        recent_products = repository.get_recent_products(company_pk)
    except DataAccessError as e:
        raise from_data_access_error(e, "Failed to fetch company details")

    return SuccessResponse(
        data=CompanyDetailData(
            company=CompanyItem.model_validate(company),
            recent_products=[ProductSummary.model_validate(p) for p in recent_products],
        )
    )
