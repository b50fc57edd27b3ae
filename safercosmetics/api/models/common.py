"""
Common Models
Response envelope, pagination and error shapes shared by all endpoints.
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class APIModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(APIModel):
    """Offset pagination block."""

    limit: int = Field(..., description="Page size after clamping")
    offset: int = Field(..., description="Rows skipped")
    has_more: bool = Field(..., description="Whether rows exist beyond this page")

    @classmethod
    def build(cls, limit: int, offset: int, total: int) -> "Pagination":
        return cls(limit=limit, offset=offset, has_more=offset + limit < total)


class SuccessResponse(BaseModel, Generic[DataT]):
    """Envelope for every successful response."""

    success: bool = True
    data: DataT


class ErrorResponse(BaseModel):
    """Error payload."""

    error: str = Field(..., description="Short error label")
    message: Optional[str] = Field(None, description="Human readable explanation")
    code: Optional[str] = Field(None, description="Machine readable code")
    details: Optional[Dict[str, Any]] = Field(None, description="Per-field detail")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Validation failed",
                "message": "Please enter at least 3 characters",
                "code": "too_short",
                "details": {"query": "Please enter at least 3 characters"},
            }
        }
    )


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
    503: {"model": ErrorResponse, "description": "Database unavailable"},
}
