"""
Request Validation
Sanitizers and pydantic schemas for query parameters and entity records.

Sanitization always runs before length checks, so limits apply to the
cleaned value. Only the first failing field is reported.
"""

import re
from datetime import date
from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from .errors import InvalidRequestError, ResourceNotFoundError
from ..models.product import ProductStatus, RiskLevel

ModelT = TypeVar("ModelT", bound=BaseModel)

TAG_RE = re.compile(r"<[^>]*>")
QUOTE_OR_BRACKET_RE = re.compile(r"[<>'\"]")
WHITESPACE_RE = re.compile(r"\s+")
NOTIF_NO_RE = re.compile(r"[^A-Z0-9\-/]")
DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
ID_RE = re.compile(r"[0-9]+")

# Ids and offsets above this cannot match a 32-bit INTEGER key
MAX_SQL_INT = 2**31 - 1

SEARCH_MIN_LENGTH = 3
SEARCH_MAX_LENGTH = 100


# === Sanitizers ===

def strip_tags(value: str) -> str:
    return TAG_RE.sub("", value)


def sanitize_string(value: str) -> str:
    """Trim and remove HTML tags."""
    return strip_tags(value.strip()).strip()


def sanitize_search_query(query: str) -> str:
    """
    Clean a free-text search query.

    Removes HTML tags, stray angle brackets and quotes, collapses runs of
    whitespace and trims the ends.
    """
    cleaned = strip_tags(query)
    cleaned = QUOTE_OR_BRACKET_RE.sub("", cleaned)
    cleaned = WHITESPACE_RE.sub(" ", cleaned)
    return cleaned.strip()


def sanitize_notification_number(value: str) -> str:
    """Upper-case and keep only letters, digits, '-' and '/'."""
    return NOTIF_NO_RE.sub("", value.strip().upper())


def clamp_int(value: Any, default: int, minimum: int, maximum: Optional[int] = None) -> int:
    """Parse an integer and clamp it; unparsable values give the default."""
    if value is None or value == "":
        return default
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    number = max(number, minimum)
    if maximum is not None:
        number = min(number, maximum)
    return number


def is_past_date(value: str) -> bool:
    """True for a YYYY-MM-DD string that is a real date not after today."""
    if not DATE_RE.fullmatch(value):
        return False
    try:
        return date.fromisoformat(value) <= date.today()
    except ValueError:
        return False


# === Query parameter schemas ===

class QueryParams(BaseModel):
    """Base for query-string schemas (camelCase names accepted)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SearchParams(QueryParams):
    """Parameters for /api/products/search."""

    query: str = Field(default="", validate_default=True)
    limit: int = 10
    offset: int = 0
    status: Optional[ProductStatus] = None

    @field_validator("query", mode="before")
    @classmethod
    def clean_query(cls, v: Any) -> str:
        cleaned = sanitize_search_query(str(v or ""))
        if len(cleaned) < SEARCH_MIN_LENGTH:
            raise PydanticCustomError("too_short", "Please enter at least 3 characters")
        if len(cleaned) > SEARCH_MAX_LENGTH:
            raise PydanticCustomError("too_long", "Search query too long")
        return cleaned

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, v: Any) -> int:
        return clamp_int(v, default=10, minimum=1, maximum=50)

    @field_validator("offset", mode="before")
    @classmethod
    def clamp_offset(cls, v: Any) -> int:
        return clamp_int(v, default=0, minimum=0, maximum=MAX_SQL_INT)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        value = str(v).strip().lower()
        if value not in {s.value for s in ProductStatus}:
            raise PydanticCustomError(
                "invalid_status",
                "Status must be one of: {allowed}",
                {"allowed": ", ".join(s.value for s in ProductStatus)},
            )
        return value


class ListParams(QueryParams):
    """Parameters shared by the company and ingredient listings."""

    query: str = ""
    limit: int = 20
    offset: int = 0
    sort_by: str = Field(default="name", alias="sortBy")
    sort_order: str = Field(default="asc", alias="sortOrder")

    @field_validator("query", mode="before")
    @classmethod
    def clean_query(cls, v: Any) -> str:
        return sanitize_search_query(str(v or ""))[:SEARCH_MAX_LENGTH]

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, v: Any) -> int:
        return clamp_int(v, default=20, minimum=1, maximum=100)

    @field_validator("offset", mode="before")
    @classmethod
    def clamp_offset(cls, v: Any) -> int:
        return clamp_int(v, default=0, minimum=0, maximum=MAX_SQL_INT)

    @field_validator("sort_by", mode="before")
    @classmethod
    def default_sort(cls, v: Any) -> str:
        return str(v).strip() if v else "name"

    @field_validator("sort_order", mode="before")
    @classmethod
    def normalize_order(cls, v: Any) -> str:
        return "desc" if str(v or "").strip().lower() == "desc" else "asc"


class AlternativesParams(QueryParams):
    """Parameters for /api/products/alternatives."""

    exclude_id: Optional[int] = Field(default=None, alias="excludeId")
    category: Optional[str] = None
    limit: int = 3

    @field_validator("exclude_id", mode="before")
    @classmethod
    def parse_exclude_id(cls, v: Any) -> Optional[int]:
        if v is None or v == "":
            return None
        value = str(v).strip()
        if not ID_RE.fullmatch(value) or int(value) < 1:
            raise PydanticCustomError("invalid_id", "Product ID must be a positive integer")
        if int(value) > MAX_SQL_INT:
            return None
        return int(value)

    @field_validator("category", mode="before")
    @classmethod
    def clean_category(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return sanitize_string(str(v)) or None

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, v: Any) -> int:
        return clamp_int(v, default=3, minimum=1, maximum=10)


# === Entity record schemas ===

class ProductRecord(BaseModel):
    """Validated product record as it is loaded into the database."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int = Field(..., gt=0)
    notif_no: str = Field(..., alias="notifNo", min_length=1, max_length=255)
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=255)
    status: ProductStatus
    risk_level: Optional[RiskLevel] = Field(default=None, alias="riskLevel")
    reason_for_cancellation: Optional[str] = Field(default=None, alias="reasonForCancellation")
    date_notified: str = Field(..., alias="dateNotified")
    is_vertically_integrated: bool = Field(default=False, alias="isVerticallyIntegrated")
    recency_score: float = Field(default=0.0, alias="recencyScore", ge=0, le=1)

    @field_validator("notif_no", mode="before")
    @classmethod
    def clean_notif_no(cls, v: Any) -> str:
        return sanitize_notification_number(str(v))

    @field_validator("name", "category", mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> str:
        return sanitize_string(str(v))

    @field_validator("status", mode="before")
    @classmethod
    def lower_status(cls, v: Any) -> str:
        return str(v).strip().lower()

    @field_validator("reason_for_cancellation", mode="before")
    @classmethod
    def clean_reason(cls, v: Any) -> Optional[str]:
        return sanitize_string(str(v)) if v else None

    @field_validator("date_notified", mode="before")
    @classmethod
    def check_date(cls, v: Any) -> str:
        value = str(v).strip()
        if not DATE_RE.fullmatch(value):
            raise PydanticCustomError("date_format", "Date must be in YYYY-MM-DD format")
        if not is_past_date(value):
            raise PydanticCustomError("future_date", "Date cannot be in the future")
        return value


class RecommendedAlternativeRecord(BaseModel):
    """Scores stored for one recommended alternative."""

    cancelled_product_id: int = Field(..., gt=0)
    recommended_product_id: int = Field(..., gt=0)
    brand_score: float = Field(..., ge=0, le=1)
    category_risk_score: float = Field(..., ge=0, le=1)
    is_vertically_integrated: bool
    recency_score: float = Field(..., ge=0, le=1)
    relevance_score: float


# === Helpers ===

def validate_params(schema: Type[ModelT], params: Mapping[str, Any]) -> ModelT:
    """
    Validate raw parameters against a schema.

    Raises:
        InvalidRequestError: describing the first failing field
    """
    try:
        return schema.model_validate(dict(params))
    except ValidationError as e:
        errors = e.errors()
        if not errors:
            raise InvalidRequestError(message="Unknown validation error")
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "request"
        msg = first.get("msg", "Invalid value")
        raise InvalidRequestError(message=msg, code=first.get("type"), details={field: msg})


def parse_entity_id(raw_id: str, resource: str) -> int:
    """
    Parse a numeric path id.

    Raises:
        InvalidRequestError: if the id is not a positive integer
        ResourceNotFoundError: if the id is too large to exist
    """
    value = (raw_id or "").strip()
    if not ID_RE.fullmatch(value) or int(value) < 1:
        raise InvalidRequestError(
            message=f"{resource} ID must be a number",
            error=f"Invalid {resource.lower()} ID",
            code="invalid_id",
            details={"id": raw_id},
        )
    if int(value) > MAX_SQL_INT:
        raise ResourceNotFoundError(resource, value)
    return int(value)
