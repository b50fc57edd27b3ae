"""
Error Handlers
Error taxonomy and FastAPI exception handlers.

Every error response has the shape
    {"error": <short label>, "message": <text>, "code"?: str, "details"?: dict}
"""

import logging
from typing import Any, Dict, Optional, Union
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from ..db.errors import DataAccessError, DataErrorKind

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error: str = "Internal server error",
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error = error
        self.code = code
        self.details = details
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error, "message": self.message}
        if self.code:
            body["code"] = self.code
        if self.details:
            body["details"] = self.details
        return body


class InvalidRequestError(APIError):
    """Exception raised for invalid requests."""

    def __init__(
        self,
        message: str,
        error: str = "Validation failed",
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error=error,
            code=code,
            details=details,
        )


class ResourceNotFoundError(APIError):
    """Exception raised when resource is not found."""

    def __init__(self, resource: str, resource_id: Union[int, str]):
        super().__init__(
            message=f"The requested {resource.lower()} does not exist",
            status_code=status.HTTP_404_NOT_FOUND,
            error=f"{resource} not found",
            code="not_found",
            details={"resource": resource, "id": resource_id},
        )


class RateLimitExceededError(APIError):
    """Exception raised when a client exceeds its request window."""

    def __init__(self, retry_after: int):
        super().__init__(
            message="Rate limit exceeded. Please try again later.",
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error="Too many requests",
            code="rate_limited",
            headers={"Retry-After": str(max(retry_after, 1))},
        )


class ServiceUnavailableError(APIError):
    """Exception raised when the database cannot be reached."""

    def __init__(self, message: str = "Database connection error. Please try again later."):
        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error="Service unavailable",
            code="database_unavailable",
        )


def from_data_access_error(
    exc: DataAccessError,
    failure: str,
    invalid_error: str = "Invalid request",
    invalid_message: str = "The request could not be processed. Please adjust your query.",
) -> APIError:
    """
    Map a data access error to an API error.

    Args:
        exc: Error raised by the query layer
        failure: Endpoint specific label used for generic failures
        invalid_error: Label for queries the database rejected
        invalid_message: Explanation for queries the database rejected

    Returns:
        APIError with the status matching the error kind
    """
    if exc.kind == DataErrorKind.CONNECTION:
        return ServiceUnavailableError()
    if exc.kind == DataErrorKind.QUERY:
        return InvalidRequestError(
            message=invalid_message,
            error=invalid_error,
            code="query_error",
        )
    return APIError(message="Please try again later", error=failure, code="server_error")


def setup_error_handlers(app: FastAPI) -> None:
    """
    Set up custom error handlers for the FastAPI app.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        """Handle custom API errors."""
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            f"API error: {exc.error}: {exc.message}",
            extra={
                "status_code": exc.status_code,
                "details": exc.details,
                "path": request.url.path,
            },
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers=exc.headers,
        )

    @app.exception_handler(DataAccessError)
    async def data_access_error_handler(request: Request, exc: DataAccessError):
        """Handle data access errors that escaped a router."""
        api_error = from_data_access_error(exc, "Failed to fetch data")
        logger.error(
            f"Unhandled data access error: {exc.message}",
            extra={"kind": exc.kind.value, "path": request.url.path},
        )

        return JSONResponse(status_code=api_error.status_code, content=api_error.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors (first failure only)."""
        logger.warning(f"Validation error: {exc}", extra={"path": request.url.path})

        errors = exc.errors()
        if not errors:
            error = InvalidRequestError(message="Unknown validation error")
        else:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", []))
            msg = str(first.get("msg", ""))
            error = InvalidRequestError(message=msg, code=first.get("type"), details={field: msg})

        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error.to_dict())

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unexpected error: {exc}", exc_info=True, extra={"path": request.url.path})

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred",
            },
        )
