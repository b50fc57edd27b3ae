"""
Data Access Errors
Typed errors raised by the query layer.

The kind is decided from the SQLAlchemy exception class so callers never
have to inspect message text.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Iterator

from sqlalchemy import exc as sa_exc

logger = logging.getLogger(__name__)


class DataErrorKind(str, Enum):
    """Category of a data access failure."""

    CONNECTION = "connection"  # database unreachable, pool exhausted, timeout
    QUERY = "query"  # statement rejected by the database
    UNKNOWN = "unknown"


class DataAccessError(Exception):
    """Exception raised when a database operation fails."""

    def __init__(self, message: str, kind: DataErrorKind = DataErrorKind.UNKNOWN, operation: str = None):
        self.message = message
        self.kind = kind
        self.operation = operation
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        return self.kind == DataErrorKind.CONNECTION


def classify_exception(exc: BaseException) -> DataErrorKind:
    """Map a SQLAlchemy exception to a DataErrorKind."""
    if isinstance(exc, sa_exc.DBAPIError) and exc.connection_invalidated:
        return DataErrorKind.CONNECTION
    if isinstance(exc, (sa_exc.OperationalError, sa_exc.DisconnectionError,
                        sa_exc.TimeoutError, sa_exc.InterfaceError)):
        return DataErrorKind.CONNECTION
    if isinstance(exc, (sa_exc.ProgrammingError, sa_exc.DataError)):
        return DataErrorKind.QUERY
    return DataErrorKind.UNKNOWN


@contextmanager
def translate_errors(operation: str) -> Iterator[None]:
    """Re-raise SQLAlchemy errors inside the block as DataAccessError."""
    try:
        yield
    except sa_exc.SQLAlchemyError as e:
        kind = classify_exception(e)
        logger.error(f"Database error during {operation} ({kind.value}): {e}")
        raise DataAccessError(
            message=f"Database {kind.value} error during {operation}",
            kind=kind,
            operation=operation,
        ) from e
