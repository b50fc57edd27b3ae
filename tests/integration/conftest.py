"""
Integration test fixtures
"""

import pytest
from fastapi.testclient import TestClient

from safercosmetics.api.dependencies import (
    get_company_repository,
    get_ingredient_repository,
    get_product_repository,
    get_rate_limiter,
)
from safercosmetics.api.main import app
from safercosmetics.api.services.rate_limiter import InMemoryRateLimiter
from safercosmetics.db.errors import DataAccessError, DataErrorKind


class FailingRepository:
    """Repository stand-in whose every query raises."""

    def __init__(self, error: Exception):
        self.error = error

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise self.error

        return fail


@pytest.fixture
def failing_client():
    """
    Build a client whose repositories raise the given error.

    Server exceptions are returned as responses instead of re-raised.
    """
    clients = []

    def build(error: Exception) -> TestClient:
        for provider in (get_product_repository, get_company_repository, get_ingredient_repository):
            app.dependency_overrides[provider] = lambda: FailingRepository(error)
        app.dependency_overrides[get_rate_limiter] = lambda: InMemoryRateLimiter()
        test_client = TestClient(app, raise_server_exceptions=False)
        clients.append(test_client)
        return test_client

    yield build

    for test_client in clients:
        test_client.close()
    app.dependency_overrides.clear()


@pytest.fixture
def connection_error():
    return DataAccessError("Database connection error during product search", DataErrorKind.CONNECTION)
