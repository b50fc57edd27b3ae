"""
Pytest configuration and shared fixtures
"""

import sys
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from safercosmetics.api.config import reset_settings
from safercosmetics.api.dependencies import get_db
from safercosmetics.api.main import app
from safercosmetics.api.services.rate_limiter import InMemoryRateLimiter, get_rate_limiter
from safercosmetics.db.models import (
    Base,
    BannedIngredient,
    BannedIngredientMetrics,
    CancelledProductIngredient,
    CategoryMetrics,
    Company,
    CompanyMetrics,
    Product,
    RecommendedAlternative,
)


def seed(session):
    """
    Small catalogue used across tests.

    Skin Care: products 1 and 4 are cancelled; 2, 3 and 6 are notified.
    Hair Care: product 5 only. Company 3 has no metrics row.
    """
    session.add_all([
        Company(id=1, name="Glow Beauty Sdn Bhd"),
        Company(id=2, name="Pure Labs"),
        Company(id=3, name="Kilau Cosmetics"),
    ])
    session.add_all([
        CompanyMetrics(company_id=1, total_notifs=3, first_notified_date=date(2020, 1, 10),
                       cancelled_count=1, reputation_score=0.80),
        CompanyMetrics(company_id=2, total_notifs=2, first_notified_date=date(2022, 3, 15),
                       cancelled_count=0, reputation_score=0.95),
    ])
    session.add_all([
        CategoryMetrics(product_category="Skin Care", total_notifs=5, cancelled_count=2, risk_score=0.40),
        CategoryMetrics(product_category="Hair Care", total_notifs=1, cancelled_count=0, risk_score=0.00),
    ])
    session.add_all([
        Product(id=1, notif_no="NOT202001", name="Glow Whitening Cream", category="Skin Care",
                applicant_company_id=1, manufacturer_company_id=1, date_notified=date(2020, 1, 10),
                status="Cancelled", reason_for_cancellation="contains mercury",
                is_vertically_integrated=True, recency_score=0.0),
        Product(id=2, notif_no="NOT202105", name="Glow Night Cream", category="Skin Care",
                applicant_company_id=1, manufacturer_company_id=2, date_notified=date(2021, 5, 1),
                status="Notified", is_vertically_integrated=False, recency_score=0.5),
        Product(id=3, notif_no="NOT202203", name="Pure Day Cream", category="Skin Care",
                applicant_company_id=2, manufacturer_company_id=2, date_notified=date(2022, 3, 15),
                status="Notified", is_vertically_integrated=True, recency_score=1.0),
        Product(id=4, notif_no="NOT202110", name="Kilau Lightening Cream", category="Skin Care",
                applicant_company_id=3, manufacturer_company_id=None, date_notified=date(2021, 10, 1),
                status="Cancelled", reason_for_cancellation="Contains hydroquinone.",
                is_vertically_integrated=False, recency_score=0.7),
        Product(id=5, notif_no="NOT202306", name="Pure Silk Shampoo", category="Hair Care",
                applicant_company_id=2, manufacturer_company_id=2, date_notified=date(2023, 6, 1),
                status="Notified", is_vertically_integrated=True, recency_score=0.5),
        Product(id=6, notif_no="NOT202107", name="Glow 100% Serum", category="Skin Care",
                applicant_company_id=1, manufacturer_company_id=1, date_notified=date(2021, 7, 1),
                status="Notified", is_vertically_integrated=True, recency_score=0.6),
    ])
    session.add_all([
        BannedIngredient(id=1, name="Mercury", alternative_names="Hg, Quicksilver",
                         health_risk_description="Kidney damage and skin rashes.",
                         regulatory_status="Banned", ewg_rating=10, pubchem_cid=23931,
                         pubchem_url="https://pubchem.ncbi.nlm.nih.gov/compound/23931"),
        BannedIngredient(id=2, name="Hydroquinone",
                         health_risk_description="Ochronosis with long-term use.",
                         regulatory_status="Restricted", ewg_rating=9),
        BannedIngredient(id=3, name="Tretinoin",
                         health_risk_description="Prescription-only retinoid."),
    ])
    session.add_all([
        BannedIngredientMetrics(ingredient_id=1, occurrences_count=1,
                                first_appearance_date=date(2020, 1, 10),
                                last_appearance_date=date(2020, 1, 10), risk_score=0.90),
        BannedIngredientMetrics(ingredient_id=2, occurrences_count=1,
                                first_appearance_date=date(2021, 10, 1),
                                last_appearance_date=date(2021, 10, 1), risk_score=0.70),
    ])
    session.add_all([
        CancelledProductIngredient(cancelled_product_id=1, banned_ingredient_id=1),
        CancelledProductIngredient(cancelled_product_id=4, banned_ingredient_id=2),
    ])
    session.add_all([
        RecommendedAlternative(id=1, cancelled_product_id=1, recommended_product_id=3,
                               brand_score=0.95, category_risk_score=0.40,
                               is_vertically_integrated=True, recency_score=1.0,
                               relevance_score=0.80),
        RecommendedAlternative(id=2, cancelled_product_id=1, recommended_product_id=2,
                               brand_score=0.80, category_risk_score=0.40,
                               is_vertically_integrated=False, recency_score=0.5,
                               relevance_score=0.60),
    ])
    session.commit()


@pytest.fixture(autouse=True)
def fresh_settings():
    """Rebuild settings for every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with the schema created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    """Seeded database session."""
    session = session_factory()
    seed(session)
    yield session
    session.close()


@pytest.fixture
def rate_limiter():
    return InMemoryRateLimiter(max_requests=100, window_seconds=60)


@pytest.fixture
def client(db_session, rate_limiter):
    """Test client bound to the seeded database."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
