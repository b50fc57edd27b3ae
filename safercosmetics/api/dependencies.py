"""
Dependency Injection
FastAPI dependencies for database sessions, repositories and rate limiting.
"""

import logging
from typing import Callable, Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .config import get_settings, APISettings
from .errors import RateLimitExceededError
from .services.alternatives_service import AlternativesService
from .services.rate_limiter import RateLimiter, get_rate_limiter
from ..db.queries import CompanyRepository, IngredientRepository, ProductRepository
from ..db.session import get_session_factory

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def get_db() -> Generator[Session, None, None]:
    """
    Get database session.

    Use as FastAPI dependency:
        @app.get("/endpoint")
        def endpoint(db: Session = Depends(get_db)):
            ...
    """
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    return ProductRepository(db)


def get_company_repository(db: Session = Depends(get_db)) -> CompanyRepository:
    return CompanyRepository(db)


def get_ingredient_repository(db: Session = Depends(get_db)) -> IngredientRepository:
    return IngredientRepository(db)


def get_alternatives_service(
    repository: ProductRepository = Depends(get_product_repository),
) -> AlternativesService:
    return AlternativesService(repository)


def get_client_ip(request: Request) -> str:
    """
    Identify the client for rate limiting.

    First X-Forwarded-For entry, then X-Real-IP, else "unknown" (all
    unidentified clients share that bucket).
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    return UNKNOWN_CLIENT


def rate_limit(group: str) -> Callable[..., None]:
    """
    Build a dependency enforcing the rate limit for an endpoint group.

    Use on a router:
        router = APIRouter(dependencies=[Depends(rate_limit("companies"))])
    """

    def enforce_rate_limit(
        request: Request,
        settings: APISettings = Depends(get_settings),
        limiter: RateLimiter = Depends(get_rate_limiter),
    ) -> None:
        if not settings.enable_rate_limit:
            return

        client_ip = get_client_ip(request)
        result = limiter.check(f"{group}:{client_ip}")

        if not result.allowed:
            logger.warning(
                f"Rate limit exceeded for {client_ip} on {group}",
                extra={"client": client_ip, "group": group, "count": result.count},
            )
            raise RateLimitExceededError(retry_after=result.retry_after)

    return enforce_rate_limit
