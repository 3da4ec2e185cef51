"""Health check endpoints."""

from datetime import datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from core.config import settings
from infrastructure.database.session import async_session_factory

router = APIRouter(tags=["health"])

API_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    test_data_reset_enabled: bool = False


def _health(request: Request, status: str, database: str | None = None) -> HealthResponse:
    return HealthResponse(
        status=status,
        version=API_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
        database=database,
        test_data_reset_enabled=getattr(request.app.state, "test_data_reset_enabled", False),
    )


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health_check(request: Request) -> HealthResponse:
    """Does not touch the database. Reports whether the reset routes are mounted."""
    return _health(request, "healthy")


@router.get("/health/detailed", response_model=HealthResponse, summary="Readiness probe")
async def detailed_health_check(request: Request) -> HealthResponse:
    """Adds a ``SELECT 1`` round trip; ``degraded`` when the database is unreachable."""
    try:
        async with async_session_factory() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        return _health(request, "degraded", f"unhealthy: {exc}")
    return _health(request, "healthy", "healthy")
