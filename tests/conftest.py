"""Pytest configuration and fixtures.

Two storage backends are available: an in-memory SQLite database behind the
real SQLAlchemy repositories (API tests) and ``InMemoryStore`` (service and
client tests).
"""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any
from uuid import UUID

os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities.business import Business
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.memory.memory_uow import InMemoryStore


@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


SQLITE_URL = "sqlite+aiosqlite:///:memory:"

OWNER_ID = UUID("0b6c1f4e-8a53-4d2e-9f71-3c5a2b8d9e10")

BUSINESS_DESCRIPTION = (
    "We roast speciality coffee in Bristol and sell it to cafes across the UK. "
    "Our beans are sourced directly from cooperatives in Colombia."
)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """One SQLite database per test; StaticPool keeps it alive across sessions."""
    engine = create_async_engine(
        SQLITE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def sql_uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    return lambda: SQLAlchemyUnitOfWork(session_factory)


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


@pytest.fixture
def test_user() -> TokenUser:
    """The business owner every authenticated test acts as."""
    return TokenUser(id=OWNER_ID, email="owner@beanthere.example", display_name="Bean There")


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key="test-secret-key", algorithm="HS256", expire_minutes=30)


@pytest.fixture
def auth_headers(auth_provider: JWTAuthProvider, test_user: TokenUser) -> dict[str, str]:
    return {"Authorization": f"Bearer {auth_provider.create_token(test_user)}"}


# ---------------------------------------------------------------------------
# In-memory storage
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def business(memory_store: InMemoryStore, test_user: TokenUser) -> Business:
    """A business owned by ``test_user``, already in ``memory_store``."""
    business = Business(
        user_id=test_user.id,
        name="Bean There Coffee",
        description=BUSINESS_DESCRIPTION,
        industry="Food & Beverage",
    )
    memory_store.state.businesses[business.id] = business
    return business


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """The production app with no credentials and no overrides."""
    from main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    sql_uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    test_user: TokenUser,
    auth_provider: JWTAuthProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """An app with the reset routes mounted, signed in as ``test_user``.

    Services run against the SQLite database and generate tasks with the
    baseline generator.
    """
    from api.dependencies.auth import get_auth_provider, get_current_user
    from api.v1.dependencies import (
        get_analysis_service,
        get_business_service,
        get_sub_area_service,
        get_task_file_mapping_service,
    )
    from domain.services.analysis_service import AnalysisService
    from domain.services.business_service import BusinessService
    from domain.services.sub_area_service import SubAreaService
    from domain.services.task_file_mapping_service import TaskFileMappingService
    from infrastructure.ai.baseline_generator import BaselineTaskGenerator
    from main import create_app

    app = create_app(enable_test_data_reset=True)

    analysis = AnalysisService(
        sql_uow_factory,
        task_generator=BaselineTaskGenerator(),
        allow_test_data_reset=True,
    )
    overrides: dict[Callable[..., Any], Callable[..., Any]] = {
        get_current_user: lambda: test_user,
        get_auth_provider: lambda: auth_provider,
        get_analysis_service: lambda: analysis,
        get_business_service: lambda: BusinessService(sql_uow_factory),
        get_sub_area_service: lambda: SubAreaService(sql_uow_factory),
        get_task_file_mapping_service: lambda: TaskFileMappingService(sql_uow_factory),
    }
    app.dependency_overrides.update(overrides)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
