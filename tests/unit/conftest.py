"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.business import Business
from domain.entities.todo import ImpactArea, Todo


class FakeUnitOfWork:
    """Stands in for a unit of work; each repository is an ``AsyncMock``."""

    def __init__(self) -> None:
        self.todos = AsyncMock()
        self.sub_areas = AsyncMock()
        self.businesses = AsyncMock()
        self.task_files = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, exc_type: Any, *args: Any) -> None:
        if exc_type is not None:
            self.rolled_back = True


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """A unit of work that commits nothing."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """The caller."""
    return uuid4()


@pytest.fixture
def business_id() -> UUID:
    """The caller's business."""
    return uuid4()


@pytest.fixture
def owned_business(user_id: UUID, business_id: UUID) -> Business:
    return Business(
        id=business_id,
        user_id=user_id,
        name="Acme Outdoor",
        description="Acme Outdoor makes recycled hiking gear. We repair everything we sell.",
    )


@pytest.fixture
def sample_todo(user_id: UUID, business_id: UUID) -> Todo:
    return Todo(
        user_id=user_id,
        business_id=business_id,
        title="Publish an environmental policy",
        impact=ImpactArea.ENVIRONMENT,
    )
