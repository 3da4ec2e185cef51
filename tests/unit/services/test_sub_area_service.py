"""Unit tests for SubArea service layer."""

from typing import Any
from uuid import UUID, uuid4

import pytest

from core.exceptions import (
    BusinessNotFoundError,
    SubAreaNotFoundError,
    SubAreaProtectedError,
    ValidationFailedError,
)
from domain.entities.business import Business
from domain.entities.sub_area import (
    DEFAULT_SUB_AREAS,
    USER_SUB_AREA_SORT_ORDER,
    IconType,
    SubArea,
)
from domain.entities.todo import CANONICAL_IMPACT_AREAS, ImpactArea
from domain.services.sub_area_service import SubAreaService, seed_missing_defaults
from infrastructure.auth.provider import TokenUser
from infrastructure.memory.memory_uow import InMemoryStore
from tests.unit.conftest import FakeUnitOfWork


def _echo(value: Any) -> Any:
    return value


@pytest.fixture
def service(uow: FakeUnitOfWork) -> SubAreaService:
    uow.sub_areas.create.side_effect = _echo
    uow.sub_areas.update.side_effect = _echo
    return SubAreaService(lambda: uow)


def _sub_area(business_id: UUID, impact: ImpactArea, **kwargs: Any) -> SubArea:
    return SubArea(business_id=business_id, impact_area=impact, title=kwargs.pop("title", "X"), **kwargs)


class TestSeedMissingDefaults:
    @pytest.mark.asyncio
    async def test_seeds_every_canonical_area(
        self, memory_store: InMemoryStore, business: Business
    ) -> None:
        async with memory_store.uow_factory() as uow:
            result = await seed_missing_defaults(uow, business.id)
            await uow.commit()

        expected = sum(len(DEFAULT_SUB_AREAS[impact]) for impact in CANONICAL_IMPACT_AREAS)
        assert len(result) == expected
        assert len(memory_store.state.sub_areas) == expected
        assert {s.impact_area for s in result} == set(CANONICAL_IMPACT_AREAS)
        assert all(not s.is_user_created and s.icon_type == IconType.DEFAULT for s in result)

    @pytest.mark.asyncio
    async def test_leaves_populated_areas_alone(
        self, memory_store: InMemoryStore, business: Business
    ) -> None:
        custom = _sub_area(business.id, ImpactArea.WORKERS, title="Wellbeing", is_user_created=True)
        memory_store.state.sub_areas[custom.id] = custom

        async with memory_store.uow_factory() as uow:
            result = await seed_missing_defaults(uow, business.id)

        workers = [s for s in result if s.impact_area == ImpactArea.WORKERS]
        assert workers == [custom]

    @pytest.mark.asyncio
    async def test_stale_read_does_not_duplicate(
        self, memory_store: InMemoryStore, business: Business
    ) -> None:
        """A seeder that read an empty table before another one committed adds nothing new."""
        async with memory_store.uow_factory() as first:
            await seed_missing_defaults(first, business.id)
            await first.commit()

        async with memory_store.uow_factory() as second:
            stale = [
                _sub_area(business.id, ImpactArea.GOVERNANCE, title=title)
                for title, _ in DEFAULT_SUB_AREAS[ImpactArea.GOVERNANCE]
            ]
            await second.sub_areas.add_defaults(stale)
            await second.commit()

        expected = sum(len(DEFAULT_SUB_AREAS[impact]) for impact in CANONICAL_IMPACT_AREAS)
        assert len(memory_store.state.sub_areas) == expected

    @pytest.mark.asyncio
    async def test_no_writes_when_complete(self, uow: FakeUnitOfWork, business_id: UUID) -> None:
        uow.sub_areas.get_all_for_business.return_value = [
            _sub_area(business_id, impact) for impact in CANONICAL_IMPACT_AREAS
        ]

        result = await seed_missing_defaults(uow, business_id)  # type: ignore[arg-type]

        assert len(result) == 5
        uow.sub_areas.add_defaults.assert_not_called()


class TestEnsureDefaults:
    @pytest.mark.asyncio
    async def test_commits_and_sorts_by_area(
        self, memory_store: InMemoryStore, business: Business, test_user: TokenUser
    ) -> None:
        service = SubAreaService(memory_store.uow_factory)

        result = await service.ensure_defaults(business.id, test_user.id)
        again = await service.ensure_defaults(business.id, test_user.id)

        assert result[0].impact_area == ImpactArea.GOVERNANCE
        assert result[-1].impact_area == ImpactArea.CUSTOMERS
        assert [s.id for s in again] == [s.id for s in result]

    @pytest.mark.asyncio
    async def test_requires_owned_business(
        self, service: SubAreaService, uow: FakeUnitOfWork, owned_business: Business
    ) -> None:
        uow.businesses.get.return_value = owned_business

        with pytest.raises(BusinessNotFoundError):
            await service.ensure_defaults(owned_business.id, uuid4())


class TestCreateSubArea:
    @pytest.mark.asyncio
    async def test_user_created_defaults(
        self,
        service: SubAreaService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        owned_business: Business,
    ) -> None:
        uow.businesses.get.return_value = owned_business

        sub_area = await service.create_sub_area(
            owned_business.id, user_id, ImpactArea.COMMUNITY, "Volunteering"
        )

        assert sub_area.is_user_created is True
        assert sub_area.icon_type == IconType.USER_ADDED
        assert sub_area.sort_order == USER_SUB_AREA_SORT_ORDER
        assert uow.committed

    @pytest.mark.asyncio
    async def test_explicit_sort_order(
        self,
        service: SubAreaService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        owned_business: Business,
    ) -> None:
        uow.businesses.get.return_value = owned_business

        sub_area = await service.create_sub_area(
            owned_business.id, user_id, ImpactArea.COMMUNITY, "Volunteering", sort_order=2
        )

        assert sub_area.sort_order == 2


class TestUpdateSubArea:
    @pytest.mark.asyncio
    async def test_partial_update(
        self,
        service: SubAreaService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        owned_business: Business,
    ) -> None:
        existing = _sub_area(owned_business.id, ImpactArea.WORKERS, title="Old", description="d")
        uow.sub_areas.get.return_value = existing
        uow.sub_areas.get_for_impact.return_value = [existing]
        uow.businesses.get.return_value = owned_business

        result = await service.update_sub_area(existing.id, user_id, title="New")

        assert result.title == "New"
        assert result.description == "d"

    @pytest.mark.asyncio
    async def test_default_cannot_take_a_sibling_default_title(
        self,
        service: SubAreaService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        owned_business: Business,
    ) -> None:
        existing = _sub_area(owned_business.id, ImpactArea.WORKERS, title="Pay")
        sibling = _sub_area(owned_business.id, ImpactArea.WORKERS, title="Benefits")
        uow.sub_areas.get.return_value = existing
        uow.sub_areas.get_for_impact.return_value = [existing, sibling]
        uow.businesses.get.return_value = owned_business

        with pytest.raises(ValidationFailedError):
            await service.update_sub_area(existing.id, user_id, title="Benefits")

        uow.sub_areas.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_foreign_sub_area_is_not_found(
        self, service: SubAreaService, uow: FakeUnitOfWork, owned_business: Business
    ) -> None:
        uow.sub_areas.get.return_value = _sub_area(owned_business.id, ImpactArea.WORKERS)
        uow.businesses.get.return_value = owned_business

        with pytest.raises(SubAreaNotFoundError):
            await service.update_sub_area(uuid4(), uuid4(), title="New")

    @pytest.mark.asyncio
    async def test_sort_order_batch(
        self,
        service: SubAreaService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        owned_business: Business,
    ) -> None:
        first = _sub_area(owned_business.id, ImpactArea.WORKERS, sort_order=0)
        second = _sub_area(owned_business.id, ImpactArea.WORKERS, sort_order=1)
        uow.businesses.get.return_value = owned_business
        uow.sub_areas.get_all_for_business.return_value = [first, second]

        result = await service.update_sort_order(
            owned_business.id, user_id, {first.id: 1, second.id: 0}
        )

        assert [s.id for s in result] == [second.id, first.id]
        assert uow.sub_areas.update.call_count == 2

    @pytest.mark.asyncio
    async def test_sort_order_unknown_id(
        self,
        service: SubAreaService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        owned_business: Business,
    ) -> None:
        uow.businesses.get.return_value = owned_business
        uow.sub_areas.get_all_for_business.return_value = []

        with pytest.raises(SubAreaNotFoundError):
            await service.update_sort_order(owned_business.id, user_id, {uuid4(): 1})

        assert not uow.committed


class TestDeleteSubArea:
    @pytest.mark.asyncio
    async def test_deletes_user_created_and_unassigns_todos(
        self,
        service: SubAreaService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        owned_business: Business,
    ) -> None:
        custom = _sub_area(owned_business.id, ImpactArea.WORKERS, is_user_created=True)
        uow.sub_areas.get.return_value = custom
        uow.businesses.get.return_value = owned_business
        uow.sub_areas.delete.return_value = True
        uow.todos.clear_sub_area.return_value = 3

        assert await service.delete_sub_area(custom.id, user_id) is True
        uow.todos.clear_sub_area.assert_called_once_with(custom.id)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_default_sub_area_is_protected(
        self,
        service: SubAreaService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        owned_business: Business,
    ) -> None:
        default = _sub_area(owned_business.id, ImpactArea.WORKERS, is_user_created=False)
        uow.sub_areas.get.return_value = default
        uow.businesses.get.return_value = owned_business

        with pytest.raises(SubAreaProtectedError):
            await service.delete_sub_area(default.id, user_id)

        uow.sub_areas.delete.assert_not_called()
