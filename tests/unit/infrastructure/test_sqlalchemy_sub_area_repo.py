"""Unit tests for default sub-area seeding against SQLite."""

from collections.abc import Callable

import pytest

from domain.entities.business import Business
from domain.entities.sub_area import DEFAULT_SUB_AREAS, IconType, SubArea
from domain.entities.todo import CANONICAL_IMPACT_AREAS, ImpactArea
from domain.services.sub_area_service import seed_missing_defaults
from infrastructure.auth.provider import TokenUser
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

DEFAULT_COUNT = sum(len(DEFAULT_SUB_AREAS[impact]) for impact in CANONICAL_IMPACT_AREAS)


@pytest.fixture
async def stored_business(
    sql_uow_factory: Callable[[], SQLAlchemyUnitOfWork], test_user: TokenUser
) -> Business:
    async with sql_uow_factory() as uow:
        business = await uow.businesses.create(Business(user_id=test_user.id, name="Acme"))
        await uow.commit()
    return business


def _defaults(business: Business, impact: ImpactArea) -> list[SubArea]:
    return [
        SubArea(business_id=business.id, impact_area=impact, title=title, sort_order=position)
        for position, (title, _) in enumerate(DEFAULT_SUB_AREAS[impact])
    ]


class TestAddDefaults:
    @pytest.mark.asyncio
    async def test_second_batch_is_skipped(
        self,
        sql_uow_factory: Callable[[], SQLAlchemyUnitOfWork],
        stored_business: Business,
    ) -> None:
        for _ in range(2):
            async with sql_uow_factory() as uow:
                await uow.sub_areas.add_defaults(_defaults(stored_business, ImpactArea.WORKERS))
                await uow.commit()

        async with sql_uow_factory() as uow:
            stored = await uow.sub_areas.get_all_for_business(stored_business.id)

        assert len(stored) == len(DEFAULT_SUB_AREAS[ImpactArea.WORKERS])

    @pytest.mark.asyncio
    async def test_user_created_titles_may_repeat(
        self,
        sql_uow_factory: Callable[[], SQLAlchemyUnitOfWork],
        stored_business: Business,
    ) -> None:
        title = DEFAULT_SUB_AREAS[ImpactArea.WORKERS][0][0]
        async with sql_uow_factory() as uow:
            await uow.sub_areas.add_defaults(_defaults(stored_business, ImpactArea.WORKERS))
            await uow.sub_areas.create(
                SubArea(
                    business_id=stored_business.id,
                    impact_area=ImpactArea.WORKERS,
                    title=title,
                    icon_type=IconType.USER_ADDED,
                    is_user_created=True,
                )
            )
            await uow.commit()

        async with sql_uow_factory() as uow:
            stored = await uow.sub_areas.get_for_impact(stored_business.id, ImpactArea.WORKERS)

        assert [s.title for s in stored].count(title) == 2


class TestSeedMissingDefaults:
    @pytest.mark.asyncio
    async def test_seeder_with_stale_read_adds_nothing(
        self,
        sql_uow_factory: Callable[[], SQLAlchemyUnitOfWork],
        stored_business: Business,
    ) -> None:
        """Both seeders saw an empty table; only one set survives."""
        async with sql_uow_factory() as uow:
            await seed_missing_defaults(uow, stored_business.id)
            await uow.commit()

        async with sql_uow_factory() as uow:
            for impact in CANONICAL_IMPACT_AREAS:
                await uow.sub_areas.add_defaults(_defaults(stored_business, impact))
            await uow.commit()

        async with sql_uow_factory() as uow:
            stored = await uow.sub_areas.get_all_for_business(stored_business.id)

        assert len(stored) == DEFAULT_COUNT
