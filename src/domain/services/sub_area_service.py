"""Sub-area registry service."""

from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import structlog

from core.exceptions import SubAreaNotFoundError, SubAreaProtectedError, ValidationFailedError
from domain.entities.sub_area import (
    DEFAULT_SUB_AREAS,
    USER_SUB_AREA_SORT_ORDER,
    IconType,
    SubArea,
)
from domain.entities.todo import CANONICAL_IMPACT_AREAS, ImpactArea
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access import require_business, require_user

logger = structlog.get_logger()

_AREA_POSITION = {impact: index for index, impact in enumerate(CANONICAL_IMPACT_AREAS)}


def _display_key(sub_area: SubArea) -> tuple[int, int]:
    return (_AREA_POSITION.get(sub_area.impact_area, len(_AREA_POSITION)), sub_area.sort_order)


async def seed_missing_defaults(uow: IUnitOfWork, business_id: UUID) -> list[SubArea]:
    """Seed the starter sub-areas of every canonical impact area that has none.

    An area that already holds any sub-area, default or user-created, is left
    alone. The insert skips default titles that already exist, so concurrent
    callers never duplicate rows. Returns the full set as stored.
    """
    existing = await uow.sub_areas.get_all_for_business(business_id)
    covered = {sub_area.impact_area for sub_area in existing}

    to_create = [
        SubArea(
            business_id=business_id,
            impact_area=impact,
            title=title,
            description=description,
            icon_type=IconType.DEFAULT,
            sort_order=position,
            is_user_created=False,
        )
        for impact in CANONICAL_IMPACT_AREAS
        if impact not in covered
        for position, (title, description) in enumerate(DEFAULT_SUB_AREAS[impact])
    ]
    if not to_create:
        return existing

    await uow.sub_areas.add_defaults(to_create)
    seeded = await uow.sub_areas.get_all_for_business(business_id)
    logger.info(
        "default_sub_areas_seeded",
        business_id=str(business_id),
        count=len(seeded) - len(existing),
    )
    return seeded


class SubAreaService:
    """Service layer for the sub-area registry."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def load_sub_areas(self, business_id: UUID, user_id: UUID | None) -> list[SubArea]:
        """Get every sub-area of a business."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            await require_business(uow, business_id, user_id)
            return await uow.sub_areas.get_all_for_business(business_id)  # type: ignore[no-any-return]

    async def load_sub_areas_by_impact(
        self, business_id: UUID, user_id: UUID | None, impact_area: ImpactArea
    ) -> list[SubArea]:
        """Get the sub-areas of one impact area only."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            await require_business(uow, business_id, user_id)
            return await uow.sub_areas.get_for_impact(business_id, impact_area)  # type: ignore[no-any-return]

    async def ensure_defaults(self, business_id: UUID, user_id: UUID | None) -> list[SubArea]:
        """Idempotently seed the starter set. Safe to call on every page load."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            await require_business(uow, business_id, user_id)
            sub_areas = await seed_missing_defaults(uow, business_id)
            await uow.commit()
            return sorted(sub_areas, key=_display_key)

    async def create_sub_area(
        self,
        business_id: UUID,
        user_id: UUID | None,
        impact_area: ImpactArea,
        title: str,
        description: str | None = None,
        sort_order: int | None = None,
    ) -> SubArea:
        """Add a user-created sub-area."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            await require_business(uow, business_id, user_id)
            sub_area = SubArea(
                business_id=business_id,
                impact_area=impact_area,
                title=title,
                description=description,
                icon_type=IconType.USER_ADDED,
                sort_order=USER_SUB_AREA_SORT_ORDER if sort_order is None else sort_order,
                is_user_created=True,
            )
            created = await uow.sub_areas.create(sub_area)
            await uow.commit()

        logger.info(
            "sub_area_created",
            business_id=str(business_id),
            sub_area_id=str(created.id),
            impact_area=impact_area.value,
        )
        return created  # type: ignore[no-any-return]

    async def update_sub_area(
        self,
        sub_area_id: UUID,
        user_id: UUID | None,
        title: str | None = None,
        description: str | None = None,
        sort_order: int | None = None,
    ) -> SubArea:
        """Rename, re-describe or move a sub-area."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            sub_area = await self._get_owned(uow, sub_area_id, user_id)
            if title is not None and title != sub_area.title and not sub_area.is_user_created:
                siblings = await uow.sub_areas.get_for_impact(
                    sub_area.business_id, sub_area.impact_area
                )
                if any(not s.is_user_created and s.title == title for s in siblings):
                    raise ValidationFailedError(
                        "Another default sub-area in this impact area already has that title",
                        details={"sub_area_id": str(sub_area_id), "title": title},
                    )
            if title is not None:
                sub_area.title = title
            if description is not None:
                sub_area.description = description
            if sort_order is not None:
                sub_area.sort_order = sort_order
            sub_area.updated_at = datetime.utcnow()
            updated = await uow.sub_areas.update(sub_area)
            await uow.commit()
            return updated  # type: ignore[no-any-return]

    async def update_sort_order(
        self, business_id: UUID, user_id: UUID | None, orders: dict[UUID, int]
    ) -> list[SubArea]:
        """Apply a batch of new positions inside one business."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            await require_business(uow, business_id, user_id)
            sub_areas = {s.id: s for s in await uow.sub_areas.get_all_for_business(business_id)}
            for sub_area_id in orders:
                if sub_area_id not in sub_areas:
                    raise SubAreaNotFoundError(str(sub_area_id))

            now = datetime.utcnow()
            for sub_area_id, sort_order in orders.items():
                sub_area = sub_areas[sub_area_id]
                sub_area.sort_order = sort_order
                sub_area.updated_at = now
                await uow.sub_areas.update(sub_area)
            await uow.commit()

        return sorted(sub_areas.values(), key=_display_key)

    async def delete_sub_area(self, sub_area_id: UUID, user_id: UUID | None) -> bool:
        """Delete a user-created sub-area; its todos become unassigned."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            sub_area = await self._get_owned(uow, sub_area_id, user_id)
            if not sub_area.is_user_created:
                raise SubAreaProtectedError(str(sub_area_id))
            unassigned = await uow.todos.clear_sub_area(sub_area_id)
            deleted = await uow.sub_areas.delete(sub_area_id)
            await uow.commit()

        logger.info(
            "sub_area_deleted",
            sub_area_id=str(sub_area_id),
            unassigned_todos=unassigned,
        )
        return deleted  # type: ignore[no-any-return]

    async def _get_owned(self, uow: IUnitOfWork, sub_area_id: UUID, user_id: UUID) -> SubArea:
        sub_area = await uow.sub_areas.get(sub_area_id)
        if not sub_area:
            raise SubAreaNotFoundError(str(sub_area_id))
        business = await uow.businesses.get(sub_area.business_id)
        if not business or business.user_id != user_id:
            raise SubAreaNotFoundError(str(sub_area_id))
        return sub_area
