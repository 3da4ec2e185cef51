"""SQLAlchemy implementation of SubArea repository."""

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.sub_area import IconType, SubArea
from domain.entities.todo import ImpactArea
from domain.normalization import normalize_impact
from infrastructure.database.models import DEFAULT_SUB_AREA_PREDICATE, SubAreaModel


class SQLAlchemySubAreaRepository:
    """SQLAlchemy implementation of ISubAreaRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> SubArea | None:
        """Get a sub-area by ID."""
        stmt = select(SubAreaModel).where(SubAreaModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all_for_business(self, business_id: UUID) -> list[SubArea]:
        """Get all sub-areas of a business."""
        stmt = (
            select(SubAreaModel)
            .where(SubAreaModel.business_id == business_id)
            .order_by(SubAreaModel.impact_area, SubAreaModel.sort_order)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_for_impact(self, business_id: UUID, impact_area: ImpactArea) -> list[SubArea]:
        """Get the sub-areas of one impact area."""
        stmt = (
            select(SubAreaModel)
            .where(
                SubAreaModel.business_id == business_id,
                SubAreaModel.impact_area == impact_area.value,
            )
            .order_by(SubAreaModel.sort_order)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, sub_area: SubArea) -> SubArea:
        """Create a new sub-area."""
        model = self._to_model(sub_area)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def add_defaults(self, sub_areas: list[SubArea]) -> None:
        """Insert default sub-areas in one statement.

        Rows that collide with an existing default title are skipped, so two
        concurrent seeders leave a single set behind.
        """
        if not sub_areas:
            return
        dialect = self._session.get_bind().dialect.name
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        stmt = (
            insert(SubAreaModel)
            .values([self._values(sub_area) for sub_area in sub_areas])
            .on_conflict_do_nothing(
                index_elements=["business_id", "impact_area", "title"],
                index_where=DEFAULT_SUB_AREA_PREDICATE,
            )
        )
        await self._session.execute(stmt)

    async def update(self, sub_area: SubArea) -> SubArea:
        """Update an existing sub-area."""
        stmt = select(SubAreaModel).where(SubAreaModel.id == sub_area.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Sub-area {sub_area.id} not found")

        model.title = sub_area.title
        model.description = sub_area.description
        model.sort_order = sub_area.sort_order
        model.updated_at = sub_area.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a sub-area."""
        stmt = select(SubAreaModel).where(SubAreaModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: SubAreaModel) -> SubArea:
        """Convert ORM model to domain entity."""
        return SubArea(
            id=model.id,
            business_id=model.business_id,
            impact_area=normalize_impact(model.impact_area),
            title=model.title,
            description=model.description,
            icon_type=IconType(model.icon_type),
            sort_order=model.sort_order,
            is_user_created=model.is_user_created,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _values(self, entity: SubArea) -> dict[str, Any]:
        return {
            "id": entity.id,
            "business_id": entity.business_id,
            "impact_area": entity.impact_area.value,
            "title": entity.title,
            "description": entity.description,
            "icon_type": entity.icon_type.value,
            "sort_order": entity.sort_order,
            "is_user_created": entity.is_user_created,
            "created_at": entity.created_at,
            "updated_at": entity.updated_at,
        }

    def _to_model(self, entity: SubArea) -> SubAreaModel:
        """Convert domain entity to ORM model."""
        return SubAreaModel(**self._values(entity))
