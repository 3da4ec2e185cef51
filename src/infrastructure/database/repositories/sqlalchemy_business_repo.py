"""SQLAlchemy implementation of Business repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.business import Business
from infrastructure.database.models import BusinessModel


class SQLAlchemyBusinessRepository:
    """SQLAlchemy implementation of IBusinessRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Business | None:
        """Get a business by ID."""
        stmt = select(BusinessModel).where(BusinessModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all_for_user(self, user_id: UUID) -> list[Business]:
        """Get all businesses of a user, oldest first."""
        stmt = (
            select(BusinessModel)
            .where(BusinessModel.user_id == user_id)
            .order_by(BusinessModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, business: Business) -> Business:
        """Create a new business."""
        model = BusinessModel(
            id=business.id,
            user_id=business.user_id,
            name=business.name,
            description=business.description,
            industry=business.industry,
            created_at=business.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    def _to_entity(self, model: BusinessModel) -> Business:
        """Convert ORM model to domain entity."""
        return Business(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            description=model.description,
            industry=model.industry,
            created_at=model.created_at,
        )
