"""Business service layer."""

from collections.abc import Callable
from uuid import UUID

import structlog

from domain.entities.business import Business
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access import require_business, require_user

logger = structlog.get_logger()


class BusinessService:
    """Service layer for the businesses a user is certifying."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def list_businesses(self, user_id: UUID | None) -> list[Business]:
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            return await uow.businesses.get_all_for_user(user_id)  # type: ignore[no-any-return]

    async def get_business(self, business_id: UUID, user_id: UUID | None) -> Business:
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            return await require_business(uow, business_id, user_id)

    async def create_business(
        self,
        user_id: UUID | None,
        name: str,
        description: str | None = None,
        industry: str | None = None,
    ) -> Business:
        """Register a new business for the caller."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            business = Business(
                user_id=user_id,
                name=name,
                description=description,
                industry=industry,
            )
            created = await uow.businesses.create(business)
            await uow.commit()

        logger.info("business_created", business_id=str(created.id))
        return created  # type: ignore[no-any-return]
