"""Business repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.business import Business


class IBusinessRepository(Protocol):
    """Repository interface for Business entities."""

    async def get(self, id: UUID) -> Business | None:
        """Get a business by ID."""
        ...

    async def get_all_for_user(self, user_id: UUID) -> list[Business]:
        """Get all businesses owned by a user, oldest first."""
        ...

    async def create(self, business: Business) -> Business:
        """Create a new business."""
        ...
