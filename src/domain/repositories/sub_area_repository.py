"""Sub-area repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.sub_area import SubArea
from domain.entities.todo import ImpactArea


class ISubAreaRepository(Protocol):
    """Repository interface for SubArea entities."""

    async def get(self, id: UUID) -> SubArea | None:
        """Get a sub-area by ID."""
        ...

    async def get_all_for_business(self, business_id: UUID) -> list[SubArea]:
        """Get all sub-areas of a business ordered by sort order."""
        ...

    async def get_for_impact(self, business_id: UUID, impact_area: ImpactArea) -> list[SubArea]:
        """Get the sub-areas of one impact area ordered by sort order."""
        ...

    async def add_defaults(self, sub_areas: list[SubArea]) -> None:
        """Insert default sub-areas, skipping titles the business already has as defaults."""
        ...

    async def create(self, sub_area: SubArea) -> SubArea:
        """Create a new sub-area."""
        ...

    async def update(self, sub_area: SubArea) -> SubArea:
        """Update an existing sub-area."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a sub-area and return success status."""
        ...
