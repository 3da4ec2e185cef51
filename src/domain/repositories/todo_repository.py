"""Todo repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.todo import Todo


class ITodoRepository(Protocol):
    """Repository interface for Todo entities.

    Every listing is scoped by both the business and the owning user, mirroring
    the row-level ownership rule of the database.
    """

    async def get(self, id: UUID) -> Todo | None:
        """Get a todo by ID, deleted or not."""
        ...

    async def get_active_for_business(self, business_id: UUID, user_id: UUID) -> list[Todo]:
        """Get non-deleted todos, most recently created first."""
        ...

    async def get_deleted_for_business(self, business_id: UUID, user_id: UUID) -> list[Todo]:
        """Get soft-deleted todos, most recently deleted first."""
        ...

    async def create(self, todo: Todo) -> Todo:
        """Create a new todo."""
        ...

    async def create_many(self, todos: list[Todo]) -> list[Todo]:
        """Create several todos in one round trip."""
        ...

    async def update(self, todo: Todo) -> Todo:
        """Update an existing todo."""
        ...

    async def hard_delete_for_business(self, business_id: UUID, user_id: UUID) -> int:
        """Permanently delete every todo of a business. Returns the row count."""
        ...

    async def hard_delete_for_user(self, user_id: UUID) -> int:
        """Permanently delete every todo owned by a user. Returns the row count."""
        ...

    async def clear_sub_area(self, sub_area_id: UUID) -> int:
        """Unassign all todos from a sub-area. Returns the row count."""
        ...
