"""Task-file mapping repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.task_file_mapping import TaskFileMapping


class ITaskFileMappingRepository(Protocol):
    """Repository interface for task-file associations."""

    async def get(self, task_id: UUID, file_id: UUID) -> TaskFileMapping | None:
        """Get the mapping between a task and a file, if any."""
        ...

    async def get_for_task(self, task_id: UUID) -> list[TaskFileMapping]:
        """Get all mappings of a task, oldest first."""
        ...

    async def get_for_tasks(self, task_ids: list[UUID]) -> list[TaskFileMapping]:
        """Get all mappings of several tasks in a single query."""
        ...

    async def get_for_file(self, file_id: UUID) -> list[TaskFileMapping]:
        """Get all mappings that reference a file."""
        ...

    async def create(self, mapping: TaskFileMapping) -> TaskFileMapping:
        """Create a new mapping."""
        ...

    async def delete(self, task_id: UUID, file_ids: list[UUID]) -> int:
        """Delete mappings of a task to the given files. Returns the row count."""
        ...
