"""Task-file mapping service layer."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import FileAlreadyMappedError
from domain.entities.task_file_mapping import TaskFileMapping
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access import require_todo, require_user

logger = structlog.get_logger()


class TaskFileMappingService:
    """Links uploaded evidence files to todos.

    A file belongs to at most one task; mapping a file that is already
    attached elsewhere is rejected rather than silently moved.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def map_files_to_task(
        self, task_id: UUID, file_ids: list[UUID], user_id: UUID | None
    ) -> list[TaskFileMapping]:
        """Attach files to a task. Files already on this task are left as they are."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            await require_todo(uow, task_id, user_id)

            created: list[TaskFileMapping] = []
            for file_id in dict.fromkeys(file_ids):
                existing = await uow.task_files.get_for_file(file_id)
                if any(m.task_id == task_id for m in existing):
                    continue
                if existing:
                    raise FileAlreadyMappedError(str(file_id), str(existing[0].task_id))
                mapping = TaskFileMapping(task_id=task_id, file_id=file_id, mapped_by=user_id)
                created.append(await uow.task_files.create(mapping))

            await uow.commit()

        logger.info("files_mapped_to_task", task_id=str(task_id), count=len(created))
        return created

    async def unmap_files_from_task(
        self, task_id: UUID, file_ids: list[UUID], user_id: UUID | None
    ) -> int:
        """Detach files from a task. Unknown file ids are ignored."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            await require_todo(uow, task_id, user_id)
            removed = await uow.task_files.delete(task_id, list(file_ids))
            await uow.commit()

        logger.info("files_unmapped_from_task", task_id=str(task_id), count=removed)
        return removed  # type: ignore[no-any-return]

    async def get_task_files(self, task_id: UUID, user_id: UUID | None) -> list[UUID]:
        """File ids attached to a task."""
        mappings = await self.get_task_mappings(task_id, user_id)
        return [m.file_id for m in mappings]

    async def get_task_mappings(
        self, task_id: UUID, user_id: UUID | None
    ) -> list[TaskFileMapping]:
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            await require_todo(uow, task_id, user_id)
            return await uow.task_files.get_for_task(task_id)  # type: ignore[no-any-return]

    async def get_file_tasks(self, file_id: UUID, user_id: UUID | None) -> list[UUID]:
        """Task ids a file is attached to, limited to the caller's todos."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            mappings = await uow.task_files.get_for_file(file_id)
            task_ids = []
            for mapping in mappings:
                todo = await uow.todos.get(mapping.task_id)
                if todo and todo.user_id == user_id:
                    task_ids.append(mapping.task_id)
            return task_ids

    async def is_file_mapped_to_task(
        self, task_id: UUID, file_id: UUID, user_id: UUID | None
    ) -> bool:
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            await require_todo(uow, task_id, user_id)
            return await uow.task_files.get(task_id, file_id) is not None

    async def get_files_mapped_to_tasks(
        self, task_ids: list[UUID], user_id: UUID | None
    ) -> dict[UUID, list[UUID]]:
        """Batch lookup of attached files. Every requested id is present in the result."""
        user_id = require_user(user_id)
        result: dict[UUID, list[UUID]] = {task_id: [] for task_id in task_ids}
        if not task_ids:
            return result

        async with self._uow_factory() as uow:
            owned = []
            for task_id in result:
                todo = await uow.todos.get(task_id)
                if todo and todo.user_id == user_id:
                    owned.append(task_id)
            if not owned:
                return result
            for mapping in await uow.task_files.get_for_tasks(owned):
                result[mapping.task_id].append(mapping.file_id)

        return result
