"""SQLAlchemy implementation of TaskFileMapping repository."""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.task_file_mapping import TaskFileMapping
from infrastructure.database.models import TaskFileMappingModel


class SQLAlchemyTaskFileMappingRepository:
    """SQLAlchemy implementation of ITaskFileMappingRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, task_id: UUID, file_id: UUID) -> TaskFileMapping | None:
        """Get the mapping between a task and a file."""
        stmt = select(TaskFileMappingModel).where(
            TaskFileMappingModel.task_id == task_id,
            TaskFileMappingModel.file_id == file_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_task(self, task_id: UUID) -> list[TaskFileMapping]:
        """Get all mappings of a task, oldest first."""
        stmt = (
            select(TaskFileMappingModel)
            .where(TaskFileMappingModel.task_id == task_id)
            .order_by(TaskFileMappingModel.mapped_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_for_tasks(self, task_ids: list[UUID]) -> list[TaskFileMapping]:
        """Get mappings for multiple tasks in a single query."""
        if not task_ids:
            return []

        stmt = (
            select(TaskFileMappingModel)
            .where(TaskFileMappingModel.task_id.in_(task_ids))
            .order_by(TaskFileMappingModel.mapped_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_for_file(self, file_id: UUID) -> list[TaskFileMapping]:
        """Get all mappings referencing a file."""
        stmt = select(TaskFileMappingModel).where(TaskFileMappingModel.file_id == file_id)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, mapping: TaskFileMapping) -> TaskFileMapping:
        """Create a new mapping."""
        model = TaskFileMappingModel(
            id=mapping.id,
            task_id=mapping.task_id,
            file_id=mapping.file_id,
            mapped_by=mapping.mapped_by,
            mapped_at=mapping.mapped_at,
            created_at=mapping.created_at,
            updated_at=mapping.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def delete(self, task_id: UUID, file_ids: list[UUID]) -> int:
        """Delete the mappings of a task to the given files."""
        if not file_ids:
            return 0

        stmt = delete(TaskFileMappingModel).where(
            TaskFileMappingModel.task_id == task_id,
            TaskFileMappingModel.file_id.in_(file_ids),
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]

    def _to_entity(self, model: TaskFileMappingModel) -> TaskFileMapping:
        """Convert ORM model to domain entity."""
        return TaskFileMapping(
            id=model.id,
            task_id=model.task_id,
            file_id=model.file_id,
            mapped_by=model.mapped_by,
            mapped_at=model.mapped_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
