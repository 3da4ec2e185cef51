"""SQLAlchemy implementation of Todo repository."""

from typing import Any
from uuid import UUID

from sqlalchemy import Select, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.todo import Todo
from domain.normalization import normalize_todo_record
from infrastructure.database.models import TaskFileMappingModel, TodoModel

_COLUMNS = tuple(column.key for column in TodoModel.__table__.columns)


class SQLAlchemyTodoRepository:
    """SQLAlchemy implementation of ITodoRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Todo | None:
        """Get a todo by ID."""
        stmt = select(TodoModel).where(TodoModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_active_for_business(self, business_id: UUID, user_id: UUID) -> list[Todo]:
        """Get non-deleted todos of a business, newest first."""
        stmt = (
            select(TodoModel)
            .where(
                TodoModel.business_id == business_id,
                TodoModel.user_id == user_id,
                TodoModel.deleted_at.is_(None),
            )
            .order_by(TodoModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_deleted_for_business(self, business_id: UUID, user_id: UUID) -> list[Todo]:
        """Get the bin of a business, most recently deleted first."""
        stmt = (
            select(TodoModel)
            .where(
                TodoModel.business_id == business_id,
                TodoModel.user_id == user_id,
                TodoModel.deleted_at.is_not(None),
            )
            .order_by(TodoModel.deleted_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, todo: Todo) -> Todo:
        """Create a new todo."""
        model = self._to_model(todo)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def create_many(self, todos: list[Todo]) -> list[Todo]:
        """Create several todos in one flush."""
        models = [self._to_model(todo) for todo in todos]
        self._session.add_all(models)
        await self._session.flush()
        return [self._to_entity(model) for model in models]

    async def update(self, todo: Todo) -> Todo:
        """Update an existing todo."""
        stmt = select(TodoModel).where(TodoModel.id == todo.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Todo {todo.id} not found")

        # Update fields
        model.title = todo.title
        model.impact = todo.impact.value
        model.sub_area_id = todo.sub_area_id
        model.requirement_code = todo.requirement_code
        model.kb_action_id = todo.kb_action_id
        model.description_md = todo.description_md
        model.priority = todo.priority.value
        model.effort = todo.effort.value
        model.status = todo.status.value
        model.owner_user_id = todo.owner_user_id
        model.due_date = todo.due_date
        model.evidence_chunk_ids = list(todo.evidence_chunk_ids)
        model.is_impact_locked = todo.is_impact_locked
        model.anchor_quote = todo.anchor_quote
        model.kb_refs = list(todo.kb_refs)
        model.rationale = todo.rationale
        model.updated_at = todo.updated_at
        model.completed_at = todo.completed_at
        model.deleted_at = todo.deleted_at

        await self._session.flush()
        return self._to_entity(model)

    async def hard_delete_for_business(self, business_id: UUID, user_id: UUID) -> int:
        """Permanently delete every todo of a business, with its file mappings."""
        scope = select(TodoModel.id).where(
            TodoModel.business_id == business_id,
            TodoModel.user_id == user_id,
        )
        return await self._hard_delete(scope)

    async def hard_delete_for_user(self, user_id: UUID) -> int:
        """Permanently delete every todo a user owns, with its file mappings."""
        scope = select(TodoModel.id).where(TodoModel.user_id == user_id)
        return await self._hard_delete(scope)

    async def clear_sub_area(self, sub_area_id: UUID) -> int:
        """Unassign all todos from a sub-area."""
        stmt = (
            update(TodoModel)
            .where(TodoModel.sub_area_id == sub_area_id)
            .values(sub_area_id=None)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def _hard_delete(self, scope: Select[Any]) -> int:
        await self._session.execute(
            delete(TaskFileMappingModel)
            .where(TaskFileMappingModel.task_id.in_(scope))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(
            delete(TodoModel)
            .where(TodoModel.id.in_(scope))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    def _to_entity(self, model: TodoModel) -> Todo:
        """Convert ORM model to domain entity, normalising legacy values."""
        return normalize_todo_record({key: getattr(model, key) for key in _COLUMNS})

    def _to_model(self, entity: Todo) -> TodoModel:
        """Convert domain entity to ORM model."""
        return TodoModel(
            id=entity.id,
            user_id=entity.user_id,
            business_id=entity.business_id,
            sub_area_id=entity.sub_area_id,
            title=entity.title,
            impact=entity.impact.value,
            requirement_code=entity.requirement_code,
            kb_action_id=entity.kb_action_id,
            description_md=entity.description_md,
            priority=entity.priority.value,
            effort=entity.effort.value,
            status=entity.status.value,
            owner_user_id=entity.owner_user_id,
            due_date=entity.due_date,
            evidence_chunk_ids=list(entity.evidence_chunk_ids),
            is_impact_locked=entity.is_impact_locked,
            anchor_quote=entity.anchor_quote,
            kb_refs=list(entity.kb_refs),
            rationale=entity.rationale,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            completed_at=entity.completed_at,
            deleted_at=entity.deleted_at,
        )
