"""In-memory Unit of Work.

Backs the service layer without a database: local development, the
``ServiceGateway`` used by the client store and end-to-end tests. Writes are
staged on a copy of the shared state and published on ``commit``; leaving the
context without committing discards them.
"""

import copy
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from domain.entities.business import Business
from domain.entities.sub_area import SubArea
from domain.entities.task_file_mapping import TaskFileMapping
from domain.entities.todo import ImpactArea, Todo


@dataclass
class MemoryState:
    """Tables shared by every unit of work created from one store."""

    businesses: dict[UUID, Business] = field(default_factory=dict)
    todos: dict[UUID, Todo] = field(default_factory=dict)
    sub_areas: dict[UUID, SubArea] = field(default_factory=dict)
    task_files: dict[UUID, TaskFileMapping] = field(default_factory=dict)


class MemoryTodoRepository:
    """Dict-backed ITodoRepository."""

    def __init__(self, state: MemoryState) -> None:
        self._state = state

    async def get(self, id: UUID) -> Todo | None:
        todo = self._state.todos.get(id)
        return replace(todo) if todo else None

    async def get_active_for_business(self, business_id: UUID, user_id: UUID) -> list[Todo]:
        todos = [
            replace(t)
            for t in self._state.todos.values()
            if t.business_id == business_id and t.user_id == user_id and t.deleted_at is None
        ]
        return sorted(todos, key=lambda t: t.created_at, reverse=True)

    async def get_deleted_for_business(self, business_id: UUID, user_id: UUID) -> list[Todo]:
        todos = [
            replace(t)
            for t in self._state.todos.values()
            if t.business_id == business_id
            and t.user_id == user_id
            and t.deleted_at is not None
        ]
        return sorted(todos, key=lambda t: t.deleted_at or datetime.min, reverse=True)

    async def create(self, todo: Todo) -> Todo:
        self._state.todos[todo.id] = replace(todo)
        return replace(todo)

    async def create_many(self, todos: list[Todo]) -> list[Todo]:
        return [await self.create(todo) for todo in todos]

    async def update(self, todo: Todo) -> Todo:
        if todo.id not in self._state.todos:
            raise ValueError(f"Todo {todo.id} not found")
        self._state.todos[todo.id] = replace(todo)
        return replace(todo)

    async def hard_delete_for_business(self, business_id: UUID, user_id: UUID) -> int:
        return self._delete_where(lambda t: t.business_id == business_id and t.user_id == user_id)

    async def hard_delete_for_user(self, user_id: UUID) -> int:
        return self._delete_where(lambda t: t.user_id == user_id)

    async def clear_sub_area(self, sub_area_id: UUID) -> int:
        count = 0
        for todo in self._state.todos.values():
            if todo.sub_area_id == sub_area_id:
                todo.sub_area_id = None
                count += 1
        return count

    def _delete_where(self, predicate: Any) -> int:
        doomed = {id for id, todo in self._state.todos.items() if predicate(todo)}
        for id in doomed:
            del self._state.todos[id]
        # File mappings cascade with their task.
        for mapping_id in [m.id for m in self._state.task_files.values() if m.task_id in doomed]:
            del self._state.task_files[mapping_id]
        return len(doomed)


class MemorySubAreaRepository:
    """Dict-backed ISubAreaRepository."""

    def __init__(self, state: MemoryState) -> None:
        self._state = state

    async def get(self, id: UUID) -> SubArea | None:
        sub_area = self._state.sub_areas.get(id)
        return replace(sub_area) if sub_area else None

    async def get_all_for_business(self, business_id: UUID) -> list[SubArea]:
        sub_areas = [replace(s) for s in self._state.sub_areas.values() if s.business_id == business_id]
        return sorted(sub_areas, key=lambda s: (s.impact_area.value, s.sort_order))

    async def get_for_impact(self, business_id: UUID, impact_area: ImpactArea) -> list[SubArea]:
        sub_areas = await self.get_all_for_business(business_id)
        return [s for s in sub_areas if s.impact_area == impact_area]

    async def create(self, sub_area: SubArea) -> SubArea:
        self._state.sub_areas[sub_area.id] = replace(sub_area)
        return replace(sub_area)

    async def add_defaults(self, sub_areas: list[SubArea]) -> None:
        for sub_area in sub_areas:
            taken = any(
                not s.is_user_created
                and (s.business_id, s.impact_area, s.title)
                == (sub_area.business_id, sub_area.impact_area, sub_area.title)
                for s in self._state.sub_areas.values()
            )
            if not taken:
                await self.create(sub_area)

    async def update(self, sub_area: SubArea) -> SubArea:
        if sub_area.id not in self._state.sub_areas:
            raise ValueError(f"Sub-area {sub_area.id} not found")
        self._state.sub_areas[sub_area.id] = replace(sub_area)
        return replace(sub_area)

    async def delete(self, id: UUID) -> bool:
        return self._state.sub_areas.pop(id, None) is not None


class MemoryBusinessRepository:
    """Dict-backed IBusinessRepository."""

    def __init__(self, state: MemoryState) -> None:
        self._state = state

    async def get(self, id: UUID) -> Business | None:
        business = self._state.businesses.get(id)
        return replace(business) if business else None

    async def get_all_for_user(self, user_id: UUID) -> list[Business]:
        businesses = [replace(b) for b in self._state.businesses.values() if b.user_id == user_id]
        return sorted(businesses, key=lambda b: b.created_at)

    async def create(self, business: Business) -> Business:
        self._state.businesses[business.id] = replace(business)
        return replace(business)


class MemoryTaskFileMappingRepository:
    """Dict-backed ITaskFileMappingRepository."""

    def __init__(self, state: MemoryState) -> None:
        self._state = state

    async def get(self, task_id: UUID, file_id: UUID) -> TaskFileMapping | None:
        for mapping in self._state.task_files.values():
            if mapping.task_id == task_id and mapping.file_id == file_id:
                return replace(mapping)
        return None

    async def get_for_task(self, task_id: UUID) -> list[TaskFileMapping]:
        return await self.get_for_tasks([task_id])

    async def get_for_tasks(self, task_ids: list[UUID]) -> list[TaskFileMapping]:
        wanted = set(task_ids)
        mappings = [replace(m) for m in self._state.task_files.values() if m.task_id in wanted]
        return sorted(mappings, key=lambda m: m.mapped_at)

    async def get_for_file(self, file_id: UUID) -> list[TaskFileMapping]:
        return [replace(m) for m in self._state.task_files.values() if m.file_id == file_id]

    async def create(self, mapping: TaskFileMapping) -> TaskFileMapping:
        if any(m.file_id == mapping.file_id for m in self._state.task_files.values()):
            raise ValueError(f"File {mapping.file_id} is already mapped")
        self._state.task_files[mapping.id] = replace(mapping)
        return replace(mapping)

    async def delete(self, task_id: UUID, file_ids: list[UUID]) -> int:
        wanted = set(file_ids)
        doomed = [
            m.id
            for m in self._state.task_files.values()
            if m.task_id == task_id and m.file_id in wanted
        ]
        for mapping_id in doomed:
            del self._state.task_files[mapping_id]
        return len(doomed)


class InMemoryUnitOfWork:
    """Unit of Work over a shared ``MemoryState``."""

    def __init__(self, state: MemoryState) -> None:
        self._shared = state
        self._staged: Optional[MemoryState] = None

    def _require_state(self) -> MemoryState:
        if self._staged is None:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._staged

    @property
    def todos(self) -> MemoryTodoRepository:
        return MemoryTodoRepository(self._require_state())

    @property
    def sub_areas(self) -> MemorySubAreaRepository:
        return MemorySubAreaRepository(self._require_state())

    @property
    def businesses(self) -> MemoryBusinessRepository:
        return MemoryBusinessRepository(self._require_state())

    @property
    def task_files(self) -> MemoryTaskFileMappingRepository:
        return MemoryTaskFileMappingRepository(self._require_state())

    async def commit(self) -> None:
        staged = self._require_state()
        self._shared.businesses = staged.businesses
        self._shared.todos = staged.todos
        self._shared.sub_areas = staged.sub_areas
        self._shared.task_files = staged.task_files
        self._staged = copy.deepcopy(self._shared)

    async def rollback(self) -> None:
        self._staged = copy.deepcopy(self._shared)

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        self._staged = copy.deepcopy(self._shared)
        return self

    async def __aexit__(self, exc_type: Optional[type], exc_val: Optional[Exception], exc_tb: Any) -> None:
        self._staged = None


class InMemoryStore:
    """Owns a ``MemoryState`` and hands out units of work over it."""

    def __init__(self) -> None:
        self.state = MemoryState()

    def uow_factory(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self.state)
