"""Unit tests for TaskFileMapping service layer."""

from typing import Any
from uuid import UUID, uuid4

import pytest

from core.exceptions import FileAlreadyMappedError, TodoNotFoundError
from domain.entities.task_file_mapping import TaskFileMapping
from domain.entities.todo import Todo
from domain.services.task_file_mapping_service import TaskFileMappingService
from tests.unit.conftest import FakeUnitOfWork


def _echo(value: Any) -> Any:
    return value


@pytest.fixture
def service(uow: FakeUnitOfWork) -> TaskFileMappingService:
    uow.task_files.create.side_effect = _echo
    return TaskFileMappingService(lambda: uow)


class TestMapFiles:
    @pytest.mark.asyncio
    async def test_maps_new_files(
        self,
        service: TaskFileMappingService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        sample_todo: Todo,
    ) -> None:
        file_a, file_b = uuid4(), uuid4()
        uow.todos.get.return_value = sample_todo
        uow.task_files.get_for_file.return_value = []

        created = await service.map_files_to_task(sample_todo.id, [file_a, file_b, file_a], user_id)

        assert [m.file_id for m in created] == [file_a, file_b]
        assert all(m.task_id == sample_todo.id and m.mapped_by == user_id for m in created)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_skips_files_already_on_task(
        self,
        service: TaskFileMappingService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        sample_todo: Todo,
    ) -> None:
        file_id = uuid4()
        uow.todos.get.return_value = sample_todo
        uow.task_files.get_for_file.return_value = [
            TaskFileMapping(task_id=sample_todo.id, file_id=file_id)
        ]

        created = await service.map_files_to_task(sample_todo.id, [file_id], user_id)

        assert created == []
        uow.task_files.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_file_on_another_task(
        self,
        service: TaskFileMappingService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        sample_todo: Todo,
    ) -> None:
        file_id = uuid4()
        uow.todos.get.return_value = sample_todo
        uow.task_files.get_for_file.return_value = [TaskFileMapping(task_id=uuid4(), file_id=file_id)]

        with pytest.raises(FileAlreadyMappedError):
            await service.map_files_to_task(sample_todo.id, [file_id], user_id)

        assert not uow.committed

    @pytest.mark.asyncio
    async def test_requires_owned_task(
        self, service: TaskFileMappingService, uow: FakeUnitOfWork, sample_todo: Todo
    ) -> None:
        uow.todos.get.return_value = sample_todo

        with pytest.raises(TodoNotFoundError):
            await service.map_files_to_task(sample_todo.id, [uuid4()], uuid4())


class TestUnmapFiles:
    @pytest.mark.asyncio
    async def test_returns_removed_count(
        self,
        service: TaskFileMappingService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        sample_todo: Todo,
    ) -> None:
        file_id = uuid4()
        uow.todos.get.return_value = sample_todo
        uow.task_files.delete.return_value = 1

        assert await service.unmap_files_from_task(sample_todo.id, [file_id], user_id) == 1
        uow.task_files.delete.assert_called_once_with(sample_todo.id, [file_id])
        assert uow.committed


class TestLookups:
    @pytest.mark.asyncio
    async def test_task_files(
        self,
        service: TaskFileMappingService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        sample_todo: Todo,
    ) -> None:
        file_id = uuid4()
        uow.todos.get.return_value = sample_todo
        uow.task_files.get_for_task.return_value = [
            TaskFileMapping(task_id=sample_todo.id, file_id=file_id)
        ]

        assert await service.get_task_files(sample_todo.id, user_id) == [file_id]

    @pytest.mark.asyncio
    async def test_file_tasks_hides_other_users(
        self,
        service: TaskFileMappingService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        sample_todo: Todo,
    ) -> None:
        file_id = uuid4()
        foreign = Todo(user_id=uuid4(), business_id=uuid4(), title="Not mine")
        uow.task_files.get_for_file.return_value = [
            TaskFileMapping(task_id=sample_todo.id, file_id=file_id),
            TaskFileMapping(task_id=foreign.id, file_id=file_id),
        ]
        uow.todos.get.side_effect = lambda id: {sample_todo.id: sample_todo, foreign.id: foreign}[id]

        assert await service.get_file_tasks(file_id, user_id) == [sample_todo.id]

    @pytest.mark.asyncio
    async def test_is_file_mapped(
        self,
        service: TaskFileMappingService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        sample_todo: Todo,
    ) -> None:
        uow.todos.get.return_value = sample_todo
        uow.task_files.get.return_value = None

        assert await service.is_file_mapped_to_task(sample_todo.id, uuid4(), user_id) is False

    @pytest.mark.asyncio
    async def test_batch_lookup_includes_every_requested_task(
        self,
        service: TaskFileMappingService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        sample_todo: Todo,
    ) -> None:
        unknown = uuid4()
        file_id = uuid4()
        uow.todos.get.side_effect = lambda id: sample_todo if id == sample_todo.id else None
        uow.task_files.get_for_tasks.return_value = [
            TaskFileMapping(task_id=sample_todo.id, file_id=file_id)
        ]

        result = await service.get_files_mapped_to_tasks([sample_todo.id, unknown], user_id)

        assert result == {sample_todo.id: [file_id], unknown: []}
        uow.task_files.get_for_tasks.assert_called_once_with([sample_todo.id])

    @pytest.mark.asyncio
    async def test_batch_lookup_empty(
        self, service: TaskFileMappingService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        assert await service.get_files_mapped_to_tasks([], user_id) == {}
        uow.task_files.get_for_tasks.assert_not_called()
