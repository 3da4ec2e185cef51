"""Unit tests for the in-memory Unit of Work."""

from uuid import uuid4

import pytest

from domain.entities.business import Business
from domain.entities.task_file_mapping import TaskFileMapping
from domain.entities.todo import Todo
from infrastructure.memory.memory_uow import InMemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


class TestInMemoryUnitOfWork:
    @pytest.mark.asyncio
    async def test_commit_publishes(self, store: InMemoryStore) -> None:
        business = Business(user_id=uuid4(), name="Acme")

        async with store.uow_factory() as uow:
            await uow.businesses.create(business)
            await uow.commit()

        assert business.id in store.state.businesses

    @pytest.mark.asyncio
    async def test_uncommitted_writes_are_discarded(self, store: InMemoryStore) -> None:
        async with store.uow_factory() as uow:
            await uow.businesses.create(Business(user_id=uuid4(), name="Acme"))

        assert store.state.businesses == {}

    @pytest.mark.asyncio
    async def test_rollback(self, store: InMemoryStore) -> None:
        async with store.uow_factory() as uow:
            await uow.businesses.create(Business(user_id=uuid4(), name="Acme"))
            await uow.rollback()
            await uow.commit()

        assert store.state.businesses == {}

    @pytest.mark.asyncio
    async def test_returned_entities_are_copies(self, store: InMemoryStore) -> None:
        todo = Todo(user_id=uuid4(), business_id=uuid4(), title="Original")
        async with store.uow_factory() as uow:
            created = await uow.todos.create(todo)
            await uow.commit()

        created.title = "Changed locally"

        assert store.state.todos[todo.id].title == "Original"

    def test_requires_context_manager(self, store: InMemoryStore) -> None:
        with pytest.raises(RuntimeError):
            store.uow_factory().todos


class TestMemoryRepositories:
    @pytest.mark.asyncio
    async def test_hard_delete_cascades_to_file_mappings(self, store: InMemoryStore) -> None:
        user_id, business_id = uuid4(), uuid4()
        doomed = Todo(user_id=user_id, business_id=business_id, title="Doomed")
        kept = Todo(user_id=uuid4(), business_id=business_id, title="Someone else's")

        async with store.uow_factory() as uow:
            await uow.todos.create_many([doomed, kept])
            await uow.task_files.create(TaskFileMapping(task_id=doomed.id, file_id=uuid4()))
            removed = await uow.todos.hard_delete_for_user(user_id)
            await uow.commit()

        assert removed == 1
        assert list(store.state.todos) == [kept.id]
        assert store.state.task_files == {}

    @pytest.mark.asyncio
    async def test_file_maps_to_one_task(self, store: InMemoryStore) -> None:
        file_id = uuid4()
        async with store.uow_factory() as uow:
            await uow.task_files.create(TaskFileMapping(task_id=uuid4(), file_id=file_id))

            with pytest.raises(ValueError):
                await uow.task_files.create(TaskFileMapping(task_id=uuid4(), file_id=file_id))
