"""Client-side cache of a business's roadmap with optimistic mutations."""

import copy
from collections.abc import Awaitable, Callable
from uuid import UUID

import structlog

from client.gateway import IAnalysisGateway
from core.exceptions import AppException
from domain.entities.impact_summary import ImpactSummary
from domain.entities.todo import ImpactArea, Todo, TodoStatus

logger = structlog.get_logger()


class AnalysisStore:
    """Observable state for one signed-in user working on one business.

    Every per-todo mutation follows the same contract: capture the todo, apply
    the change locally, call the gateway, then either replace the local copy
    with the server's version or put the captured copy back and record the
    failure in ``error``. Status, impact, delete and restore changes refresh
    ``impact_summaries`` afterwards.

    Concurrency: mutations are not serialized. Two overlapping mutations on
    the same todo each roll back to the copy they captured, so a failure of
    the earlier one can overwrite the later one's optimistic value, and
    responses are applied in arrival order. There is no version counter to
    detect this. Callers that need strict ordering should await each
    mutation before starting the next on the same todo.
    """

    def __init__(self, gateway: IAnalysisGateway, business_id: UUID | None = None) -> None:
        self._gateway = gateway
        self.business_id = business_id
        self.todos: list[Todo] = []
        self.binned_todos: list[Todo] = []
        self.impact_summaries: list[ImpactSummary] = []
        self.is_loading = False
        self.error: str | None = None

    def get_todo(self, todo_id: UUID) -> Todo | None:
        return next((t for t in self.todos if t.id == todo_id), None)

    def clear_error(self) -> None:
        self.error = None

    # --- loaders -----------------------------------------------------------

    async def _load(self, business_id: UUID, action: Callable[[], Awaitable[None]]) -> None:
        self.business_id = business_id
        self.is_loading = True
        self.error = None
        try:
            await action()
        except AppException as exc:
            logger.warning("store_load_failed", business_id=str(business_id), error=exc.message)
            self.error = exc.message
        finally:
            self.is_loading = False

    async def load_todos(self, business_id: UUID) -> None:
        async def action() -> None:
            self.todos = await self._gateway.list_todos(business_id)

        await self._load(business_id, action)

    async def load_binned_todos(self, business_id: UUID) -> None:
        async def action() -> None:
            self.binned_todos = await self._gateway.list_binned_todos(business_id)

        await self._load(business_id, action)

    async def load_impact_summaries(self, business_id: UUID) -> None:
        async def action() -> None:
            self.impact_summaries = await self._gateway.impact_summary(business_id)

        await self._load(business_id, action)

    async def _refresh_summaries(self, business_id: UUID) -> None:
        # A failed refresh leaves the previous summaries in place.
        try:
            self.impact_summaries = await self._gateway.impact_summary(business_id)
        except AppException as exc:
            logger.warning("impact_summary_refresh_failed", error=exc.message)
            self.error = exc.message

    # --- optimistic mutations ----------------------------------------------

    def _replace(self, todo: Todo) -> None:
        self.todos = [todo if t.id == todo.id else t for t in self.todos]

    async def _mutate(
        self,
        todo_id: UUID,
        apply: Callable[[Todo], None],
        remote: Callable[[], Awaitable[Todo]],
        refresh_summaries: bool,
    ) -> None:
        original = self.get_todo(todo_id)
        if original is None:
            return

        optimistic = copy.deepcopy(original)
        apply(optimistic)
        self._replace(optimistic)
        self.error = None

        try:
            updated = await remote()
        except AppException as exc:
            logger.info("todo_mutation_rolled_back", todo_id=str(todo_id), error=exc.message)
            self._replace(original)
            self.error = exc.message
            return

        self._replace(updated)
        if refresh_summaries:
            await self._refresh_summaries(updated.business_id)

    async def update_todo_status(self, todo_id: UUID, status: TodoStatus) -> None:
        await self._mutate(
            todo_id,
            lambda t: t.set_status(status),
            lambda: self._gateway.update_todo_status(todo_id, status),
            refresh_summaries=True,
        )

    async def assign_task_to_sub_area(self, todo_id: UUID, sub_area_id: UUID | None) -> None:
        def apply(todo: Todo) -> None:
            todo.sub_area_id = sub_area_id

        await self._mutate(
            todo_id,
            apply,
            lambda: self._gateway.assign_task_to_sub_area(todo_id, sub_area_id),
            refresh_summaries=False,
        )

    async def update_task_impact_area(
        self, todo_id: UUID, impact: ImpactArea, is_locked: bool | None = None
    ) -> None:
        def apply(todo: Todo) -> None:
            todo.change_impact(impact)
            if is_locked is not None:
                todo.is_impact_locked = is_locked

        await self._mutate(
            todo_id,
            apply,
            lambda: self._gateway.update_task_impact_area(todo_id, impact, is_locked),
            refresh_summaries=True,
        )

    async def update_task_lock_state(self, todo_id: UUID, is_locked: bool) -> None:
        def apply(todo: Todo) -> None:
            todo.is_impact_locked = is_locked

        await self._mutate(
            todo_id,
            apply,
            lambda: self._gateway.update_task_lock_state(todo_id, is_locked),
            refresh_summaries=False,
        )

    async def delete_task(self, todo_id: UUID) -> None:
        """Move a todo to the bin, putting it back at its old position on failure."""
        index = next((i for i, t in enumerate(self.todos) if t.id == todo_id), None)
        if index is None:
            return
        original = self.todos[index]

        binned = copy.deepcopy(original)
        binned.soft_delete()
        self.todos = [t for t in self.todos if t.id != todo_id]
        self.binned_todos = [binned, *self.binned_todos]
        self.error = None

        try:
            await self._gateway.delete_task(todo_id)
        except AppException as exc:
            logger.info("todo_delete_rolled_back", todo_id=str(todo_id), error=exc.message)
            self.binned_todos = [t for t in self.binned_todos if t.id != todo_id]
            todos = [t for t in self.todos if t.id != todo_id]
            todos.insert(min(index, len(todos)), original)
            self.todos = todos
            self.error = exc.message
            return

        await self._refresh_summaries(original.business_id)

    async def restore_task(self, todo_id: UUID) -> None:
        """Bring a todo back from the bin, returning it there on failure."""
        index = next((i for i, t in enumerate(self.binned_todos) if t.id == todo_id), None)
        if index is None:
            return
        original = self.binned_todos[index]

        restored = copy.deepcopy(original)
        restored.restore()
        self.binned_todos = [t for t in self.binned_todos if t.id != todo_id]
        position = next(
            (i for i, t in enumerate(self.todos) if t.created_at < restored.created_at),
            len(self.todos),
        )
        self.todos = [*self.todos[:position], restored, *self.todos[position:]]
        self.error = None

        try:
            await self._gateway.restore_task(todo_id)
        except AppException as exc:
            logger.info("todo_restore_rolled_back", todo_id=str(todo_id), error=exc.message)
            self.todos = [t for t in self.todos if t.id != todo_id]
            binned = [t for t in self.binned_todos if t.id != todo_id]
            binned.insert(min(index, len(binned)), original)
            self.binned_todos = binned
            self.error = exc.message
            return

        await self._refresh_summaries(original.business_id)

    # --- bulk actions ------------------------------------------------------

    async def generate_tasks(self, business_id: UUID) -> None:
        """Ask the generator for tasks and append whatever it created."""

        async def action() -> None:
            created = await self._gateway.generate_tasks(business_id)
            self.todos = [*self.todos, *created]
            self.impact_summaries = await self._gateway.impact_summary(business_id)

        await self._load(business_id, action)

    async def reset_test_data(self, business_id: UUID) -> None:
        async def action() -> None:
            self.todos, self.impact_summaries = await self._gateway.reset_test_data(business_id)
            self.binned_todos = []

        await self._load(business_id, action)

    async def reset_all_test_data(self, confirm: bool = False) -> int:
        """Wipe every todo of the user. Returns the number deleted, 0 on failure."""
        self.is_loading = True
        self.error = None
        try:
            deleted = await self._gateway.reset_all_test_data(confirm=confirm)
        except AppException as exc:
            self.error = exc.message
            return 0
        finally:
            self.is_loading = False

        self.todos = []
        self.binned_todos = []
        self.impact_summaries = []
        return deleted
