"""Analysis service: the single mutation boundary for roadmap todos.

Every operation requires an authenticated caller and scopes all reads and
writes to that caller's rows. Errors are never swallowed: typed
``AppException`` subclasses propagate to the API layer or to the client
store, which decides how to present them. Nothing is retried here.

Concurrency: each call runs in its own unit of work and commits before it
returns, so a caller always reads its own writes. Two calls touching the
same todo are not coordinated; whichever commits last wins.
"""

from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import structlog

from core.exceptions import (
    ConfirmationRequiredError,
    InvalidStatusTransitionError,
    RemoteFailureError,
    TestDataResetDisabledError,
)
from domain.entities.impact_summary import ImpactSummary, summarize_impact
from domain.entities.todo import (
    STRICT_TRANSITIONS,
    ImpactArea,
    Todo,
    TodoEffort,
    TodoPriority,
    TodoStatus,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access import (
    require_business,
    require_sub_area,
    require_todo,
    require_user,
)
from domain.services.sub_area_service import seed_missing_defaults
from domain.services.task_generation import (
    ITaskGenerator,
    build_todo,
    select_generated_tasks,
)

logger = structlog.get_logger()


class AnalysisService:
    """Service layer for todo lifecycle and impact aggregation."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        task_generator: ITaskGenerator | None = None,
        strict_status_transitions: bool = False,
        allow_test_data_reset: bool = False,
    ) -> None:
        self._uow_factory = uow_factory
        self._generator = task_generator
        self._strict_transitions = strict_status_transitions
        self._allow_reset = allow_test_data_reset

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_todos(self, business_id: UUID, user_id: UUID | None) -> list[Todo]:
        """Active todos of a business, most recently created first."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            await require_business(uow, business_id, user_id)
            return await uow.todos.get_active_for_business(business_id, user_id)  # type: ignore[no-any-return]

    async def list_binned_todos(self, business_id: UUID, user_id: UUID | None) -> list[Todo]:
        """Soft-deleted todos of a business, most recently deleted first."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            await require_business(uow, business_id, user_id)
            return await uow.todos.get_deleted_for_business(business_id, user_id)  # type: ignore[no-any-return]

    async def get_todo(self, todo_id: UUID, user_id: UUID | None) -> Todo:
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            return await require_todo(uow, todo_id, user_id)

    async def impact_summary(
        self, business_id: UUID, user_id: UUID | None
    ) -> list[ImpactSummary]:
        """Completion per canonical impact area over the active todo set."""
        todos = await self.list_todos(business_id, user_id)
        return summarize_impact(todos)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_todo(
        self,
        business_id: UUID,
        user_id: UUID | None,
        title: str,
        impact: ImpactArea = ImpactArea.OTHER,
        priority: TodoPriority = TodoPriority.P2,
        effort: TodoEffort = TodoEffort.MEDIUM,
        description_md: str | None = None,
        sub_area_id: UUID | None = None,
        requirement_code: str | None = None,
        kb_action_id: str | None = None,
        owner_user_id: UUID | None = None,
        due_date: datetime | None = None,
    ) -> Todo:
        """Create a todo by hand.

        A ``sub_area_id`` must name a sub-area of the same business.
        """
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            await require_business(uow, business_id, user_id)
            if sub_area_id is not None:
                await require_sub_area(uow, sub_area_id, business_id)
            todo = Todo(
                user_id=user_id,
                business_id=business_id,
                title=title,
                impact=impact,
                priority=priority,
                effort=effort,
                description_md=description_md,
                sub_area_id=sub_area_id,
                requirement_code=requirement_code,
                kb_action_id=kb_action_id,
                owner_user_id=owner_user_id,
                due_date=due_date,
            )
            created = await uow.todos.create(todo)
            await uow.commit()

        logger.info("todo_created", todo_id=str(created.id), business_id=str(business_id))
        return created  # type: ignore[no-any-return]

    async def update_todo_status(
        self, todo_id: UUID, user_id: UUID | None, status: TodoStatus
    ) -> Todo:
        """Change status; ``completed_at`` follows ``done``.

        Any status may follow any other unless strict transitions are enabled.
        """
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            todo = await require_todo(uow, todo_id, user_id)
            previous = todo.status
            if (
                self._strict_transitions
                and status != previous
                and status not in STRICT_TRANSITIONS[previous]
            ):
                raise InvalidStatusTransitionError(previous.value, status.value)

            todo.set_status(status)
            updated = await uow.todos.update(todo)
            await uow.commit()

        logger.info(
            "todo_status_updated",
            todo_id=str(todo_id),
            previous=previous.value,
            status=status.value,
        )
        return updated  # type: ignore[no-any-return]

    async def assign_task_to_sub_area(
        self, todo_id: UUID, user_id: UUID | None, sub_area_id: UUID | None
    ) -> Todo:
        """Move a todo into a sub-area, or back to unassigned with ``None``.

        The sub-area must belong to the todo's business, otherwise it is
        reported as not found. Its impact area is not checked against the
        todo's; callers only offer sub-areas of the todo's own area.
        """
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            todo = await require_todo(uow, todo_id, user_id)
            if sub_area_id is not None:
                await require_sub_area(uow, sub_area_id, todo.business_id)
            todo.sub_area_id = sub_area_id
            todo.updated_at = datetime.utcnow()
            updated = await uow.todos.update(todo)
            await uow.commit()

        logger.info(
            "todo_sub_area_assigned",
            todo_id=str(todo_id),
            sub_area_id=str(sub_area_id) if sub_area_id else None,
        )
        return updated  # type: ignore[no-any-return]

    async def update_task_impact_area(
        self,
        todo_id: UUID,
        user_id: UUID | None,
        impact: ImpactArea,
        is_locked: bool | None = None,
    ) -> Todo:
        """Reclassify a todo, optionally setting the lock in the same write.

        Changing the impact area clears the sub-area assignment.
        """
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            todo = await require_todo(uow, todo_id, user_id)
            previous = todo.impact
            todo.change_impact(impact)
            if is_locked is not None:
                todo.is_impact_locked = is_locked
            updated = await uow.todos.update(todo)
            await uow.commit()

        logger.info(
            "todo_impact_updated",
            todo_id=str(todo_id),
            previous=previous.value,
            impact=impact.value,
            is_locked=updated.is_impact_locked,
        )
        return updated  # type: ignore[no-any-return]

    async def update_task_lock_state(
        self, todo_id: UUID, user_id: UUID | None, is_locked: bool
    ) -> Todo:
        """Opt a todo in or out of automatic re-categorisation."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            todo = await require_todo(uow, todo_id, user_id)
            todo.is_impact_locked = is_locked
            todo.updated_at = datetime.utcnow()
            updated = await uow.todos.update(todo)
            await uow.commit()

        logger.info("todo_lock_updated", todo_id=str(todo_id), is_locked=is_locked)
        return updated  # type: ignore[no-any-return]

    async def link_evidence(
        self, todo_id: UUID, user_id: UUID | None, chunk_ids: list[str]
    ) -> None:
        """Replace the evidence list of a todo."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            todo = await require_todo(uow, todo_id, user_id)
            todo.evidence_chunk_ids = list(chunk_ids)
            todo.updated_at = datetime.utcnow()
            await uow.todos.update(todo)
            await uow.commit()

        logger.info("todo_evidence_linked", todo_id=str(todo_id), chunks=len(chunk_ids))

    async def delete_task(self, todo_id: UUID, user_id: UUID | None) -> None:
        """Move a todo to the bin."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            todo = await require_todo(uow, todo_id, user_id)
            todo.soft_delete()
            await uow.todos.update(todo)
            await uow.commit()

        logger.info("todo_binned", todo_id=str(todo_id))

    async def restore_task(self, todo_id: UUID, user_id: UUID | None) -> None:
        """Bring a todo back from the bin."""
        user_id = require_user(user_id)
        async with self._uow_factory() as uow:
            todo = await require_todo(uow, todo_id, user_id)
            todo.restore()
            await uow.todos.update(todo)
            await uow.commit()

        logger.info("todo_restored", todo_id=str(todo_id))

    # ------------------------------------------------------------------
    # Generation and resets
    # ------------------------------------------------------------------

    async def generate_tasks(self, business_id: UUID, user_id: UUID | None) -> list[Todo]:
        """Ask the AI generator for new todos and persist the valid ones.

        Candidates without an anchor quote from the business description or
        without a knowledge-base citation are dropped, as are titles that
        duplicate an existing active todo.
        """
        user_id = require_user(user_id)
        generator = self._require_generator()

        async with self._uow_factory() as uow:
            business = await require_business(uow, business_id, user_id)
            existing = await uow.todos.get_active_for_business(business_id, user_id)

        candidates = await generator.generate(business)
        selected = select_generated_tasks(
            candidates, business, existing_titles=[t.title for t in existing]
        )
        if not selected:
            return []

        async with self._uow_factory() as uow:
            sub_areas = await uow.sub_areas.get_all_for_business(business_id)
            todos = [build_todo(task, business, user_id, sub_areas) for task in selected]
            created = await uow.todos.create_many(todos)
            await uow.commit()

        logger.info(
            "todos_generated",
            business_id=str(business_id),
            candidates=len(candidates),
            created=len(created),
        )
        return created  # type: ignore[no-any-return]

    async def reset_test_data(
        self, business_id: UUID, user_id: UUID | None
    ) -> tuple[list[Todo], list[ImpactSummary]]:
        """Replace every todo of a business with a freshly generated baseline.

        Development only: the business's todos are permanently deleted. The
        generator runs first, so a generator failure leaves existing data
        untouched.
        """
        self._require_reset_enabled()
        user_id = require_user(user_id)
        generator = self._require_generator()

        async with self._uow_factory() as uow:
            business = await require_business(uow, business_id, user_id)

        candidates = await generator.generate(business)
        selected = select_generated_tasks(candidates, business)

        async with self._uow_factory() as uow:
            removed = await uow.todos.hard_delete_for_business(business_id, user_id)
            sub_areas = await seed_missing_defaults(uow, business_id)
            todos = [build_todo(task, business, user_id, sub_areas) for task in selected]
            created = await uow.todos.create_many(todos)
            await uow.commit()

        logger.warning(
            "test_data_reset",
            business_id=str(business_id),
            removed=removed,
            created=len(created),
        )
        return created, summarize_impact(created)

    async def reset_all_test_data(self, user_id: UUID | None, confirm: bool = False) -> int:
        """Permanently delete every todo the caller owns, across all businesses."""
        self._require_reset_enabled()
        user_id = require_user(user_id)
        if not confirm:
            raise ConfirmationRequiredError("reset_all_test_data")

        async with self._uow_factory() as uow:
            removed = await uow.todos.hard_delete_for_user(user_id)
            await uow.commit()

        logger.warning("all_test_data_reset", user_id=str(user_id), removed=removed)
        return removed  # type: ignore[no-any-return]

    def _require_generator(self) -> ITaskGenerator:
        if self._generator is None:
            raise RemoteFailureError("Task generation is not configured")
        return self._generator

    def _require_reset_enabled(self) -> None:
        if not self._allow_reset:
            raise TestDataResetDisabledError()
