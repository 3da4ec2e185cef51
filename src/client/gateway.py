"""Gateways the analysis store talks to."""

from typing import Protocol
from uuid import UUID

from domain.entities.impact_summary import ImpactSummary
from domain.entities.todo import ImpactArea, Todo, TodoStatus
from domain.services.analysis_service import AnalysisService


class IAnalysisGateway(Protocol):
    """Remote side of the store: one authenticated caller's view of the service.

    Every method may suspend for an unbounded time and raises
    ``AppException`` subclasses on failure.
    """

    async def list_todos(self, business_id: UUID) -> list[Todo]: ...

    async def list_binned_todos(self, business_id: UUID) -> list[Todo]: ...

    async def impact_summary(self, business_id: UUID) -> list[ImpactSummary]: ...

    async def update_todo_status(self, todo_id: UUID, status: TodoStatus) -> Todo: ...

    async def assign_task_to_sub_area(self, todo_id: UUID, sub_area_id: UUID | None) -> Todo: ...

    async def update_task_impact_area(
        self, todo_id: UUID, impact: ImpactArea, is_locked: bool | None = None
    ) -> Todo: ...

    async def update_task_lock_state(self, todo_id: UUID, is_locked: bool) -> Todo: ...

    async def delete_task(self, todo_id: UUID) -> None: ...

    async def restore_task(self, todo_id: UUID) -> None: ...

    async def generate_tasks(self, business_id: UUID) -> list[Todo]: ...

    async def reset_test_data(
        self, business_id: UUID
    ) -> tuple[list[Todo], list[ImpactSummary]]: ...

    async def reset_all_test_data(self, confirm: bool = False) -> int: ...


class ServiceGateway:
    """In-process gateway binding an ``AnalysisService`` to one user.

    ``user_id`` may be ``None`` to model a signed-out session; every call then
    fails with ``AuthenticationError``.
    """

    def __init__(self, service: AnalysisService, user_id: UUID | None) -> None:
        self._service = service
        self._user_id = user_id

    async def list_todos(self, business_id: UUID) -> list[Todo]:
        return await self._service.list_todos(business_id, self._user_id)

    async def list_binned_todos(self, business_id: UUID) -> list[Todo]:
        return await self._service.list_binned_todos(business_id, self._user_id)

    async def impact_summary(self, business_id: UUID) -> list[ImpactSummary]:
        return await self._service.impact_summary(business_id, self._user_id)

    async def update_todo_status(self, todo_id: UUID, status: TodoStatus) -> Todo:
        return await self._service.update_todo_status(todo_id, self._user_id, status)

    async def assign_task_to_sub_area(self, todo_id: UUID, sub_area_id: UUID | None) -> Todo:
        return await self._service.assign_task_to_sub_area(todo_id, self._user_id, sub_area_id)

    async def update_task_impact_area(
        self, todo_id: UUID, impact: ImpactArea, is_locked: bool | None = None
    ) -> Todo:
        return await self._service.update_task_impact_area(
            todo_id, self._user_id, impact, is_locked=is_locked
        )

    async def update_task_lock_state(self, todo_id: UUID, is_locked: bool) -> Todo:
        return await self._service.update_task_lock_state(todo_id, self._user_id, is_locked)

    async def delete_task(self, todo_id: UUID) -> None:
        await self._service.delete_task(todo_id, self._user_id)

    async def restore_task(self, todo_id: UUID) -> None:
        await self._service.restore_task(todo_id, self._user_id)

    async def generate_tasks(self, business_id: UUID) -> list[Todo]:
        return await self._service.generate_tasks(business_id, self._user_id)

    async def reset_test_data(
        self, business_id: UUID
    ) -> tuple[list[Todo], list[ImpactSummary]]:
        return await self._service.reset_test_data(business_id, self._user_id)

    async def reset_all_test_data(self, confirm: bool = False) -> int:
        return await self._service.reset_all_test_data(self._user_id, confirm=confirm)
