"""Unit of Work protocol."""

from typing import Any, Protocol

from domain.repositories.business_repository import IBusinessRepository
from domain.repositories.sub_area_repository import ISubAreaRepository
from domain.repositories.task_file_mapping_repository import ITaskFileMappingRepository
from domain.repositories.todo_repository import ITodoRepository


class IUnitOfWork(Protocol):
    """A transaction over the roadmap tables.

    Used as ``async with factory() as uow``; writes become visible only after
    ``commit``. Implemented by the SQLAlchemy and in-memory stores.
    """

    todos: ITodoRepository
    sub_areas: ISubAreaRepository
    businesses: IBusinessRepository
    task_files: ITaskFileMappingRepository

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def __aenter__(self) -> "IUnitOfWork": ...

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...
