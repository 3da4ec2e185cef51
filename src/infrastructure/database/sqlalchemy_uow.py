"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_business_repo import SQLAlchemyBusinessRepository
from infrastructure.database.repositories.sqlalchemy_sub_area_repo import SQLAlchemySubAreaRepository
from infrastructure.database.repositories.sqlalchemy_task_file_mapping_repo import (
    SQLAlchemyTaskFileMappingRepository,
)
from infrastructure.database.repositories.sqlalchemy_todo_repo import SQLAlchemyTodoRepository


class _Repositories:
    """The four roadmap repositories bound to one session."""

    def __init__(self, session: AsyncSession) -> None:
        self.todos = SQLAlchemyTodoRepository(session)
        self.sub_areas = SQLAlchemySubAreaRepository(session)
        self.businesses = SQLAlchemyBusinessRepository(session)
        self.task_files = SQLAlchemyTaskFileMappingRepository(session)


class SQLAlchemyUnitOfWork:
    """One session, one transaction.

    Nothing is written unless ``commit`` is called; leaving the block on an
    exception rolls back.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._repos: Optional[_Repositories] = None

    def _bound(self) -> _Repositories:
        if self._repos is None:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._repos

    @property
    def todos(self) -> SQLAlchemyTodoRepository:
        return self._bound().todos

    @property
    def sub_areas(self) -> SQLAlchemySubAreaRepository:
        return self._bound().sub_areas

    @property
    def businesses(self) -> SQLAlchemyBusinessRepository:
        return self._bound().businesses

    @property
    def task_files(self) -> SQLAlchemyTaskFileMappingRepository:
        return self._bound().task_files

    async def commit(self) -> None:
        if self._session is not None:
            await self._session.commit()

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        self._repos = _Repositories(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Any,
    ) -> None:
        if self._session is None:
            return
        try:
            if exc_type is not None:
                await self._session.rollback()
        finally:
            await self._session.close()
            self._session = None
            self._repos = None
