"""Tenant scoping checks shared by the domain services."""

from uuid import UUID

from core.exceptions import (
    AuthenticationError,
    BusinessNotFoundError,
    SubAreaNotFoundError,
    TodoNotFoundError,
)
from domain.entities.business import Business
from domain.entities.sub_area import SubArea
from domain.entities.todo import Todo
from domain.repositories.unit_of_work import IUnitOfWork


def require_user(user_id: UUID | None) -> UUID:
    """Fail fast when there is no authenticated caller.

    Queries are never issued with an empty owner.
    """
    if user_id is None:
        raise AuthenticationError()
    return user_id


async def require_business(uow: IUnitOfWork, business_id: UUID, user_id: UUID) -> Business:
    """Load a business owned by the caller; foreign businesses do not exist."""
    business = await uow.businesses.get(business_id)
    if not business or business.user_id != user_id:
        raise BusinessNotFoundError(str(business_id))
    return business


async def require_todo(uow: IUnitOfWork, todo_id: UUID, user_id: UUID) -> Todo:
    """Load a todo owned by the caller, including soft-deleted ones."""
    todo = await uow.todos.get(todo_id)
    if not todo or todo.user_id != user_id:
        raise TodoNotFoundError(str(todo_id))
    return todo


async def require_sub_area(uow: IUnitOfWork, sub_area_id: UUID, business_id: UUID) -> SubArea:
    """Load a sub-area of ``business_id``; sub-areas of other businesses do not exist.

    The caller must already have checked that it owns ``business_id``.
    """
    sub_area = await uow.sub_areas.get(sub_area_id)
    if not sub_area or sub_area.business_id != business_id:
        raise SubAreaNotFoundError(str(sub_area_id))
    return sub_area
