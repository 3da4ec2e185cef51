"""Business API routes, including per-business todo listings."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_analysis_service, get_business_service
from api.v1.schemas.business import (
    BusinessCreate,
    BusinessDetailResponse,
    BusinessListResponse,
    BusinessResponse,
)
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.todo import (
    ImpactSummaryListResponse,
    TodoCreate,
    TodoDetailResponse,
    TodoListResponse,
    TodoResponse,
    summaries_response,
)
from core.rate_limit import GENERATE_LIMIT, READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.analysis_service import AnalysisService
from domain.services.business_service import BusinessService

router = APIRouter(prefix="/businesses", tags=["businesses"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Business not found"}}


@router.get("", response_model=BusinessListResponse, summary="List businesses")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_businesses(
    request: Request,
    user: CurrentUser,
    service: BusinessService = Depends(get_business_service),
) -> BusinessListResponse:
    """Get the businesses of the authenticated user, oldest first."""
    businesses = await service.list_businesses(user.id)
    return BusinessListResponse(
        data=[BusinessResponse.model_validate(b) for b in businesses],
        meta={"total": len(businesses)},
    )


@router.post(
    "",
    response_model=BusinessDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a business",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_business(
    request: Request,
    body: BusinessCreate,
    user: CurrentUser,
    service: BusinessService = Depends(get_business_service),
) -> BusinessDetailResponse:
    business = await service.create_business(
        user.id,
        name=body.name,
        description=body.description,
        industry=body.industry,
    )
    return BusinessDetailResponse(data=BusinessResponse.model_validate(business))


@router.get(
    "/{business_id}",
    response_model=BusinessDetailResponse,
    summary="Get a business",
    responses=_NOT_FOUND,
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_business(
    request: Request,
    business_id: UUID,
    user: CurrentUser,
    service: BusinessService = Depends(get_business_service),
) -> BusinessDetailResponse:
    business = await service.get_business(business_id, user.id)
    return BusinessDetailResponse(data=BusinessResponse.model_validate(business))


@router.get(
    "/{business_id}/todos",
    response_model=TodoListResponse,
    summary="List active tasks",
    responses=_NOT_FOUND,
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_todos(
    request: Request,
    business_id: UUID,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> TodoListResponse:
    """Non-deleted tasks of a business, most recently created first."""
    todos = await service.list_todos(business_id, user.id)
    return TodoListResponse(
        data=[TodoResponse.model_validate(t) for t in todos],
        meta={"total": len(todos), "done": sum(1 for t in todos if t.is_done)},
    )


@router.post(
    "/{business_id}/todos",
    response_model=TodoDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
    responses=_NOT_FOUND,
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_todo(
    request: Request,
    business_id: UUID,
    body: TodoCreate,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> TodoDetailResponse:
    todo = await service.create_todo(business_id, user.id, **body.model_dump())
    return TodoDetailResponse(data=TodoResponse.model_validate(todo))


@router.get(
    "/{business_id}/todos/bin",
    response_model=TodoListResponse,
    summary="List binned tasks",
    responses=_NOT_FOUND,
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_binned_todos(
    request: Request,
    business_id: UUID,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> TodoListResponse:
    """Soft-deleted tasks, most recently deleted first."""
    todos = await service.list_binned_todos(business_id, user.id)
    return TodoListResponse(
        data=[TodoResponse.model_validate(t) for t in todos],
        meta={"total": len(todos)},
    )


@router.post(
    "/{business_id}/todos/generate",
    response_model=TodoListResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate tasks with AI",
    responses={
        **_NOT_FOUND,
        502: {"model": ErrorResponse, "description": "Task generation failed"},
    },
)
@limiter.limit(GENERATE_LIMIT)  # type: ignore[untyped-decorator]
async def generate_todos(
    request: Request,
    business_id: UUID,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> TodoListResponse:
    """
    Ask the AI function for new tasks and keep the valid ones.

    Candidates without a literal quote from the business description or a
    knowledge-base citation are dropped, as are duplicates of existing tasks.
    """
    todos = await service.generate_tasks(business_id, user.id)
    return TodoListResponse(
        data=[TodoResponse.model_validate(t) for t in todos],
        meta={"created": len(todos)},
    )


@router.get(
    "/{business_id}/impact-summary",
    response_model=ImpactSummaryListResponse,
    summary="Progress per impact area",
    responses=_NOT_FOUND,
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def impact_summary(
    request: Request,
    business_id: UUID,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> ImpactSummaryListResponse:
    """One entry per canonical impact area, in canonical order."""
    summaries = await service.impact_summary(business_id, user.id)
    return ImpactSummaryListResponse(data=summaries_response(summaries))
