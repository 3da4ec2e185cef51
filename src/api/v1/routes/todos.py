"""Todo API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_analysis_service, get_task_file_mapping_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.task_file import (
    FileIdListResponse,
    FileMappedResponse,
    TaskFileMappingListResponse,
    TaskFileMappingResponse,
    TaskFilesLookupRequest,
    TaskFilesLookupResponse,
    TaskFilesRequest,
    TaskIdListResponse,
    UnmapResponse,
)
from api.v1.schemas.todo import (
    TodoDetailResponse,
    TodoEvidenceUpdate,
    TodoImpactUpdate,
    TodoLockUpdate,
    TodoResponse,
    TodoStatusUpdate,
    TodoSubAreaUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.analysis_service import AnalysisService
from domain.services.task_file_mapping_service import TaskFileMappingService

router = APIRouter(prefix="/todos", tags=["todos"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Task not found"}}


# Declared before "/{todo_id}" routes so "files" is not parsed as an id.
@router.post(
    "/files/lookup",
    response_model=TaskFilesLookupResponse,
    summary="Files attached to several tasks",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def lookup_task_files(
    request: Request,
    body: TaskFilesLookupRequest,
    user: CurrentUser,
    service: TaskFileMappingService = Depends(get_task_file_mapping_service),
) -> TaskFilesLookupResponse:
    """Every requested task id is present in the result, with ``[]`` when it has no files."""
    mapping = await service.get_files_mapped_to_tasks(body.task_ids, user.id)
    return TaskFilesLookupResponse(data=mapping)


@router.get(
    "/{todo_id}",
    response_model=TodoDetailResponse,
    summary="Get a task",
    responses=_NOT_FOUND,
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_todo(
    request: Request,
    todo_id: UUID,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> TodoDetailResponse:
    """Get a task by ID; binned tasks are returned too."""
    todo = await service.get_todo(todo_id, user.id)
    return TodoDetailResponse(data=TodoResponse.model_validate(todo))


@router.patch(
    "/{todo_id}/status",
    response_model=TodoDetailResponse,
    summary="Change task status",
    responses={
        **_NOT_FOUND,
        400: {"model": ErrorResponse, "description": "Transition not allowed"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_status(
    request: Request,
    todo_id: UUID,
    body: TodoStatusUpdate,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> TodoDetailResponse:
    """
    Move a task to a new status.

    `completed_at` is stamped on entering `done` and cleared on leaving it.
    """
    todo = await service.update_todo_status(todo_id, user.id, body.status)
    return TodoDetailResponse(data=TodoResponse.model_validate(todo))


@router.patch(
    "/{todo_id}/sub-area",
    response_model=TodoDetailResponse,
    summary="Assign a task to a sub-area",
    responses=_NOT_FOUND,
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def assign_sub_area(
    request: Request,
    todo_id: UUID,
    body: TodoSubAreaUpdate,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> TodoDetailResponse:
    todo = await service.assign_task_to_sub_area(todo_id, user.id, body.sub_area_id)
    return TodoDetailResponse(data=TodoResponse.model_validate(todo))


@router.patch(
    "/{todo_id}/impact",
    response_model=TodoDetailResponse,
    summary="Reclassify a task",
    responses=_NOT_FOUND,
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_impact(
    request: Request,
    todo_id: UUID,
    body: TodoImpactUpdate,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> TodoDetailResponse:
    """Change the impact area; the sub-area assignment is cleared when it changes."""
    todo = await service.update_task_impact_area(
        todo_id, user.id, body.impact, is_locked=body.is_locked
    )
    return TodoDetailResponse(data=TodoResponse.model_validate(todo))


@router.patch(
    "/{todo_id}/lock",
    response_model=TodoDetailResponse,
    summary="Lock or unlock the impact area",
    responses=_NOT_FOUND,
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_lock(
    request: Request,
    todo_id: UUID,
    body: TodoLockUpdate,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> TodoDetailResponse:
    todo = await service.update_task_lock_state(todo_id, user.id, body.is_locked)
    return TodoDetailResponse(data=TodoResponse.model_validate(todo))


@router.put(
    "/{todo_id}/evidence",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Replace linked evidence",
    responses=_NOT_FOUND,
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def link_evidence(
    request: Request,
    todo_id: UUID,
    body: TodoEvidenceUpdate,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> None:
    await service.link_evidence(todo_id, user.id, body.chunk_ids)
    return None


@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Move a task to the bin",
    responses=_NOT_FOUND,
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_todo(
    request: Request,
    todo_id: UUID,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> None:
    """Soft delete: the task leaves the active list and the impact summary."""
    await service.delete_task(todo_id, user.id)
    return None


@router.post(
    "/{todo_id}/restore",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Restore a binned task",
    responses=_NOT_FOUND,
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def restore_todo(
    request: Request,
    todo_id: UUID,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> None:
    await service.restore_task(todo_id, user.id)
    return None


@router.get(
    "/{todo_id}/files",
    response_model=FileIdListResponse,
    summary="List file ids attached to a task",
    responses=_NOT_FOUND,
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_task_files(
    request: Request,
    todo_id: UUID,
    user: CurrentUser,
    service: TaskFileMappingService = Depends(get_task_file_mapping_service),
) -> FileIdListResponse:
    file_ids = await service.get_task_files(todo_id, user.id)
    return FileIdListResponse(data=file_ids)


@router.get(
    "/{todo_id}/files/mappings",
    response_model=TaskFileMappingListResponse,
    summary="List file mappings of a task",
    responses=_NOT_FOUND,
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_task_mappings(
    request: Request,
    todo_id: UUID,
    user: CurrentUser,
    service: TaskFileMappingService = Depends(get_task_file_mapping_service),
) -> TaskFileMappingListResponse:
    """Mappings with who attached each file and when."""
    mappings = await service.get_task_mappings(todo_id, user.id)
    return TaskFileMappingListResponse(
        data=[TaskFileMappingResponse.model_validate(m) for m in mappings]
    )


@router.post(
    "/{todo_id}/files",
    response_model=TaskFileMappingListResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Attach files to a task",
    responses={
        **_NOT_FOUND,
        409: {"model": ErrorResponse, "description": "File already attached to another task"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def map_task_files(
    request: Request,
    todo_id: UUID,
    body: TaskFilesRequest,
    user: CurrentUser,
    service: TaskFileMappingService = Depends(get_task_file_mapping_service),
) -> TaskFileMappingListResponse:
    """Returns the newly created mappings; files already on this task are skipped."""
    mappings = await service.map_files_to_task(todo_id, body.file_ids, user.id)
    return TaskFileMappingListResponse(
        data=[TaskFileMappingResponse.model_validate(m) for m in mappings]
    )


@router.post(
    "/{todo_id}/files/remove",
    response_model=UnmapResponse,
    summary="Detach files from a task",
    responses=_NOT_FOUND,
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def unmap_task_files(
    request: Request,
    todo_id: UUID,
    body: TaskFilesRequest,
    user: CurrentUser,
    service: TaskFileMappingService = Depends(get_task_file_mapping_service),
) -> UnmapResponse:
    removed = await service.unmap_files_from_task(todo_id, body.file_ids, user.id)
    return UnmapResponse(removed=removed)


@router.get(
    "/{todo_id}/files/{file_id}",
    response_model=FileMappedResponse,
    summary="Check whether a file is attached to a task",
    responses=_NOT_FOUND,
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def is_file_mapped(
    request: Request,
    todo_id: UUID,
    file_id: UUID,
    user: CurrentUser,
    service: TaskFileMappingService = Depends(get_task_file_mapping_service),
) -> FileMappedResponse:
    mapped = await service.is_file_mapped_to_task(todo_id, file_id, user.id)
    return FileMappedResponse(mapped=mapped)


files_router = APIRouter(prefix="/files", tags=["files"])


@files_router.get(
    "/{file_id}/todos",
    response_model=TaskIdListResponse,
    summary="Tasks a file is attached to",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_file_tasks(
    request: Request,
    file_id: UUID,
    user: CurrentUser,
    service: TaskFileMappingService = Depends(get_task_file_mapping_service),
) -> TaskIdListResponse:
    task_ids = await service.get_file_tasks(file_id, user.id)
    return TaskIdListResponse(data=task_ids)
