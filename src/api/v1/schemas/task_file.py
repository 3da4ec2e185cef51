"""Pydantic schemas for task-file mapping API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class TaskFilesRequest(BaseModel):
    file_ids: list[UUID] = Field(..., min_length=1)


class TaskFilesLookupRequest(BaseModel):
    task_ids: list[UUID] = Field(..., max_length=500)


class TaskFileMappingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    task_id: UUID
    file_id: UUID
    mapped_by: UUID | None
    mapped_at: datetime


class TaskFileMappingListResponse(BaseModel):
    data: list[TaskFileMappingResponse]


class FileIdListResponse(BaseModel):
    data: list[UUID]


class TaskIdListResponse(BaseModel):
    data: list[UUID]


class TaskFilesLookupResponse(BaseModel):
    """File ids per requested task; tasks without files map to ``[]``."""

    data: dict[UUID, list[UUID]]


class FileMappedResponse(BaseModel):
    mapped: bool


class UnmapResponse(BaseModel):
    removed: int
