"""Pydantic schemas for Todo API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.impact_summary import ImpactSummary
from domain.entities.todo import ImpactArea, TodoEffort, TodoPriority, TodoStatus


class TodoCreate(BaseModel):
    """Schema for creating a Todo by hand."""

    title: str = Field(..., min_length=1, max_length=255)
    impact: ImpactArea = ImpactArea.OTHER
    priority: TodoPriority = TodoPriority.P2
    effort: TodoEffort = TodoEffort.MEDIUM
    description_md: str | None = Field(None, max_length=10000)
    sub_area_id: UUID | None = None
    requirement_code: str | None = Field(None, max_length=50)
    kb_action_id: str | None = Field(None, max_length=100)
    owner_user_id: UUID | None = None
    due_date: datetime | None = None


class TodoStatusUpdate(BaseModel):
    status: TodoStatus


class TodoSubAreaUpdate(BaseModel):
    """``null`` moves the todo back to the unassigned bucket."""

    sub_area_id: UUID | None


class TodoImpactUpdate(BaseModel):
    impact: ImpactArea
    is_locked: bool | None = None


class TodoLockUpdate(BaseModel):
    is_locked: bool


class TodoEvidenceUpdate(BaseModel):
    """Replaces the whole evidence list."""

    chunk_ids: list[str]


class TodoResponse(BaseModel):
    """Schema for Todo response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "business_id": "223e4567-e89b-12d3-a456-426614174000",
                "impact": "Governance",
                "sub_area_id": None,
                "requirement_code": "GOV-001",
                "title": "Update Articles of Association with mission lock language",
                "description_md": "Your Articles must include mission lock language.",
                "priority": "P1",
                "effort": "High",
                "status": "todo",
                "evidence_chunk_ids": [],
                "is_impact_locked": False,
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
                "completed_at": None,
                "deleted_at": None,
            }
        },
    )

    id: UUID
    business_id: UUID
    impact: ImpactArea
    sub_area_id: UUID | None
    requirement_code: str | None
    kb_action_id: str | None
    title: str
    description_md: str | None
    priority: TodoPriority
    effort: TodoEffort
    status: TodoStatus
    owner_user_id: UUID | None
    due_date: datetime | None
    evidence_chunk_ids: list[str]
    is_impact_locked: bool
    anchor_quote: str | None = None
    kb_refs: list[str] = []
    rationale: str | None = None
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None
    deleted_at: datetime | None


class TodoListResponse(BaseModel):
    """Schema for list of Todos response."""

    data: list[TodoResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class TodoDetailResponse(BaseModel):
    """Schema for single Todo response."""

    data: TodoResponse


class ImpactSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    impact: ImpactArea
    total: int
    done: int
    pct: int


class ImpactSummaryListResponse(BaseModel):
    data: list[ImpactSummaryResponse]


class ResetTestDataResponse(BaseModel):
    """Fresh baseline after a development reset."""

    todos: list[TodoResponse]
    impact_summaries: list[ImpactSummaryResponse]


class ResetAllTestDataRequest(BaseModel):
    confirm: bool = False


class ResetAllTestDataResponse(BaseModel):
    deleted: int


def summaries_response(summaries: list[ImpactSummary]) -> list[ImpactSummaryResponse]:
    return [ImpactSummaryResponse.model_validate(s) for s in summaries]
