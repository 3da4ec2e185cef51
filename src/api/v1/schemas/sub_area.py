"""Pydantic schemas for SubArea API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.sub_area import IconType
from domain.entities.todo import ImpactArea


class SubAreaCreate(BaseModel):
    """Schema for adding a user-created sub-area."""

    impact_area: ImpactArea
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    sort_order: int | None = Field(None, ge=0)


class SubAreaUpdate(BaseModel):
    """Schema for updating a sub-area (all fields optional)."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    sort_order: int | None = Field(None, ge=0)


class SubAreaOrderItem(BaseModel):
    id: UUID
    sort_order: int = Field(..., ge=0)


class SubAreaOrderUpdate(BaseModel):
    items: list[SubAreaOrderItem] = Field(..., min_length=1)


class SubAreaResponse(BaseModel):
    """Schema for SubArea response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    business_id: UUID
    impact_area: ImpactArea
    title: str
    description: str | None
    icon_type: IconType
    sort_order: int
    is_user_created: bool
    created_at: datetime
    updated_at: datetime


class SubAreaListResponse(BaseModel):
    data: list[SubAreaResponse]


class SubAreaDetailResponse(BaseModel):
    data: SubAreaResponse
