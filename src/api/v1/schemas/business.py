"""Pydantic schemas for Business API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class BusinessCreate(BaseModel):
    """Schema for registering a business."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=10000)
    industry: str | None = Field(None, max_length=100)


class BusinessResponse(BaseModel):
    """Schema for Business response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    industry: str | None
    created_at: datetime


class BusinessListResponse(BaseModel):
    data: list[BusinessResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class BusinessDetailResponse(BaseModel):
    data: BusinessResponse
