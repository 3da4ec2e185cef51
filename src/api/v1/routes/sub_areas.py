"""Sub-area registry API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_sub_area_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.sub_area import (
    SubAreaCreate,
    SubAreaDetailResponse,
    SubAreaListResponse,
    SubAreaOrderUpdate,
    SubAreaResponse,
    SubAreaUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.todo import ImpactArea
from domain.services.sub_area_service import SubAreaService

business_sub_areas_router = APIRouter(prefix="/businesses/{business_id}/sub-areas", tags=["sub-areas"])
router = APIRouter(prefix="/sub-areas", tags=["sub-areas"])


@business_sub_areas_router.get("", response_model=SubAreaListResponse, summary="List sub-areas")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_sub_areas(
    request: Request,
    business_id: UUID,
    user: CurrentUser,
    service: SubAreaService = Depends(get_sub_area_service),
    impact_area: ImpactArea | None = Query(None, description="Only this impact area"),
) -> SubAreaListResponse:
    if impact_area is None:
        sub_areas = await service.load_sub_areas(business_id, user.id)
    else:
        sub_areas = await service.load_sub_areas_by_impact(business_id, user.id, impact_area)
    return SubAreaListResponse(data=[SubAreaResponse.model_validate(s) for s in sub_areas])


@business_sub_areas_router.post(
    "",
    response_model=SubAreaDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a sub-area",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_sub_area(
    request: Request,
    business_id: UUID,
    body: SubAreaCreate,
    user: CurrentUser,
    service: SubAreaService = Depends(get_sub_area_service),
) -> SubAreaDetailResponse:
    """User-created sub-areas go after the defaults unless a position is given."""
    sub_area = await service.create_sub_area(
        business_id,
        user.id,
        impact_area=body.impact_area,
        title=body.title,
        description=body.description,
        sort_order=body.sort_order,
    )
    return SubAreaDetailResponse(data=SubAreaResponse.model_validate(sub_area))


@business_sub_areas_router.post(
    "/ensure-defaults",
    response_model=SubAreaListResponse,
    summary="Seed the default sub-areas",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def ensure_defaults(
    request: Request,
    business_id: UUID,
    user: CurrentUser,
    service: SubAreaService = Depends(get_sub_area_service),
) -> SubAreaListResponse:
    """Idempotent: areas that already have sub-areas are left untouched."""
    sub_areas = await service.ensure_defaults(business_id, user.id)
    return SubAreaListResponse(data=[SubAreaResponse.model_validate(s) for s in sub_areas])


@business_sub_areas_router.put(
    "/order",
    response_model=SubAreaListResponse,
    summary="Reorder sub-areas",
    responses={404: {"model": ErrorResponse, "description": "Sub-area not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_sort_order(
    request: Request,
    business_id: UUID,
    body: SubAreaOrderUpdate,
    user: CurrentUser,
    service: SubAreaService = Depends(get_sub_area_service),
) -> SubAreaListResponse:
    orders = {item.id: item.sort_order for item in body.items}
    sub_areas = await service.update_sort_order(business_id, user.id, orders)
    return SubAreaListResponse(data=[SubAreaResponse.model_validate(s) for s in sub_areas])


@router.patch(
    "/{sub_area_id}",
    response_model=SubAreaDetailResponse,
    summary="Update a sub-area",
    responses={404: {"model": ErrorResponse, "description": "Sub-area not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_sub_area(
    request: Request,
    sub_area_id: UUID,
    body: SubAreaUpdate,
    user: CurrentUser,
    service: SubAreaService = Depends(get_sub_area_service),
) -> SubAreaDetailResponse:
    sub_area = await service.update_sub_area(
        sub_area_id,
        user.id,
        title=body.title,
        description=body.description,
        sort_order=body.sort_order,
    )
    return SubAreaDetailResponse(data=SubAreaResponse.model_validate(sub_area))


@router.delete(
    "/{sub_area_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a sub-area",
    responses={
        400: {"model": ErrorResponse, "description": "Default sub-areas cannot be deleted"},
        404: {"model": ErrorResponse, "description": "Sub-area not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_sub_area(
    request: Request,
    sub_area_id: UUID,
    user: CurrentUser,
    service: SubAreaService = Depends(get_sub_area_service),
) -> None:
    """Only user-created sub-areas can be deleted; their tasks become unassigned."""
    await service.delete_sub_area(sub_area_id, user.id)
    return None
