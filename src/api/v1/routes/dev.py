"""Development-only reset routes.

Mounted only when ``ENABLE_TEST_DATA_RESET`` is set; the service refuses the
operations as well when the flag is off.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_analysis_service
from api.v1.schemas.todo import (
    ResetAllTestDataRequest,
    ResetAllTestDataResponse,
    ResetTestDataResponse,
    TodoResponse,
    summaries_response,
)
from core.rate_limit import GENERATE_LIMIT, WRITE_LIMIT, limiter
from domain.services.analysis_service import AnalysisService

router = APIRouter(prefix="/dev", tags=["dev"])


@router.post(
    "/businesses/{business_id}/reset",
    response_model=ResetTestDataResponse,
    summary="Replace a business's tasks with a fresh baseline",
)
@limiter.limit(GENERATE_LIMIT)  # type: ignore[untyped-decorator]
async def reset_test_data(
    request: Request,
    business_id: UUID,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> ResetTestDataResponse:
    """Permanently deletes every task of the business, then regenerates the baseline."""
    todos, summaries = await service.reset_test_data(business_id, user.id)
    return ResetTestDataResponse(
        todos=[TodoResponse.model_validate(t) for t in todos],
        impact_summaries=summaries_response(summaries),
    )


@router.post(
    "/reset-all",
    response_model=ResetAllTestDataResponse,
    summary="Delete every task the caller owns",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def reset_all_test_data(
    request: Request,
    body: ResetAllTestDataRequest,
    user: CurrentUser,
    service: AnalysisService = Depends(get_analysis_service),
) -> ResetAllTestDataResponse:
    """Requires `{"confirm": true}`."""
    deleted = await service.reset_all_test_data(user.id, confirm=body.confirm)
    return ResetAllTestDataResponse(deleted=deleted)
