"""Wage generation and review endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from wage_ledger.api.dependencies import DbSession, ManagerActor, ReaderActor
from wage_ledger.api.schemas import (
    AttendanceResponse,
    ErrorResponse,
    GenerateWagesRequest,
    GenerateWagesResponse,
    ItemFailureResponse,
    ReviewRequest,
    UnprocessedAttendanceResponse,
    WageHistoryResponse,
    WageResponse,
    WageReviewResponse,
    WeeklyCostItem,
    WeeklyCostResponse,
)
from wage_ledger.services.cost_rollup import CostRollup
from wage_ledger.services.wage_service import WageEngine, WageRequest

router = APIRouter(prefix="/manager/wages", tags=["wages"])


@router.get(
    "/unprocessed",
    response_model=UnprocessedAttendanceResponse,
)
async def list_unprocessed_attendance(
    db: DbSession,
    actor: ManagerActor,
    project_id: Annotated[int, Query()],
) -> UnprocessedAttendanceResponse:
    """List approved attendance that has no wage record yet."""
    records = await WageEngine(db).list_unprocessed(project_id)
    return UnprocessedAttendanceResponse(
        attendance=[AttendanceResponse.model_validate(r) for r in records]
    )


@router.post(
    "/generate",
    response_model=GenerateWagesResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def generate_wages(
    db: DbSession,
    actor: ManagerActor,
    payload: GenerateWagesRequest,
) -> GenerateWagesResponse:
    """Create PENDING wages; items that cannot be processed are reported in `failed`."""
    requests = [
        WageRequest(attendance_id=item.attendance_id, wage_type=item.wage_type, rate=item.rate)
        for item in payload.wage_data
    ]
    result = await WageEngine(db).generate(requests, actor)
    return GenerateWagesResponse(
        wages=[WageResponse.model_validate(w) for w in result.succeeded],
        failed=[ItemFailureResponse.model_validate(f) for f in result.failed],
    )


@router.get(
    "/history",
    response_model=WageHistoryResponse,
)
async def wage_history(
    db: DbSession,
    actor: ReaderActor,
    project_id: int | None = None,
    labour_id: int | None = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
) -> WageHistoryResponse:
    """List wage records, optionally by project, labourer and status."""
    wages = await WageEngine(db).get_history(
        project_id=project_id, status=status_filter, labour_id=labour_id
    )
    return WageHistoryResponse(wages=[WageResponse.model_validate(w) for w in wages])


@router.patch(
    "/review/{wage_id}",
    response_model=WageReviewResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def review_wage(
    db: DbSession,
    actor: ManagerActor,
    wage_id: Annotated[int, Path()],
    payload: ReviewRequest,
) -> WageReviewResponse:
    """Approve or reject a pending wage."""
    wage = await WageEngine(db).review(wage_id, payload.status, actor)
    return WageReviewResponse(wage=WageResponse.model_validate(wage))


@router.get(
    "/weekly-cost",
    response_model=WeeklyCostResponse,
)
async def weekly_cost(
    db: DbSession,
    actor: ReaderActor,
    project_id: Annotated[int, Query()],
) -> WeeklyCostResponse:
    """Wage and material cost per week (Monday start)."""
    weeks = await CostRollup(db).weekly_cost(project_id)
    return WeeklyCostResponse(weekly_costs=[WeeklyCostItem.model_validate(w) for w in weeks])
