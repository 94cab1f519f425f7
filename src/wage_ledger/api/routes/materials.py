"""Material bill review endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path

from wage_ledger.api.dependencies import DbSession, ManagerActor
from wage_ledger.api.schemas import (
    ErrorResponse,
    MaterialBillResponse,
    MaterialReviewResponse,
    ReviewRequest,
)
from wage_ledger.services.material_service import MaterialBillService

router = APIRouter(prefix="/manager/materials", tags=["materials"])


@router.patch(
    "/bills/{bill_id}/review",
    response_model=MaterialReviewResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def review_material_bill(
    db: DbSession,
    actor: ManagerActor,
    bill_id: Annotated[int, Path()],
    payload: ReviewRequest,
) -> MaterialReviewResponse:
    """Approve or reject a pending material bill."""
    bill = await MaterialBillService(db).review(bill_id, payload.status, actor)
    return MaterialReviewResponse(bill=MaterialBillResponse.model_validate(bill))
