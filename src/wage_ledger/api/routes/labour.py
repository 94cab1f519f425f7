"""Labour-facing wage endpoints."""

from fastapi import APIRouter

from wage_ledger.api.dependencies import DbSession, LabourActor
from wage_ledger.api.schemas import LabourEarningsResponse, MyWagesResponse, WageResponse
from wage_ledger.services.wage_service import WageEngine

router = APIRouter(prefix="/labour/wages", tags=["labour"])


@router.get(
    "/my-wages",
    response_model=MyWagesResponse,
)
async def my_wages(
    db: DbSession,
    actor: LabourActor,
) -> MyWagesResponse:
    """The calling labourer's wage records, newest first, with earnings totals."""
    engine = WageEngine(db)
    wages = await engine.get_history(labour_id=actor.id)
    earnings = await engine.get_earnings(actor.id)
    return MyWagesResponse(
        wages=[WageResponse.model_validate(w) for w in reversed(wages)],
        summary=LabourEarningsResponse.model_validate(earnings),
    )
