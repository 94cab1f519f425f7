"""Project ledger endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from wage_ledger.api.dependencies import DbSession, ManagerActor, ReaderActor
from wage_ledger.api.schemas import (
    AdjustmentCreate,
    AdjustmentResponse,
    ErrorResponse,
    LedgerEntryResponse,
    LedgerFilters,
    LedgerResponse,
    LedgerSummaryResponse,
    PaginationResponse,
)
from wage_ledger.config import get_settings
from wage_ledger.models import LedgerEntryType
from wage_ledger.services.cost_rollup import CostRollup
from wage_ledger.services.ledger_service import AdjustmentData, LedgerQuery, LedgerService

router = APIRouter(prefix="/manager/ledger", tags=["ledger"])


@router.get(
    "/project/{project_id}",
    response_model=LedgerResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_project_ledger(
    db: DbSession,
    actor: ReaderActor,
    project_id: Annotated[int, Path()],
    start_date: date | None = None,
    end_date: date | None = None,
    entry_type: Annotated[LedgerEntryType | None, Query(alias="type")] = None,
    page: int = 1,
    limit: int | None = None,
) -> LedgerResponse:
    """Chronological ledger with running totals over the full project history."""
    filters = LedgerQuery(
        start_date=start_date,
        end_date=end_date,
        entry_type=entry_type,
        page=page,
        limit=limit if limit is not None else get_settings().ledger_default_limit,
    )
    result = await LedgerService(db).query(project_id, filters)

    return LedgerResponse(
        entries=[LedgerEntryResponse.model_validate(row) for row in result.entries],
        pagination=PaginationResponse(
            page=result.pagination.page,
            limit=result.pagination.limit,
            total=result.pagination.total,
            total_pages=result.pagination.total_pages,
        ),
        filters=LedgerFilters(
            start_date=start_date,
            end_date=end_date,
            type=entry_type.value if entry_type else None,
        ),
        opening_balance=result.opening_balance,
    )


@router.post(
    "/project/{project_id}/adjust",
    response_model=AdjustmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def add_adjustment(
    db: DbSession,
    actor: ManagerActor,
    project_id: Annotated[int, Path()],
    payload: AdjustmentCreate,
) -> AdjustmentResponse:
    """Record a manual adjustment and its ledger entry."""
    recorded = await LedgerService(db).record_adjustment(
        project_id,
        AdjustmentData(
            adjustment_date=payload.adjustment_date,
            description=payload.description,
            amount=payload.amount,
            category=payload.category,
            notes=payload.notes,
        ),
        actor,
    )
    adjustment = recorded.adjustment
    return AdjustmentResponse(
        id=adjustment.id,
        project_id=adjustment.project_id,
        date=adjustment.adjustment_date,
        description=adjustment.description,
        amount=adjustment.amount,
        category=adjustment.category,
        notes=adjustment.notes,
        created_by=adjustment.created_by,
        created_at=adjustment.created_at,
        ledger_entry_id=recorded.entry.id,
    )


@router.get(
    "/project/{project_id}/summary",
    response_model=LedgerSummaryResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_ledger_summary(
    db: DbSession,
    actor: ReaderActor,
    project_id: Annotated[int, Path()],
    start_date: date | None = None,
    end_date: date | None = None,
) -> LedgerSummaryResponse:
    """Totals per entry type for a period, plus the overall project balance."""
    summary = await CostRollup(db).period_summary(project_id, start_date, end_date)
    balance = await LedgerService(db).project_balance(project_id)
    return LedgerSummaryResponse(
        project_id=project_id,
        start_date=start_date,
        end_date=end_date,
        totals=summary.totals,
        grand_total=summary.grand_total,
        entry_count=summary.entry_count,
        balance=balance,
    )
