"""Wage rate configuration endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, Response, status

from wage_ledger.api.dependencies import DbSession, ManagerActor, ReaderActor
from wage_ledger.api.schemas import (
    ErrorResponse,
    WageRateCreate,
    WageRateListResponse,
    WageRateResponse,
    WageRateUpdate,
)
from wage_ledger.services.wage_rate_service import WageRateService

router = APIRouter(prefix="/manager/wage-rates", tags=["wage-rates"])


@router.get("", response_model=WageRateListResponse)
async def list_wage_rates(
    db: DbSession,
    actor: ReaderActor,
    project_id: Annotated[int, Query()],
) -> WageRateListResponse:
    """List configured rates of a project."""
    rates = await WageRateService(db).list_for_project(project_id)
    return WageRateListResponse(wage_rates=[WageRateResponse.model_validate(r) for r in rates])


@router.post(
    "",
    response_model=WageRateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_wage_rate(
    db: DbSession,
    actor: ManagerActor,
    payload: WageRateCreate,
) -> WageRateResponse:
    wage_rate = await WageRateService(db).create(
        payload.project_id, payload.skill_type, payload.rate, actor
    )
    return WageRateResponse.model_validate(wage_rate)


@router.patch(
    "/{rate_id}",
    response_model=WageRateResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_wage_rate(
    db: DbSession,
    actor: ManagerActor,
    rate_id: Annotated[int, Path()],
    payload: WageRateUpdate,
) -> WageRateResponse:
    wage_rate = await WageRateService(db).update(rate_id, payload.rate, actor)
    return WageRateResponse.model_validate(wage_rate)


@router.delete(
    "/{rate_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_wage_rate(
    db: DbSession,
    actor: ManagerActor,
    rate_id: Annotated[int, Path()],
) -> Response:
    await WageRateService(db).delete(rate_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
