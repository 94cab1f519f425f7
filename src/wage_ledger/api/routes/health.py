"""Health and readiness endpoints.

/health reports on each table the wage and ledger flows depend on, so a
database that answers but was never initialised shows up as degraded.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wage_ledger import __version__
from wage_ledger.api.dependencies import DbSession
from wage_ledger.models import AttendanceRecord, LedgerEntry, MaterialBill, WageRate, WageRecord

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

REQUIRED_TABLES = (AttendanceRecord, WageRate, WageRecord, MaterialBill, LedgerEntry)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    database: str
    tables: dict[str, str]
    version: str


async def check_tables(db: AsyncSession) -> dict[str, str]:
    """Read one row from each required table and report which ones fail."""
    results: dict[str, str] = {}
    for model in REQUIRED_TABLES:
        try:
            await db.execute(select(model.id).limit(1))
            results[model.__tablename__] = "ok"
        except SQLAlchemyError:
            logger.warning("Table check failed for %s", model.__tablename__, exc_info=True)
            await db.rollback()
            results[model.__tablename__] = "unavailable"
    return results


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
async def health_check(db: DbSession) -> HealthResponse:
    """Report database reachability and schema presence."""
    tables = await check_tables(db)
    ok = all(state == "ok" for state in tables.values())
    return HealthResponse(
        status="healthy" if ok else "degraded",
        timestamp=datetime.now(timezone.utc),
        database="healthy" if ok else "unhealthy",
        tables=tables,
        version=__version__,
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check(db: DbSession) -> dict[str, str]:
    """Ready once every required table can be read."""
    tables = await check_tables(db)
    missing = sorted(name for name, state in tables.items() if state != "ok")
    if missing:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Tables unavailable: {', '.join(missing)}",
        )
    return {"status": "ready"}


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    """Process is up; no dependencies checked."""
    return {"status": "alive"}
