"""Project ledger: exactly-once materialization and running-total queries.

Provides:
- Idempotent materialization of approved wages and material bills via
  (project_id, entry_type, reference_id) uniqueness
- Manual adjustments persisted together with their ledger entry
- Chronological queries whose running totals reflect the full project
  history, whatever filters narrow the returned rows
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wage_ledger.config import get_settings
from wage_ledger.context import Actor
from wage_ledger.database import dialect_insert
from wage_ledger.exceptions import (
    InvalidAmountError,
    InvalidDateRangeError,
    InvalidPageError,
    StorageConflictError,
)
from wage_ledger.models import (
    Labour,
    LedgerAdjustment,
    LedgerEntry,
    LedgerEntryType,
    MaterialBill,
    WageRecord,
)
from wage_ledger.models.base import utcnow
from wage_ledger.services.audit import AuditRecorder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdjustmentData:
    """Input for a manual ledger adjustment."""

    adjustment_date: date
    description: str
    amount: Decimal | float | int | str
    category: str = "ADJUSTMENT"
    notes: str | None = None


@dataclass(frozen=True)
class RecordedAdjustment:
    """An adjustment and the ledger entry created with it."""

    adjustment: LedgerAdjustment
    entry: LedgerEntry


@dataclass(frozen=True)
class LedgerQuery:
    """Filters and pagination for a ledger read."""

    start_date: date | None = None
    end_date: date | None = None
    entry_type: LedgerEntryType | None = None
    page: int = 1
    limit: int = 100


@dataclass(frozen=True)
class LedgerRow:
    """One ledger entry as seen by readers, with its running total."""

    id: int
    date: date
    type: str
    reference_id: int
    description: str
    amount: Decimal
    running_total: Decimal
    category: str | None
    approved_by: int | None
    approved_at: datetime | None


@dataclass(frozen=True)
class Pagination:
    """Pagination metadata for a ledger page."""

    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)


@dataclass(frozen=True)
class LedgerPage:
    """Result of a ledger query."""

    entries: list[LedgerRow]
    pagination: Pagination
    filters: LedgerQuery
    opening_balance: Decimal = field(default=Decimal("0"))


class LedgerService:
    """Per-project ledger over wages, material bills and adjustments.

    Notes:
    - ledger_entry rows are never updated or deleted.
    - (project_id, entry_type, reference_id) is unique; a second
      materialization of the same source raises StorageConflictError.
    - running_total is computed at read time, ordered by (entry_date, id).
    """

    def __init__(self, session: AsyncSession, *, max_limit: int | None = None):
        self.session = session
        self.max_limit = max_limit or get_settings().ledger_max_limit

    # ------------------------------------------------------------------
    # Materialization
    # ------------------------------------------------------------------

    async def record_wage_approval(
        self,
        wage: WageRecord,
        actor: Actor,
        approved_at: datetime,
    ) -> LedgerEntry:
        """Create the WAGE entry for an approved wage record.

        Runs inside the caller's transaction; the caller commits.
        """
        labour = await self.session.get(Labour, wage.labour_id)
        if labour is not None:
            description = f"Wage Payment - {labour.name} ({labour.skill_type})"
        else:
            description = f"Wage Payment - Labour #{wage.labour_id}"

        return await self._materialize(
            project_id=wage.project_id,
            entry_type=LedgerEntryType.WAGE,
            reference_id=wage.id,
            entry_date=approved_at.date(),
            description=description,
            amount=wage.total_amount,
            category=wage.wage_type,
            approved_by=actor.id,
            approved_at=approved_at,
        )

    async def record_material_approval(
        self,
        bill: MaterialBill,
        actor: Actor,
        approved_at: datetime,
    ) -> LedgerEntry:
        """Create the MATERIAL entry for an approved material bill."""
        return await self._materialize(
            project_id=bill.project_id,
            entry_type=LedgerEntryType.MATERIAL,
            reference_id=bill.id,
            entry_date=approved_at.date(),
            description=f"Material Bill #{bill.id} - {bill.category}",
            amount=bill.total_amount,
            category=bill.category,
            approved_by=actor.id,
            approved_at=approved_at,
        )

    async def record_adjustment(
        self,
        project_id: int,
        data: AdjustmentData,
        actor: Actor,
    ) -> RecordedAdjustment:
        """Persist a manual adjustment and its ADJUSTMENT entry atomically."""
        amount = self._parse_amount(data.amount)

        try:
            adjustment = LedgerAdjustment(
                project_id=project_id,
                adjustment_date=data.adjustment_date,
                description=data.description,
                amount=amount,
                category=data.category or "ADJUSTMENT",
                notes=data.notes,
                created_by=actor.id,
                created_at=utcnow(),
            )
            self.session.add(adjustment)
            await self.session.flush()

            entry = await self._materialize(
                project_id=project_id,
                entry_type=LedgerEntryType.ADJUSTMENT,
                reference_id=adjustment.id,
                entry_date=adjustment.adjustment_date,
                description=adjustment.description,
                amount=amount,
                category=adjustment.category,
                approved_by=actor.id,
                approved_at=adjustment.created_at,
            )

            AuditRecorder(self.session).record(
                entity_type="ledger_adjustment",
                entity_id=adjustment.id,
                category="LEDGER",
                action="CREATE",
                actor=actor,
                project_id=project_id,
                after=adjustment.to_dict(),
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Recorded adjustment %s of %s on project %s by %s",
            adjustment.id,
            amount,
            project_id,
            actor.id,
        )
        return RecordedAdjustment(adjustment=adjustment, entry=entry)

    async def _materialize(
        self,
        *,
        project_id: int,
        entry_type: LedgerEntryType,
        reference_id: int,
        entry_date: date,
        description: str,
        amount: Decimal,
        category: str | None,
        approved_by: int | None,
        approved_at: datetime | None,
    ) -> LedgerEntry:
        """Insert one ledger entry, enforcing exactly-once per source."""
        stmt = (
            dialect_insert(self.session, LedgerEntry)
            .values(
                project_id=project_id,
                entry_date=entry_date,
                entry_type=entry_type.value,
                reference_id=reference_id,
                description=description,
                amount=amount,
                category=category,
                approved_by=approved_by,
                approved_at=approved_at,
            )
            .on_conflict_do_nothing(index_elements=["project_id", "entry_type", "reference_id"])
        )
        result = await self.session.execute(stmt)

        if result.rowcount == 0:
            logger.warning(
                "Ledger entry %s#%s already exists for project %s",
                entry_type.value,
                reference_id,
                project_id,
            )
            raise StorageConflictError(project_id, entry_type.value, reference_id)

        existing = await self.session.execute(
            select(LedgerEntry).where(
                LedgerEntry.project_id == project_id,
                LedgerEntry.entry_type == entry_type.value,
                LedgerEntry.reference_id == reference_id,
            )
        )
        return existing.scalar_one()

    @staticmethod
    def _parse_amount(raw: Any) -> Decimal:
        if raw is None or isinstance(raw, bool):
            raise InvalidAmountError("Invalid amount", amount=raw)
        try:
            amount = Decimal(str(raw))
        except InvalidOperation:
            raise InvalidAmountError("Invalid amount", amount=str(raw)) from None
        if not amount.is_finite():
            raise InvalidAmountError("Invalid amount", amount=str(raw))
        return amount.quantize(Decimal("0.01"))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def query(self, project_id: int, filters: LedgerQuery | None = None) -> LedgerPage:
        """Return ledger rows ordered by (date, id) with true running totals.

        The running total of each row is the cumulative balance over the
        whole project history up to that row. Date and type filters only
        decide which rows are returned; pagination applies last.

        Raises:
            InvalidDateRangeError: If start_date is after end_date
            InvalidPageError: If page < 1 or limit is outside 1..max_limit
        """
        filters = filters or LedgerQuery()
        if filters.page < 1 or filters.limit < 1 or filters.limit > self.max_limit:
            raise InvalidPageError(filters.page, filters.limit, self.max_limit)
        if (
            filters.start_date is not None
            and filters.end_date is not None
            and filters.start_date > filters.end_date
        ):
            raise InvalidDateRangeError(filters.start_date, filters.end_date)

        # Everything before the window precedes every in-window row in (date, id) order
        opening = Decimal("0")
        if filters.start_date is not None:
            opening = await self._sum_amounts(
                LedgerEntry.project_id == project_id,
                LedgerEntry.entry_date < filters.start_date,
            )

        stmt = select(LedgerEntry).where(LedgerEntry.project_id == project_id)
        if filters.start_date is not None:
            stmt = stmt.where(LedgerEntry.entry_date >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(LedgerEntry.entry_date <= filters.end_date)
        stmt = stmt.order_by(LedgerEntry.entry_date, LedgerEntry.id)
        result = await self.session.execute(stmt)

        running = opening
        rows: list[LedgerRow] = []
        for entry in result.scalars().all():
            running += Decimal(str(entry.amount))
            if filters.entry_type is not None and entry.entry_type != filters.entry_type.value:
                continue
            rows.append(self._to_row(entry, running))

        offset = (filters.page - 1) * filters.limit
        return LedgerPage(
            entries=rows[offset : offset + filters.limit],
            pagination=Pagination(page=filters.page, limit=filters.limit, total=len(rows)),
            filters=filters,
            opening_balance=opening,
        )

    async def project_balance(self, project_id: int) -> Decimal:
        """Sum of every ledger amount for a project."""
        return await self._sum_amounts(LedgerEntry.project_id == project_id)

    async def entries_for_source(
        self, project_id: int, entry_type: LedgerEntryType, reference_id: int
    ) -> list[LedgerEntry]:
        """Ledger entries materialized from one source record."""
        result = await self.session.execute(
            select(LedgerEntry).where(
                LedgerEntry.project_id == project_id,
                LedgerEntry.entry_type == entry_type.value,
                LedgerEntry.reference_id == reference_id,
            )
        )
        return list(result.scalars().all())

    async def _sum_amounts(self, *criteria: Any) -> Decimal:
        total = await self.session.scalar(
            select(func.coalesce(func.sum(LedgerEntry.amount), 0)).where(*criteria)
        )
        return Decimal(str(total or 0))

    @staticmethod
    def _to_row(entry: LedgerEntry, running_total: Decimal) -> LedgerRow:
        return LedgerRow(
            id=entry.id,
            date=entry.entry_date,
            type=entry.entry_type,
            reference_id=entry.reference_id,
            description=entry.description,
            amount=Decimal(str(entry.amount)),
            running_total=running_total,
            category=entry.category,
            approved_by=entry.approved_by,
            approved_at=entry.approved_at,
        )
