"""Wage engine: attendance to wage claims, and claim review."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from wage_ledger.calculators import RateResolver, WageAmount, WageCalculator
from wage_ledger.context import Actor
from wage_ledger.database import dialect_insert
from wage_ledger.exceptions import (
    AlreadyProcessedError,
    InvalidTransitionError,
    NotFoundError,
    WageLedgerError,
)
from wage_ledger.models import AttendanceRecord, ReviewStatus, WageRecord, WageType
from wage_ledger.models.base import utcnow
from wage_ledger.services.attendance_service import AttendanceIntake
from wage_ledger.services.audit import AuditRecorder
from wage_ledger.services.ledger_service import LedgerService
from wage_ledger.services.state_machine import ReviewStateMachine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WageRequest:
    """One item of a generation batch.

    wage_type and rate override the attendance's wage type and the
    project's configured rate when given.
    """

    attendance_id: int
    wage_type: WageType | str | None = None
    rate: Decimal | None = None


@dataclass(frozen=True)
class ItemFailure:
    """Why one attendance record was not turned into a wage claim."""

    attendance_id: int
    code: str
    detail: str


@dataclass
class GenerationResult:
    """Partitioned outcome of a generation batch."""

    succeeded: list[WageRecord] = field(default_factory=list)
    failed: list[ItemFailure] = field(default_factory=list)


@dataclass(frozen=True)
class LabourEarnings:
    """What one labourer has earned and what is still awaiting review."""

    labour_id: int
    approved_count: int
    approved_total: Decimal
    pending_total: Decimal


def parse_decision(decision: ReviewStatus | str) -> ReviewStatus:
    """Turn a raw review decision into a status, rejecting unknown values."""
    try:
        return ReviewStatus(decision.value if isinstance(decision, ReviewStatus) else str(decision).upper())
    except ValueError:
        raise InvalidTransitionError(
            ReviewStatus.PENDING.value,
            str(decision),
            "decision must be APPROVED or REJECTED",
        ) from None


class WageEngine:
    """Turns attendance into wage claims and drives their review.

    Key invariants:
    1. At most one wage record per attendance record (unique attendance_id)
    2. A failing item never aborts the rest of its batch
    3. PENDING → APPROVED/REJECTED only; both are terminal
    4. An APPROVED status is never visible without its WAGE ledger entry
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.intake = AttendanceIntake(session)
        self.ledger = LedgerService(session)
        self.audit = AuditRecorder(session)

    async def list_unprocessed(self, project_id: int) -> list[AttendanceRecord]:
        """Attendance of a project without a wage record."""
        return await self.intake.list_unprocessed(project_id)

    async def generate(
        self,
        items: Iterable[WageRequest | int],
        actor: Actor,
    ) -> GenerationResult:
        """Create PENDING wage records for a batch of attendance ids.

        Each item either yields a wage record or a failure with a reason
        (NOT_FOUND, INVALID_WAGE_TYPE, RATE_NOT_CONFIGURED, ALREADY_PROCESSED).
        """
        requests = [
            item if isinstance(item, WageRequest) else WageRequest(attendance_id=int(item))
            for item in items
        ]
        # Ascending id order keeps row locks ordered across concurrent batches
        requests.sort(key=lambda request: request.attendance_id)

        attendance = await self.intake.get_many([r.attendance_id for r in requests])
        labourers = await self.intake.get_labourers({a.labour_id for a in attendance.values()})
        resolver = RateResolver(self.session)
        result = GenerationResult()

        try:
            for request in requests:
                try:
                    record = attendance.get(request.attendance_id)
                    if record is None:
                        raise NotFoundError("Attendance", request.attendance_id)
                    labour = labourers.get(record.labour_id)
                    if labour is None:
                        raise NotFoundError("Labour", record.labour_id)

                    wage_type = WageCalculator.parse_wage_type(request.wage_type or record.wage_type)
                    rate = await resolver.resolve(record.project_id, labour.skill_type, request.rate)
                    amount = WageCalculator.calculate(wage_type, rate, record.worked_hours)
                    wage = await self._insert_pending(record, amount)
                except WageLedgerError as exc:
                    logger.warning(
                        "Wage generation skipped attendance %s: %s",
                        request.attendance_id,
                        exc,
                    )
                    result.failed.append(
                        ItemFailure(
                            attendance_id=request.attendance_id,
                            code=exc.code,
                            detail=str(exc),
                        )
                    )
                    continue
                result.succeeded.append(wage)

            await self.session.commit()
        except Exception:
            logger.exception("Wage generation batch failed; rolling back")
            await self.session.rollback()
            raise

        logger.info(
            "Generated %d wage record(s), %d failure(s) for actor %s",
            len(result.succeeded),
            len(result.failed),
            actor.id,
        )
        return result

    async def _insert_pending(self, record: AttendanceRecord, amount: WageAmount) -> WageRecord:
        """Insert a PENDING wage, relying on UNIQUE(attendance_id) to reject repeats."""
        stmt = (
            dialect_insert(self.session, WageRecord)
            .values(
                attendance_id=record.id,
                labour_id=record.labour_id,
                project_id=record.project_id,
                wage_type=amount.wage_type.value,
                rate=amount.rate,
                worked_hours=amount.worked_hours,
                total_amount=amount.total_amount,
                status=ReviewStatus.PENDING.value,
                created_at=utcnow(),
            )
            .on_conflict_do_nothing(index_elements=["attendance_id"])
        )
        inserted = await self.session.execute(stmt)
        if inserted.rowcount == 0:
            raise AlreadyProcessedError(record.id)

        created = await self.session.execute(
            select(WageRecord).where(WageRecord.attendance_id == record.id)
        )
        return created.scalar_one()

    async def review(
        self,
        wage_id: int,
        decision: ReviewStatus | str,
        actor: Actor,
        *,
        reviewed_at: datetime | None = None,
    ) -> WageRecord:
        """Approve or reject a PENDING wage record.

        Approval writes the WAGE ledger entry in the same transaction as
        the status change; if that fails, the record stays PENDING.

        Raises:
            NotFoundError: If the wage record does not exist
            InvalidTransitionError: If the record is not PENDING or the
                decision is not APPROVED/REJECTED
            StorageConflictError: If a ledger entry for the wage already exists
        """
        target = parse_decision(decision)
        ReviewStateMachine.validate_transition(ReviewStatus.PENDING, target)
        reviewed_at = reviewed_at or utcnow()

        try:
            # Conditional update: a concurrent reviewer that lost the race matches no row
            updated = await self.session.execute(
                update(WageRecord)
                .where(
                    WageRecord.id == wage_id,
                    WageRecord.status == ReviewStatus.PENDING.value,
                )
                .values(status=target.value, approved_by=actor.id, approved_at=reviewed_at)
                .execution_options(synchronize_session=False)
            )
            if updated.rowcount == 0:
                current = await self.session.get(WageRecord, wage_id, populate_existing=True)
                if current is None:
                    raise NotFoundError("WageRecord", wage_id)
                ReviewStateMachine.validate_transition(current.status, target)
                raise InvalidTransitionError(current.status, target.value)

            wage = await self.session.get(WageRecord, wage_id, populate_existing=True)
            if wage is None:
                raise NotFoundError("WageRecord", wage_id)

            if ReviewStateMachine.materializes_ledger(target):
                await self.ledger.record_wage_approval(wage, actor, reviewed_at)

            self.audit.record(
                entity_type="wage",
                entity_id=wage.id,
                category="WAGE",
                action="APPROVE" if target is ReviewStatus.APPROVED else "REJECT",
                actor=actor,
                project_id=wage.project_id,
                before={"status": ReviewStatus.PENDING.value},
                after={"status": target.value, "total_amount": wage.total_amount},
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Wage %s %s by %s", wage_id, target.value, actor.id)
        return wage

    async def get(self, wage_id: int) -> WageRecord:
        """Fetch one wage record."""
        wage = await self.session.get(WageRecord, wage_id)
        if wage is None:
            raise NotFoundError("WageRecord", wage_id)
        return wage

    async def get_history(
        self,
        project_id: int | None = None,
        status: ReviewStatus | str | None = None,
        labour_id: int | None = None,
    ) -> list[WageRecord]:
        """Wage records filtered by project, labourer and/or status, oldest first."""
        stmt = select(WageRecord)
        if project_id is not None:
            stmt = stmt.where(WageRecord.project_id == project_id)
        if labour_id is not None:
            stmt = stmt.where(WageRecord.labour_id == labour_id)
        if status is not None:
            value = status.value if isinstance(status, ReviewStatus) else str(status).upper()
            stmt = stmt.where(WageRecord.status == value)
        stmt = stmt.order_by(WageRecord.created_at, WageRecord.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_earnings(self, labour_id: int) -> LabourEarnings:
        """Approved and pending totals for one labourer across projects."""
        approved = WageRecord.status == ReviewStatus.APPROVED.value
        pending = WageRecord.status == ReviewStatus.PENDING.value
        zero = Decimal("0.00")
        row = (
            await self.session.execute(
                select(
                    func.count(case((approved, WageRecord.id))),
                    func.coalesce(func.sum(case((approved, WageRecord.total_amount))), zero),
                    func.coalesce(func.sum(case((pending, WageRecord.total_amount))), zero),
                ).where(WageRecord.labour_id == labour_id)
            )
        ).one()
        return LabourEarnings(
            labour_id=labour_id,
            approved_count=row[0],
            approved_total=Decimal(str(row[1])).quantize(zero),
            pending_total=Decimal(str(row[2])).quantize(zero),
        )
