"""Material bill review."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from wage_ledger.context import Actor
from wage_ledger.exceptions import InvalidTransitionError, NotFoundError
from wage_ledger.models import MaterialBill, ReviewStatus
from wage_ledger.models.base import utcnow
from wage_ledger.services.audit import AuditRecorder
from wage_ledger.services.ledger_service import LedgerService
from wage_ledger.services.state_machine import ReviewStateMachine
from wage_ledger.services.wage_service import parse_decision

logger = logging.getLogger(__name__)


class MaterialBillService:
    """Reviews material bills submitted by site staff.

    Follows the same rules as wage review: PENDING is the only reviewable
    status, and approval writes the MATERIAL ledger entry atomically.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.ledger = LedgerService(session)
        self.audit = AuditRecorder(session)

    async def get(self, bill_id: int) -> MaterialBill:
        bill = await self.session.get(MaterialBill, bill_id)
        if bill is None:
            raise NotFoundError("MaterialBill", bill_id)
        return bill

    async def review(
        self,
        bill_id: int,
        decision: ReviewStatus | str,
        actor: Actor,
        *,
        reviewed_at: datetime | None = None,
    ) -> MaterialBill:
        """Approve or reject a PENDING material bill."""
        target = parse_decision(decision)
        ReviewStateMachine.validate_transition(ReviewStatus.PENDING, target)
        reviewed_at = reviewed_at or utcnow()

        try:
            updated = await self.session.execute(
                update(MaterialBill)
                .where(
                    MaterialBill.id == bill_id,
                    MaterialBill.status == ReviewStatus.PENDING.value,
                )
                .values(status=target.value, approved_by=actor.id, approved_at=reviewed_at)
                .execution_options(synchronize_session=False)
            )
            if updated.rowcount == 0:
                current = await self.session.get(MaterialBill, bill_id, populate_existing=True)
                if current is None:
                    raise NotFoundError("MaterialBill", bill_id)
                ReviewStateMachine.validate_transition(current.status, target)
                raise InvalidTransitionError(current.status, target.value)

            bill = await self.session.get(MaterialBill, bill_id, populate_existing=True)
            if bill is None:
                raise NotFoundError("MaterialBill", bill_id)

            if ReviewStateMachine.materializes_ledger(target):
                await self.ledger.record_material_approval(bill, actor, reviewed_at)

            self.audit.record(
                entity_type="material_bill",
                entity_id=bill.id,
                category="MATERIAL",
                action="APPROVE" if target is ReviewStatus.APPROVED else "REJECT",
                actor=actor,
                project_id=bill.project_id,
                before={"status": ReviewStatus.PENDING.value},
                after={"status": target.value, "total_amount": bill.total_amount},
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Material bill %s %s by %s", bill_id, target.value, actor.id)
        return bill
