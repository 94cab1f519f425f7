"""Wage rate configuration and material bill review tests."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import select

from wage_ledger.exceptions import (
    AlreadyExistsError,
    InvalidAmountError,
    InvalidTransitionError,
    NotFoundError,
)
from wage_ledger.models import LedgerEntry, MaterialBill
from wage_ledger.services.audit import AuditRecorder
from wage_ledger.services.material_service import MaterialBillService
from wage_ledger.services.wage_rate_service import WageRateService
from wage_ledger.services.wage_service import WageEngine

from conftest import PROJECT_ID

pytestmark = pytest.mark.asyncio


class TestWageRates:
    """CRUD over (project, skill) rates."""

    async def test_create_and_list(self, session, manager):
        service = WageRateService(session)
        await service.create(PROJECT_ID, "PAINTER", "45", manager)
        await service.create(PROJECT_ID, "MASON", Decimal("60"), manager)
        await service.create(99, "MASON", "70", manager)

        rates = await service.list_for_project(PROJECT_ID)

        assert [(r.skill_type, r.rate) for r in rates] == [
            ("MASON", Decimal("60.00")),
            ("PAINTER", Decimal("45.00")),
        ]
        assert rates[0].created_by == manager.id

    async def test_duplicate_skill(self, session, manager):
        service = WageRateService(session)
        await service.create(PROJECT_ID, "MASON", "60", manager)

        with pytest.raises(AlreadyExistsError):
            await service.create(PROJECT_ID, "MASON", "65", manager)

        assert len(await service.list_for_project(PROJECT_ID)) == 1

    @pytest.mark.parametrize("rate", ["0", "-5", "abc", "0.001", "1e11"])
    async def test_rate_must_be_positive(self, session, manager, rate):
        with pytest.raises(InvalidAmountError):
            await WageRateService(session).create(PROJECT_ID, "MASON", rate, manager)

    async def test_update_changes_future_wages_only(self, session, seed, manager):
        labour = await seed.labour()
        first = await seed.attendance(labour, worked_hours="8")
        second = await seed.attendance(labour, worked_hours="8")
        rates = WageRateService(session)
        engine = WageEngine(session)
        wage_rate = await rates.create(PROJECT_ID, "MASON", "50", manager)
        before = await engine.generate([first.id], manager)

        updated = await rates.update(wage_rate.id, "55", manager)
        after = await engine.generate([second.id], manager)

        assert updated.rate == Decimal("55.00")
        assert before.succeeded[0].total_amount == Decimal("400.00")
        assert after.succeeded[0].total_amount == Decimal("440.00")
        history = await AuditRecorder(session).history("wage_rate", wage_rate.id)
        assert [h.action for h in history] == ["CREATE", "UPDATE"]

    async def test_delete(self, session, manager):
        service = WageRateService(session)
        wage_rate = await service.create(PROJECT_ID, "MASON", "50", manager)

        await service.delete(wage_rate.id, manager)

        assert await service.list_for_project(PROJECT_ID) == []
        with pytest.raises(NotFoundError):
            await service.delete(wage_rate.id, manager)


class TestMaterialReview:
    """Material bills follow the same review rules as wages."""

    async def test_approval_materializes_entry(self, session, session_factory, seed, manager):
        bill = await seed.material_bill("1200.00", "CEMENT")
        approved_at = datetime(2024, 2, 14, 8, 0, tzinfo=timezone.utc)

        reviewed = await MaterialBillService(session).review(
            bill.id, "APPROVED", manager, reviewed_at=approved_at
        )

        assert reviewed.status == "APPROVED"
        async with session_factory() as fresh:
            entries = (await fresh.execute(select(LedgerEntry))).scalars().all()
        assert len(entries) == 1
        assert entries[0].entry_type == "MATERIAL"
        assert entries[0].reference_id == bill.id
        assert entries[0].amount == Decimal("1200.00")
        assert entries[0].entry_date == date(2024, 2, 14)
        assert entries[0].category == "CEMENT"

    async def test_rejection_and_terminal_state(self, session, session_factory, seed, manager):
        bill = await seed.material_bill()
        service = MaterialBillService(session)

        await service.review(bill.id, "REJECTED", manager)
        with pytest.raises(InvalidTransitionError):
            await service.review(bill.id, "APPROVED", manager)

        async with session_factory() as fresh:
            stored = await fresh.get(MaterialBill, bill.id)
            assert stored.status == "REJECTED"
            assert (await fresh.execute(select(LedgerEntry))).scalars().all() == []

    async def test_unknown_bill(self, session, manager):
        with pytest.raises(NotFoundError):
            await MaterialBillService(session).review(555, "APPROVED", manager)

    async def test_vanished_bill_after_update_raises_not_found(
        self, session, session_factory, seed, manager, monkeypatch
    ):
        bill = await seed.material_bill()

        async def missing(*args, **kwargs):
            return None

        monkeypatch.setattr(session, "get", missing)

        with pytest.raises(NotFoundError):
            await MaterialBillService(session).review(bill.id, "APPROVED", manager)

        async with session_factory() as fresh:
            stored = await fresh.get(MaterialBill, bill.id)
            assert stored.status == "PENDING"
            assert (await fresh.execute(select(LedgerEntry))).scalars().all() == []
