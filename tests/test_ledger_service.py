"""Ledger aggregation tests.

Running totals must always reflect the full project history in
(entry_date, id) order, whatever filters or page narrow the result.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from wage_ledger.exceptions import (
    InvalidAmountError,
    InvalidDateRangeError,
    InvalidPageError,
    StorageConflictError,
)
from wage_ledger.models import AuditLog, LedgerAdjustment, LedgerEntry, LedgerEntryType
from wage_ledger.services.ledger_service import AdjustmentData, LedgerQuery, LedgerService

from conftest import OTHER_PROJECT_ID, PROJECT_ID

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def mixed_ledger(seed):
    """Five entries over three dates; two share 2024-01-02."""
    return await seed.ledger_entries(
        (date(2024, 1, 1), "MATERIAL", "100.00"),
        (date(2024, 1, 2), "WAGE", "50.00"),
        (date(2024, 1, 2), "ADJUSTMENT", "-20.00"),
        (date(2024, 1, 5), "WAGE", "75.50"),
        (date(2024, 1, 3), "MATERIAL", "10.00"),
    )


class TestRunningTotals:
    """Running totals over the unfiltered sequence."""

    async def test_ordered_by_date_then_id(self, session, mixed_ledger):
        page = await LedgerService(session).query(PROJECT_ID)

        assert [row.id for row in page.entries] == [
            mixed_ledger[0].id,
            mixed_ledger[1].id,
            mixed_ledger[2].id,
            mixed_ledger[4].id,
            mixed_ledger[3].id,
        ]
        assert [row.running_total for row in page.entries] == [
            Decimal("100.00"),
            Decimal("150.00"),
            Decimal("130.00"),
            Decimal("140.00"),
            Decimal("215.50"),
        ]

    async def test_last_total_equals_balance(self, session, mixed_ledger):
        service = LedgerService(session)
        page = await service.query(PROJECT_ID)

        assert page.entries[-1].running_total == await service.project_balance(PROJECT_ID)
        assert page.entries[-1].running_total == sum(row.amount for row in page.entries)

    async def test_type_filter_keeps_full_history_totals(self, session, mixed_ledger):
        page = await LedgerService(session).query(
            PROJECT_ID, LedgerQuery(entry_type=LedgerEntryType.WAGE)
        )

        assert [row.type for row in page.entries] == ["WAGE", "WAGE"]
        assert [row.running_total for row in page.entries] == [
            Decimal("150.00"),
            Decimal("215.50"),
        ]
        assert page.pagination.total == 2

    async def test_date_window_carries_opening_balance(self, session, mixed_ledger):
        page = await LedgerService(session).query(
            PROJECT_ID, LedgerQuery(start_date=date(2024, 1, 2), end_date=date(2024, 1, 3))
        )

        assert page.opening_balance == Decimal("100.00")
        assert [row.running_total for row in page.entries] == [
            Decimal("150.00"),
            Decimal("130.00"),
            Decimal("140.00"),
        ]

    async def test_pagination_keeps_totals(self, session, mixed_ledger):
        service = LedgerService(session)

        second = await service.query(PROJECT_ID, LedgerQuery(page=2, limit=2))

        assert [row.running_total for row in second.entries] == [
            Decimal("130.00"),
            Decimal("140.00"),
        ]
        assert second.pagination.total == 5
        assert second.pagination.total_pages == 3

    async def test_page_past_end_is_empty(self, session, mixed_ledger):
        page = await LedgerService(session).query(PROJECT_ID, LedgerQuery(page=9, limit=2))
        assert page.entries == []
        assert page.pagination.total == 5

    async def test_projects_are_separate(self, session, seed, mixed_ledger):
        await seed.ledger_entries((date(2024, 1, 1), "WAGE", "999.00"), project_id=OTHER_PROJECT_ID)

        page = await LedgerService(session).query(PROJECT_ID)

        assert page.entries[-1].running_total == Decimal("215.50")

    async def test_empty_project(self, session):
        page = await LedgerService(session).query(404)
        assert page.entries == []
        assert page.pagination.total == 0
        assert page.pagination.total_pages == 0


class TestQueryValidation:
    """Rejected query parameters."""

    async def test_start_after_end(self, session):
        with pytest.raises(InvalidDateRangeError):
            await LedgerService(session).query(
                PROJECT_ID, LedgerQuery(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))
            )

    @pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (1, 201), (-1, 10)])
    async def test_bad_pagination(self, session, page, limit):
        with pytest.raises(InvalidPageError):
            await LedgerService(session).query(PROJECT_ID, LedgerQuery(page=page, limit=limit))

    async def test_configured_max_limit(self, session):
        with pytest.raises(InvalidPageError):
            await LedgerService(session, max_limit=5).query(PROJECT_ID, LedgerQuery(limit=6))


class TestAdjustments:
    """Manual adjustments and their ledger entries."""

    async def test_records_adjustment_and_entry(self, session, session_factory, manager):
        recorded = await LedgerService(session).record_adjustment(
            PROJECT_ID,
            AdjustmentData(
                adjustment_date=date(2024, 1, 10),
                description="Scaffolding refund",
                amount="-250.5",
                notes="Supplier credit note",
            ),
            manager,
        )

        assert recorded.adjustment.amount == Decimal("-250.50")
        assert recorded.adjustment.category == "ADJUSTMENT"
        entry = recorded.entry
        assert entry.entry_type == "ADJUSTMENT"
        assert entry.reference_id == recorded.adjustment.id
        assert entry.entry_date == date(2024, 1, 10)
        assert entry.amount == Decimal("-250.50")
        assert entry.approved_by == manager.id

        async with session_factory() as fresh:
            assert await fresh.scalar(select(func.count(AuditLog.id))) == 1

    async def test_custom_category(self, session, manager):
        recorded = await LedgerService(session).record_adjustment(
            PROJECT_ID,
            AdjustmentData(
                adjustment_date=date(2024, 1, 10),
                description="Transport",
                amount=1200,
                category="LOGISTICS",
            ),
            manager,
        )
        assert recorded.entry.category == "LOGISTICS"

    @pytest.mark.parametrize("amount", ["abc", None, "NaN", "Infinity", True])
    async def test_invalid_amount(self, session, session_factory, manager, amount):
        with pytest.raises(InvalidAmountError) as exc_info:
            await LedgerService(session).record_adjustment(
                PROJECT_ID,
                AdjustmentData(adjustment_date=date(2024, 1, 10), description="x", amount=amount),
                manager,
            )

        assert str(exc_info.value) == "Invalid amount"
        async with session_factory() as fresh:
            assert await fresh.scalar(select(func.count(LedgerAdjustment.id))) == 0

    async def test_entry_failure_discards_adjustment(
        self, session, session_factory, manager, monkeypatch
    ):
        async def conflict(self, **kwargs):
            raise StorageConflictError(kwargs["project_id"], "ADJUSTMENT", kwargs["reference_id"])

        monkeypatch.setattr(LedgerService, "_materialize", conflict)

        with pytest.raises(StorageConflictError):
            await LedgerService(session).record_adjustment(
                PROJECT_ID,
                AdjustmentData(adjustment_date=date(2024, 1, 10), description="x", amount="5"),
                manager,
            )

        async with session_factory() as fresh:
            assert await fresh.scalar(select(func.count(LedgerAdjustment.id))) == 0
            assert await fresh.scalar(select(func.count(LedgerEntry.id))) == 0


class TestMaterialization:
    """Exactly-once ledger entries per source record."""

    async def test_second_materialization_conflicts(self, session, seed, manager):
        bill = await seed.material_bill("1200.00", "CEMENT")
        service = LedgerService(session)
        approved_at = datetime(2024, 2, 1, 9, 30, tzinfo=timezone.utc)

        entry = await service.record_material_approval(bill, manager, approved_at)
        await session.commit()

        assert entry.description == f"Material Bill #{bill.id} - CEMENT"
        assert entry.entry_date == date(2024, 2, 1)

        with pytest.raises(StorageConflictError):
            await service.record_material_approval(bill, manager, approved_at)
        await session.rollback()

        entries = await service.entries_for_source(PROJECT_ID, LedgerEntryType.MATERIAL, bill.id)
        assert len(entries) == 1
