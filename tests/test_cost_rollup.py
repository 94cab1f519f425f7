"""Weekly cost and period summary tests."""

from datetime import date
from decimal import Decimal

import pytest

from wage_ledger.exceptions import InvalidDateRangeError
from wage_ledger.services.cost_rollup import CostRollup, week_start

from conftest import PROJECT_ID

pytestmark = pytest.mark.asyncio


class TestWeekStart:
    """ISO weeks start on Monday."""

    @pytest.mark.parametrize(
        "day,expected",
        [
            (date(2024, 3, 4), date(2024, 3, 4)),
            (date(2024, 3, 6), date(2024, 3, 4)),
            (date(2024, 3, 10), date(2024, 3, 4)),
            (date(2024, 1, 1), date(2024, 1, 1)),
            (date(2023, 12, 31), date(2023, 12, 25)),
        ],
    )
    async def test_week_start(self, day, expected):
        assert week_start(day) == expected


class TestWeeklyCost:
    """Wage and material costs per week."""

    async def test_empty_project(self, session):
        assert await CostRollup(session).weekly_cost(PROJECT_ID) == []

    async def test_buckets_are_sparse_and_ascending(self, session, seed):
        await seed.ledger_entries(
            (date(2024, 3, 20), "WAGE", "300.00"),
            (date(2024, 3, 4), "WAGE", "400.00"),
            (date(2024, 3, 10), "MATERIAL", "150.25"),
            (date(2024, 3, 6), "ADJUSTMENT", "-1000.00"),
        )

        weeks = await CostRollup(session).weekly_cost(PROJECT_ID)

        assert [(w.week_start, w.total_cost) for w in weeks] == [
            (date(2024, 3, 4), Decimal("550.25")),
            (date(2024, 3, 18), Decimal("300.00")),
        ]

    async def test_only_adjustments(self, session, seed):
        await seed.ledger_entries((date(2024, 3, 6), "ADJUSTMENT", "80.00"))
        assert await CostRollup(session).weekly_cost(PROJECT_ID) == []


class TestPeriodSummary:
    """Per-type totals."""

    async def test_totals_per_type(self, session, seed):
        await seed.ledger_entries(
            (date(2024, 3, 4), "WAGE", "400.00"),
            (date(2024, 3, 5), "WAGE", "100.00"),
            (date(2024, 3, 6), "MATERIAL", "250.00"),
            (date(2024, 4, 1), "ADJUSTMENT", "-50.00"),
        )

        summary = await CostRollup(session).period_summary(
            PROJECT_ID, date(2024, 3, 1), date(2024, 3, 31)
        )

        assert summary.totals == {
            "MATERIAL": Decimal("250.00"),
            "WAGE": Decimal("500.00"),
            "ADJUSTMENT": Decimal("0.00"),
        }
        assert summary.grand_total == Decimal("750.00")
        assert summary.entry_count == 3

    async def test_invalid_range(self, session):
        with pytest.raises(InvalidDateRangeError):
            await CostRollup(session).period_summary(PROJECT_ID, date(2024, 4, 1), date(2024, 3, 1))
