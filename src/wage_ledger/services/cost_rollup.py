"""Cost rollups over the project ledger."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wage_ledger.exceptions import InvalidDateRangeError
from wage_ledger.models import LedgerEntry, LedgerEntryType

# Adjustments are corrections, not spend
COST_TYPES = (LedgerEntryType.WAGE.value, LedgerEntryType.MATERIAL.value)


def week_start(day: date) -> date:
    """Monday of the ISO week containing day."""
    return day - timedelta(days=day.weekday())


@dataclass(frozen=True)
class WeeklyCost:
    week_start: date
    total_cost: Decimal


@dataclass(frozen=True)
class PeriodSummary:
    """Ledger totals for a project over an optional date window."""

    project_id: int
    start_date: date | None
    end_date: date | None
    totals: dict[str, Decimal]
    entry_count: int

    @property
    def grand_total(self) -> Decimal:
        return sum(self.totals.values(), Decimal("0"))


class CostRollup:
    """Aggregates ledger entries into cost figures."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def weekly_cost(self, project_id: int) -> list[WeeklyCost]:
        """Wage and material cost per week, oldest week first.

        Weeks start on Monday. Weeks without cost entries are omitted, so
        a project without entries yields an empty list.
        """
        result = await self.session.execute(
            select(LedgerEntry.entry_date, LedgerEntry.amount).where(
                LedgerEntry.project_id == project_id,
                LedgerEntry.entry_type.in_(COST_TYPES),
            )
        )

        buckets: dict[date, Decimal] = defaultdict(lambda: Decimal("0"))
        for entry_date, amount in result.all():
            buckets[week_start(entry_date)] += Decimal(str(amount))

        return [WeeklyCost(week_start=week, total_cost=buckets[week]) for week in sorted(buckets)]

    async def period_summary(
        self,
        project_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> PeriodSummary:
        """Totals per entry type for a period; every type is always present."""
        if start_date is not None and end_date is not None and start_date > end_date:
            raise InvalidDateRangeError(start_date, end_date)

        stmt = select(
            LedgerEntry.entry_type,
            func.coalesce(func.sum(LedgerEntry.amount), 0),
            func.count(LedgerEntry.id),
        ).where(LedgerEntry.project_id == project_id)
        if start_date is not None:
            stmt = stmt.where(LedgerEntry.entry_date >= start_date)
        if end_date is not None:
            stmt = stmt.where(LedgerEntry.entry_date <= end_date)
        result = await self.session.execute(stmt.group_by(LedgerEntry.entry_type))

        totals = {entry_type.value: Decimal("0.00") for entry_type in LedgerEntryType}
        count = 0
        for entry_type, total, rows in result.all():
            totals[entry_type] = Decimal(str(total)).quantize(Decimal("0.01"))
            count += rows

        return PeriodSummary(
            project_id=project_id,
            start_date=start_date,
            end_date=end_date,
            totals=totals,
            entry_count=count,
        )
