"""Wage amount rules keyed by wage type."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from wage_ledger.exceptions import InvalidAmountError, InvalidWageTypeError
from wage_ledger.models.enums import WageType

CENTS = Decimal("0.01")

# wage.total_amount is Numeric(14, 2)
MAX_TOTAL = Decimal("999999999999.99")


def _hourly(rate: Decimal, worked_hours: Decimal) -> Decimal:
    return rate * worked_hours


def _daily(rate: Decimal, worked_hours: Decimal) -> Decimal:
    # worked_hours is informational for day-rated labour
    return rate


@dataclass(frozen=True)
class WageAmount:
    """Computed claim for one attendance record."""

    wage_type: WageType
    rate: Decimal
    worked_hours: Decimal
    total_amount: Decimal


class WageCalculator:
    """Computes wage totals from a rate and worked hours.

    Only wage types with a registered rule can be turned into claims;
    anything else raises InvalidWageTypeError.
    """

    RULES: dict[WageType, Callable[[Decimal, Decimal], Decimal]] = {
        WageType.HOURLY: _hourly,
        WageType.DAILY: _daily,
    }

    @classmethod
    def parse_wage_type(cls, wage_type: str | WageType | None) -> WageType:
        """Resolve a raw wage type into one that has a pay rule."""
        raw = wage_type.value if isinstance(wage_type, WageType) else str(wage_type).upper()
        try:
            parsed = WageType(raw)
        except ValueError:
            raise InvalidWageTypeError(wage_type) from None
        if parsed not in cls.RULES:
            raise InvalidWageTypeError(wage_type)
        return parsed

    @classmethod
    def calculate(
        cls,
        wage_type: str | WageType,
        rate: Decimal,
        worked_hours: Decimal | None,
    ) -> WageAmount:
        """Compute the total for a claim, rounded half-up to cents."""
        parsed = cls.parse_wage_type(wage_type)
        hours = Decimal(str(worked_hours or 0))
        rate = Decimal(str(rate))
        total = cls.RULES[parsed](rate, hours).quantize(CENTS, rounding=ROUND_HALF_UP)
        if total > MAX_TOTAL:
            raise InvalidAmountError("Wage total exceeds the storable amount", total=str(total))
        return WageAmount(wage_type=parsed, rate=rate, worked_hours=hours, total_amount=total)
