"""Tests for wage amount rules and rate resolution."""

from decimal import Decimal

import pytest

from wage_ledger.calculators import RateResolver, WageCalculator, parse_rate
from wage_ledger.exceptions import InvalidAmountError, InvalidWageTypeError, RateNotConfiguredError
from wage_ledger.models import WageType

from conftest import PROJECT_ID


class TestWageCalculator:
    """Test the pay rules per wage type."""

    def test_hourly_is_rate_times_hours(self):
        amount = WageCalculator.calculate("HOURLY", Decimal("50"), Decimal("8"))
        assert amount.total_amount == Decimal("400.00")
        assert amount.wage_type is WageType.HOURLY

    def test_daily_ignores_hours(self):
        amount = WageCalculator.calculate(WageType.DAILY, Decimal("750"), Decimal("4.5"))
        assert amount.total_amount == Decimal("750.00")

    def test_rounds_half_up_to_cents(self):
        amount = WageCalculator.calculate("HOURLY", Decimal("33.335"), Decimal("1"))
        assert amount.total_amount == Decimal("33.34")

    def test_fractional_hours(self):
        amount = WageCalculator.calculate("HOURLY", Decimal("45"), Decimal("7.5"))
        assert amount.total_amount == Decimal("337.50")

    def test_missing_hours_count_as_zero(self):
        amount = WageCalculator.calculate("HOURLY", Decimal("45"), None)
        assert amount.total_amount == Decimal("0.00")

    def test_lowercase_wage_type(self):
        assert WageCalculator.parse_wage_type("daily") is WageType.DAILY

    def test_piece_rate_has_no_rule(self):
        with pytest.raises(InvalidWageTypeError):
            WageCalculator.calculate("PIECE_RATE", Decimal("10"), Decimal("8"))

    @pytest.mark.parametrize("wage_type", ["WEEKLY", "", None])
    def test_unknown_wage_type(self, wage_type):
        with pytest.raises(InvalidWageTypeError) as exc_info:
            WageCalculator.parse_wage_type(wage_type)
        assert exc_info.value.code == "INVALID_WAGE_TYPE"

    def test_total_beyond_storable_amount(self):
        with pytest.raises(InvalidAmountError):
            WageCalculator.calculate("HOURLY", Decimal("9999999999.99"), Decimal("9999"))


class TestParseRate:
    """Rate overrides are validated and stored in cents."""

    def test_rounds_half_up_to_cents(self):
        assert parse_rate("12.345") == Decimal("12.35")

    @pytest.mark.parametrize("raw", ["0", "-10", "0.004", "NaN", "Infinity", "abc", "1e12"])
    def test_rejects_non_positive_or_unstorable(self, raw):
        with pytest.raises(InvalidAmountError) as exc_info:
            parse_rate(raw)
        assert exc_info.value.code == "INVALID_AMOUNT"


@pytest.mark.asyncio
class TestRateResolver:
    """Test configured rate lookup."""

    async def test_override_wins(self, session):
        resolver = RateResolver(session)
        rate = await resolver.resolve(PROJECT_ID, "MASON", Decimal("62.5"))
        assert rate == Decimal("62.50")

    async def test_invalid_override(self, session):
        with pytest.raises(InvalidAmountError):
            await RateResolver(session).resolve(PROJECT_ID, "MASON", Decimal("-1"))

    async def test_configured_rate(self, session, seed):
        await seed.rate("MASON", "55")
        resolver = RateResolver(session)
        assert await resolver.resolve(PROJECT_ID, "MASON") == Decimal("55.00")

    async def test_rate_is_per_project(self, session, seed):
        await seed.rate("MASON", "55", project_id=99)
        resolver = RateResolver(session)
        with pytest.raises(RateNotConfiguredError) as exc_info:
            await resolver.resolve(PROJECT_ID, "MASON")
        assert exc_info.value.skill_type == "MASON"
