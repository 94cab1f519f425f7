"""Wage calculation components."""

from wage_ledger.calculators.rate_resolver import RateResolver, parse_rate
from wage_ledger.calculators.wage_calculator import WageAmount, WageCalculator

__all__ = [
    "RateResolver",
    "parse_rate",
    "WageAmount",
    "WageCalculator",
]
