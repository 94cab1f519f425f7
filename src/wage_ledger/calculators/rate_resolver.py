"""Configured wage rate lookup."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wage_ledger.exceptions import InvalidAmountError, RateNotConfiguredError
from wage_ledger.models import WageRate

CENTS = Decimal("0.01")

# wage_rate.rate and wage.rate are Numeric(12, 2)
MAX_RATE = Decimal("9999999999.99")


def parse_rate(raw: Any) -> Decimal:
    """Validate a pay rate and round it to the cents it is stored with.

    Raises:
        InvalidAmountError: If the rate is not a finite number in (0, MAX_RATE]
    """
    try:
        rate = Decimal(str(raw))
    except InvalidOperation:
        raise InvalidAmountError("Rate must be a positive number", rate=str(raw)) from None
    if not rate.is_finite() or rate <= 0 or rate > MAX_RATE:
        raise InvalidAmountError("Rate must be a positive number", rate=str(raw))
    rate = rate.quantize(CENTS, rounding=ROUND_HALF_UP)
    if rate <= 0:
        raise InvalidAmountError("Rate must be a positive number", rate=str(raw))
    return rate


class RateResolver:
    """Resolves the rate a labourer is paid on a project.

    Rate selection priority:
    1. An explicit rate supplied with the generation request
    2. The project's configured rate for the labourer's skill type
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._cache: dict[tuple[int, str], Decimal | None] = {}

    async def resolve(
        self,
        project_id: int,
        skill_type: str,
        rate_override: Decimal | None = None,
    ) -> Decimal:
        """Return the rate to apply.

        Raises:
            InvalidAmountError: If the override is not a positive rate
            RateNotConfiguredError: If no override is given and no rate is configured
        """
        if rate_override is not None:
            return parse_rate(rate_override)

        key = (project_id, skill_type)
        if key not in self._cache:
            result = await self.session.execute(
                select(WageRate.rate).where(
                    WageRate.project_id == project_id,
                    WageRate.skill_type == skill_type,
                )
            )
            self._cache[key] = result.scalar_one_or_none()

        rate = self._cache[key]
        if rate is None:
            raise RateNotConfiguredError(project_id, skill_type)
        return rate
