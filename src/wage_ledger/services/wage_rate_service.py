"""Wage rate configuration per project and skill."""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wage_ledger.calculators.rate_resolver import parse_rate
from wage_ledger.context import Actor
from wage_ledger.exceptions import AlreadyExistsError, NotFoundError
from wage_ledger.models import WageRate
from wage_ledger.models.base import utcnow
from wage_ledger.services.audit import AuditRecorder

logger = logging.getLogger(__name__)


class WageRateService:
    """CRUD for the rates used when generating wages."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.audit = AuditRecorder(session)

    async def list_for_project(self, project_id: int) -> list[WageRate]:
        result = await self.session.execute(
            select(WageRate)
            .where(WageRate.project_id == project_id)
            .order_by(WageRate.skill_type)
        )
        return list(result.scalars().all())

    async def get(self, rate_id: int) -> WageRate:
        wage_rate = await self.session.get(WageRate, rate_id)
        if wage_rate is None:
            raise NotFoundError("WageRate", rate_id)
        return wage_rate

    async def create(
        self,
        project_id: int,
        skill_type: str,
        rate: Decimal | float | str,
        actor: Actor,
    ) -> WageRate:
        """Configure the rate for a skill on a project.

        Raises:
            AlreadyExistsError: If the project already has a rate for the skill
            InvalidAmountError: If the rate is not a positive number
        """
        value = parse_rate(rate)
        wage_rate = WageRate(
            project_id=project_id,
            skill_type=skill_type,
            rate=value,
            created_by=actor.id,
            created_at=utcnow(),
        )
        try:
            self.session.add(wage_rate)
            await self.session.flush()
            self.audit.record(
                entity_type="wage_rate",
                entity_id=wage_rate.id,
                category="WAGE",
                action="CREATE",
                actor=actor,
                project_id=project_id,
                after={"skill_type": skill_type, "rate": value},
            )
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise AlreadyExistsError(
                f"Wage rate already configured for project={project_id}, skill={skill_type}",
                project_id=project_id,
                skill_type=skill_type,
            ) from None
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Configured %s rate %s on project %s", skill_type, value, project_id)
        return wage_rate

    async def update(self, rate_id: int, rate: Decimal | float | str, actor: Actor) -> WageRate:
        """Change a configured rate. Existing wage records keep their rate."""
        value = parse_rate(rate)
        wage_rate = await self.get(rate_id)
        before = {"rate": wage_rate.rate}
        try:
            wage_rate.rate = value
            self.audit.record(
                entity_type="wage_rate",
                entity_id=wage_rate.id,
                category="WAGE",
                action="UPDATE",
                actor=actor,
                project_id=wage_rate.project_id,
                before=before,
                after={"rate": value},
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return wage_rate

    async def delete(self, rate_id: int, actor: Actor) -> None:
        wage_rate = await self.get(rate_id)
        try:
            self.audit.record(
                entity_type="wage_rate",
                entity_id=wage_rate.id,
                category="WAGE",
                action="DELETE",
                actor=actor,
                project_id=wage_rate.project_id,
                before={"skill_type": wage_rate.skill_type, "rate": wage_rate.rate},
            )
            await self.session.delete(wage_rate)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Deleted wage rate %s", rate_id)
