"""Audit trail writes for wage and ledger changes."""

from __future__ import annotations

import json
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wage_ledger.context import Actor
from wage_ledger.models import AuditLog


def _jsonable(data: dict[str, Any] | None) -> dict[str, Any] | None:
    if data is None:
        return None
    # Decimal and date values are stored in their string form
    return json.loads(json.dumps(data, default=str))


class AuditRecorder:
    """Adds audit rows to the caller's session.

    Rows are flushed with the change they describe, so they commit or
    roll back together with it.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def record(
        self,
        *,
        entity_type: str,
        entity_id: int,
        category: str,
        action: str,
        actor: Actor,
        project_id: int | None = None,
        before: dict[str, Any] | None = None,
        after: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Stage an audit row describing one change."""
        before_json = _jsonable(before)
        after_json = _jsonable(after)
        summary: dict[str, Any] = {"action": action, "before": before_json, "after": after_json}
        if before_json and after_json:
            summary["changed_fields"] = sorted(
                key for key in after_json if before_json.get(key) != after_json[key]
            )

        entry = AuditLog(
            entity_type=entity_type,
            entity_id=entity_id,
            category=category,
            action=action,
            actor_id=actor.id,
            actor_role=actor.role,
            project_id=project_id,
            change_summary=summary,
        )
        self.session.add(entry)
        return entry

    async def history(self, entity_type: str, entity_id: int) -> list[AuditLog]:
        """Audit rows for one entity, oldest first."""
        result = await self.session.execute(
            select(AuditLog)
            .where(AuditLog.entity_type == entity_type, AuditLog.entity_id == entity_id)
            .order_by(AuditLog.id)
        )
        return list(result.scalars().all())
