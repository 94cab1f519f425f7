"""Attendance intake: attendance records eligible for wage generation."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wage_ledger.models import AttendanceRecord, AttendanceStatus, Labour, WageRecord


class AttendanceIntake:
    """Read access to attendance owned by the intake collaborator."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_unprocessed(self, project_id: int) -> list[AttendanceRecord]:
        """Approved attendance for a project that has no wage record yet.

        Computed as an anti-join against wage.attendance_id, so a retried
        generation never sees an attendance record twice.
        """
        result = await self.session.execute(
            select(AttendanceRecord)
            .outerjoin(WageRecord, WageRecord.attendance_id == AttendanceRecord.id)
            .where(
                AttendanceRecord.project_id == project_id,
                AttendanceRecord.status == AttendanceStatus.APPROVED.value,
                WageRecord.id.is_(None),
            )
            .order_by(AttendanceRecord.attendance_date, AttendanceRecord.id)
        )
        return list(result.scalars().all())

    async def get_many(self, attendance_ids: list[int]) -> dict[int, AttendanceRecord]:
        """Fetch attendance records by id; missing ids are simply absent."""
        if not attendance_ids:
            return {}
        result = await self.session.execute(
            select(AttendanceRecord).where(AttendanceRecord.id.in_(set(attendance_ids)))
        )
        return {record.id: record for record in result.scalars().all()}

    async def get_labourers(self, labour_ids: set[int]) -> dict[int, Labour]:
        """Fetch labourers by id."""
        if not labour_ids:
            return {}
        result = await self.session.execute(select(Labour).where(Labour.id.in_(labour_ids)))
        return {labour.id: labour for labour in result.scalars().all()}
