"""Labour and attendance models (owned by the attendance intake side)."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from wage_ledger.models.base import Base, TimestampMixin
from wage_ledger.models.enums import ATTENDANCE_STATUS_VALUES, WAGE_TYPE_VALUES, AttendanceStatus


class Labour(Base, TimestampMixin):
    """A labourer who can be assigned to projects."""

    __tablename__ = "labour"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    skill_type: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)


class AttendanceRecord(Base, TimestampMixin):
    """A labourer's presence on a project for one work period.

    Immutable from the wage engine's point of view.
    """

    __tablename__ = "attendance"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    labour_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("labour.id", ondelete="RESTRICT"),
        nullable=False,
    )
    project_id: Mapped[int] = mapped_column(Integer, nullable=False)
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False)
    worked_hours: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=0)
    wage_type: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=AttendanceStatus.APPROVED.value
    )

    __table_args__ = (
        CheckConstraint(f"wage_type IN ({WAGE_TYPE_VALUES})", name="attendance_wage_type_check"),
        CheckConstraint(f"status IN ({ATTENDANCE_STATUS_VALUES})", name="attendance_status_check"),
        CheckConstraint("worked_hours >= 0", name="attendance_worked_hours_check"),
        Index("ix_attendance_project", "project_id", "attendance_date"),
    )
