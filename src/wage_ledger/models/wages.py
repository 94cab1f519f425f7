"""Wage rate configuration and wage claim models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from wage_ledger.models.base import Base, TimestampMixin
from wage_ledger.models.enums import REVIEW_STATUS_VALUES, WAGE_TYPE_VALUES, ReviewStatus


class WageRate(Base, TimestampMixin):
    """Configured pay rate for a skill on a project."""

    __tablename__ = "wage_rate"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, nullable=False)
    skill_type: Mapped[str] = mapped_column(String, nullable=False)
    rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint("project_id", "skill_type", name="wage_rate_project_skill_unique"),
        CheckConstraint("rate > 0", name="wage_rate_positive"),
    )


class WageRecord(Base, TimestampMixin):
    """A monetary claim derived from exactly one attendance record.

    Created PENDING at generation time; only the review transition
    mutates it. Rejected records are kept for audit.
    """

    __tablename__ = "wage"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    attendance_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("attendance.id", ondelete="RESTRICT"),
        nullable=False,
    )
    labour_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("labour.id", ondelete="RESTRICT"),
        nullable=False,
    )
    project_id: Mapped[int] = mapped_column(Integer, nullable=False)
    wage_type: Mapped[str] = mapped_column(String, nullable=False)
    rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    worked_hours: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=ReviewStatus.PENDING.value
    )
    approved_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("attendance_id", name="wage_attendance_unique"),
        CheckConstraint(f"status IN ({REVIEW_STATUS_VALUES})", name="wage_status_check"),
        CheckConstraint(f"wage_type IN ({WAGE_TYPE_VALUES})", name="wage_wage_type_check"),
        CheckConstraint("total_amount >= 0", name="wage_total_amount_check"),
        Index("ix_wage_project_status", "project_id", "status"),
    )
