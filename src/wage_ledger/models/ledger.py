"""Project ledger models: material bills, adjustments, entries and audit log."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from wage_ledger.models.base import Base, TimestampMixin
from wage_ledger.models.enums import LEDGER_ENTRY_TYPE_VALUES, REVIEW_STATUS_VALUES, ReviewStatus


class MaterialBill(Base, TimestampMixin):
    """A purchase bill for project materials awaiting manager review."""

    __tablename__ = "material_bill"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=ReviewStatus.PENDING.value
    )
    approved_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(f"status IN ({REVIEW_STATUS_VALUES})", name="material_bill_status_check"),
        CheckConstraint("total_amount >= 0", name="material_bill_amount_check"),
    )


class LedgerAdjustment(Base, TimestampMixin):
    """A manually entered ledger correction."""

    __tablename__ = "ledger_adjustment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, nullable=False)
    adjustment_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False, default="ADJUSTMENT")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[int] = mapped_column(Integer, nullable=False)


class LedgerEntry(Base):
    """One financial event contributing to a project's balance.

    Rows are materialized from approved wages, approved material bills and
    adjustments. The running total is derived at read time and never stored.
    """

    __tablename__ = "ledger_entry"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, nullable=False)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    entry_type: Mapped[str] = mapped_column(String, nullable=False)
    reference_id: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    category: Mapped[str | None] = mapped_column(String, nullable=True)
    approved_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "project_id",
            "entry_type",
            "reference_id",
            name="ledger_entry_source_unique",
        ),
        CheckConstraint(
            f"entry_type IN ({LEDGER_ENTRY_TYPE_VALUES})",
            name="ledger_entry_type_check",
        ),
        Index("ix_ledger_entry_project_order", "project_id", "entry_date", "id"),
    )


class AuditLog(Base, TimestampMixin):
    """Append-only record of who changed what in the wage and ledger flows."""

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_type: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    action: Mapped[str] = mapped_column(String, nullable=False)
    actor_id: Mapped[int] = mapped_column(Integer, nullable=False)
    actor_role: Mapped[str] = mapped_column(String, nullable=False)
    project_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    change_summary: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )
