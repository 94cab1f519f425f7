"""ORM models for the wage ledger."""

from wage_ledger.models.attendance import AttendanceRecord, Labour
from wage_ledger.models.base import Base, TimestampMixin
from wage_ledger.models.enums import AttendanceStatus, LedgerEntryType, ReviewStatus, WageType
from wage_ledger.models.ledger import AuditLog, LedgerAdjustment, LedgerEntry, MaterialBill
from wage_ledger.models.wages import WageRate, WageRecord

__all__ = [
    "AttendanceRecord",
    "AttendanceStatus",
    "AuditLog",
    "Base",
    "Labour",
    "LedgerAdjustment",
    "LedgerEntry",
    "LedgerEntryType",
    "MaterialBill",
    "ReviewStatus",
    "TimestampMixin",
    "WageRate",
    "WageRecord",
    "WageType",
]
