"""Status and type vocabularies shared by models and services."""

from __future__ import annotations

from enum import Enum


class ReviewStatus(str, Enum):
    """Review status of wage records and material bills."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class AttendanceStatus(str, Enum):
    """Approval status of an attendance record (owned by attendance intake)."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class WageType(str, Enum):
    """How a labourer is paid for an attendance record."""

    HOURLY = "HOURLY"
    DAILY = "DAILY"
    PIECE_RATE = "PIECE_RATE"


class LedgerEntryType(str, Enum):
    """Kinds of financial events folded into a project ledger."""

    MATERIAL = "MATERIAL"
    WAGE = "WAGE"
    ADJUSTMENT = "ADJUSTMENT"


def _values(enum_cls: type[Enum]) -> str:
    return ", ".join(f"'{member.value}'" for member in enum_cls)


REVIEW_STATUS_VALUES = _values(ReviewStatus)
ATTENDANCE_STATUS_VALUES = _values(AttendanceStatus)
WAGE_TYPE_VALUES = _values(WageType)
LEDGER_ENTRY_TYPE_VALUES = _values(LedgerEntryType)
