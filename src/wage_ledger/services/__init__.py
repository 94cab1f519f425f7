"""Wage ledger services."""

from wage_ledger.services.attendance_service import AttendanceIntake
from wage_ledger.services.audit import AuditRecorder
from wage_ledger.services.cost_rollup import CostRollup, PeriodSummary, WeeklyCost
from wage_ledger.services.ledger_service import (
    AdjustmentData,
    LedgerPage,
    LedgerQuery,
    LedgerRow,
    LedgerService,
)
from wage_ledger.services.material_service import MaterialBillService
from wage_ledger.services.state_machine import ReviewStateMachine
from wage_ledger.services.wage_rate_service import WageRateService
from wage_ledger.services.wage_service import (
    GenerationResult,
    ItemFailure,
    WageEngine,
    WageRequest,
)

__all__ = [
    "AdjustmentData",
    "AttendanceIntake",
    "AuditRecorder",
    "CostRollup",
    "GenerationResult",
    "ItemFailure",
    "LedgerPage",
    "LedgerQuery",
    "LedgerRow",
    "LedgerService",
    "MaterialBillService",
    "PeriodSummary",
    "ReviewStateMachine",
    "WageEngine",
    "WageRateService",
    "WageRequest",
    "WeeklyCost",
]
