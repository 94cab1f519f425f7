"""Domain errors raised by the wage engine, ledger and cost rollup.

Every error carries a stable ``code`` so the HTTP layer and batch results
can report it without string matching.
"""

from __future__ import annotations

from datetime import date
from typing import Any


class WageLedgerError(Exception):
    """Base class for recoverable domain errors."""

    code = "WAGE_LEDGER_ERROR"

    def __init__(self, message: str, **context: Any):
        self.context = context
        super().__init__(message)


class NotFoundError(WageLedgerError):
    """Raised when an id does not resolve to a record."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found", entity=entity, id=entity_id)


class AlreadyExistsError(WageLedgerError):
    """Raised when a configuration row already exists for its natural key."""

    code = "ALREADY_EXISTS"


class AlreadyProcessedError(WageLedgerError):
    """Raised when an attendance record already has a wage claim."""

    code = "ALREADY_PROCESSED"

    def __init__(self, attendance_id: int):
        self.attendance_id = attendance_id
        super().__init__(
            f"Attendance {attendance_id} already has a wage record",
            attendance_id=attendance_id,
        )


class InvalidWageTypeError(WageLedgerError):
    """Raised when no pay rule exists for a wage type."""

    code = "INVALID_WAGE_TYPE"

    def __init__(self, wage_type: Any):
        self.wage_type = wage_type
        super().__init__(f"Unsupported wage type: {wage_type!r}", wage_type=str(wage_type))


class RateNotConfiguredError(WageLedgerError):
    """Raised when a labourer's skill has no configured rate on the project."""

    code = "RATE_NOT_CONFIGURED"

    def __init__(self, project_id: int, skill_type: str):
        self.project_id = project_id
        self.skill_type = skill_type
        super().__init__(
            f"Wage rate not configured for project={project_id}, skill={skill_type}",
            project_id=project_id,
            skill_type=skill_type,
        )


class InvalidTransitionError(WageLedgerError):
    """Raised when an invalid review transition is attempted."""

    code = "INVALID_TRANSITION"

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, from_status=from_status, to_status=to_status)


class InvalidDateRangeError(WageLedgerError):
    """Raised when a query's start date is after its end date."""

    code = "INVALID_DATE_RANGE"

    def __init__(self, start_date: date, end_date: date):
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"start_date {start_date} is after end_date {end_date}",
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
        )


class InvalidPageError(WageLedgerError):
    """Raised for out-of-range pagination parameters."""

    code = "INVALID_PAGE"

    def __init__(self, page: int, limit: int, max_limit: int):
        super().__init__(
            f"page must be >= 1 and limit between 1 and {max_limit} (got page={page}, limit={limit})",
            page=page,
            limit=limit,
        )


class InvalidAmountError(WageLedgerError):
    """Raised when a monetary amount is missing or not a finite number."""

    code = "INVALID_AMOUNT"


class StorageConflictError(WageLedgerError):
    """Raised when a uniqueness constraint rejects a ledger materialization."""

    code = "STORAGE_CONFLICT"

    def __init__(self, project_id: int, entry_type: str, reference_id: int):
        self.project_id = project_id
        self.entry_type = entry_type
        self.reference_id = reference_id
        super().__init__(
            f"Ledger entry {entry_type}#{reference_id} already exists for project {project_id}",
            project_id=project_id,
            entry_type=entry_type,
            reference_id=reference_id,
        )
