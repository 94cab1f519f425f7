"""Review state machine with transition validation."""

from __future__ import annotations

from wage_ledger.exceptions import InvalidTransitionError
from wage_ledger.models.enums import ReviewStatus


class ReviewStateMachine:
    """State machine for wage record and material bill review.

    Allowed transitions:
    - PENDING → APPROVED
    - PENDING → REJECTED

    APPROVED and REJECTED are terminal.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        ReviewStatus.PENDING.value: [ReviewStatus.APPROVED.value, ReviewStatus.REJECTED.value],
        ReviewStatus.APPROVED.value: [],
        ReviewStatus.REJECTED.value: [],
    }

    # Transitions that materialize a ledger entry
    MATERIALIZING = {ReviewStatus.APPROVED.value}

    @staticmethod
    def _value(status: str | ReviewStatus) -> str:
        return status.value if isinstance(status, ReviewStatus) else str(status)

    @classmethod
    def can_transition(cls, from_status: str | ReviewStatus, to_status: str | ReviewStatus) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(cls._value(from_status), [])
        return cls._value(to_status) in allowed

    @classmethod
    def validate_transition(
        cls, from_status: str | ReviewStatus, to_status: str | ReviewStatus
    ) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            reason = "record is already reviewed" if cls.is_terminal(from_status) else None
            raise InvalidTransitionError(cls._value(from_status), cls._value(to_status), reason)

    @classmethod
    def is_terminal(cls, status: str | ReviewStatus) -> bool:
        """Check whether no transition leaves this status."""
        return not cls.VALID_TRANSITIONS.get(cls._value(status), [])

    @classmethod
    def materializes_ledger(cls, to_status: str | ReviewStatus) -> bool:
        """Check if entering this status creates a ledger entry."""
        return cls._value(to_status) in cls.MATERIALIZING

    @classmethod
    def get_next_statuses(cls, current_status: str | ReviewStatus) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(cls._value(current_status), [])
