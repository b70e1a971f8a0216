"""Payment status state machine with transition validation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

from payroll_records.errors import PayrollError, ValidationError

if TYPE_CHECKING:
    from payroll_records.models import PayrollRecord


class PaymentStatus(str, Enum):
    """Payroll payment status values."""

    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


def parse_payment_status(value: str) -> PaymentStatus:
    """Parse a status filter or request value.

    Raises:
        ValidationError: If the value is not a payment status
    """
    try:
        return PaymentStatus(value)
    except ValueError as e:
        raise ValidationError("payment_status", f"unknown payment status '{value}'") from e


class InvalidTransitionError(PayrollError):
    """Raised when an invalid status transition is attempted."""

    code = "INVALID_TRANSITION"

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = str(getattr(from_status, "value", from_status))
        self.to_status = str(getattr(to_status, "value", to_status))
        self.reason = reason
        msg = f"Invalid transition from '{self.from_status}' to '{self.to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


@dataclass(frozen=True)
class PaymentTransition:
    """Outcome of a transition: the new status and its payment date."""

    status: PaymentStatus
    payment_date: date | None


class PaymentLifecycle:
    """State machine for payroll payment status.

    Allowed transitions:
    - PENDING → PAID (payment date set, today unless given)
    - PENDING → CANCELLED (payment date cleared)

    PAID and CANCELLED are terminal. PENDING is only entered on creation;
    reopening a payroll means creating a new record.
    """

    INITIAL = PaymentStatus.PENDING

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PaymentStatus.PENDING: [PaymentStatus.PAID, PaymentStatus.CANCELLED],
        PaymentStatus.PAID: [],  # Terminal state
        PaymentStatus.CANCELLED: [],  # Terminal state
    }

    # Statuses where payroll inputs may still be edited
    INPUTS_MUTABLE = {PaymentStatus.PENDING}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            reason = None
            if from_status in (PaymentStatus.PAID, PaymentStatus.CANCELLED):
                reason = f"'{PaymentStatus(from_status).value}' is terminal"
            elif to_status == PaymentStatus.PENDING:
                reason = "PENDING is only set on creation"
            raise InvalidTransitionError(from_status, to_status, reason)

    @classmethod
    def transition(
        cls,
        from_status: str,
        to_status: str,
        payment_date: date | None = None,
        today: date | None = None,
    ) -> PaymentTransition:
        """Compute the status and payment date after a transition.

        Raises:
            InvalidTransitionError: If the transition is not allowed
        """
        cls.validate_transition(from_status, to_status)
        status = PaymentStatus(to_status)
        if status == PaymentStatus.PAID:
            return PaymentTransition(status, payment_date or today or date.today())
        return PaymentTransition(status, None)

    @classmethod
    def apply(
        cls,
        record: PayrollRecord,
        to_status: str,
        payment_date: date | None = None,
        today: date | None = None,
    ) -> PaymentTransition:
        """Transition a payroll record, assigning status and payment date together."""
        outcome = cls.transition(record.payment_status, to_status, payment_date, today)
        record.payment_status = outcome.status.value
        record.payment_date = outcome.payment_date
        return outcome

    @classmethod
    def can_modify_inputs(cls, status: str) -> bool:
        """Check if payroll inputs can be edited in this status."""
        return status in cls.INPUTS_MUTABLE

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.VALID_TRANSITIONS.get(status, [])

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])
