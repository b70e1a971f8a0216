"""Payroll record service: create, edit and settle payroll records."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_records.calculators.salary import apply_breakdown, calculate_salary
from payroll_records.calculators.types import (
    DEFAULT_OVERTIME_RATE,
    SalaryBreakdown,
    SalaryInputs,
)
from payroll_records.database import lock_employee_payroll
from payroll_records.errors import NotFoundError, ValidationError
from payroll_records.models import PayrollRecord
from payroll_records.services.period_conflicts import PeriodConflictChecker
from payroll_records.services.state_machine import (
    InvalidTransitionError,
    PaymentLifecycle,
    PaymentStatus,
    parse_payment_status,
)
from payroll_records.store import RecordStore
from payroll_records.validation import validate_payroll_amounts, validate_payroll_inputs

logger = logging.getLogger(__name__)

AMOUNT_FIELDS = (
    "base_salary",
    "overtime_hours",
    "overtime_rate",
    "bonus",
    "allowances",
    "tax_deduction",
    "insurance_deduction",
    "other_deductions",
)

AMOUNT_DEFAULTS: dict[str, Decimal] = {
    "overtime_hours": Decimal("0"),
    "overtime_rate": DEFAULT_OVERTIME_RATE,
    "bonus": Decimal("0"),
    "allowances": Decimal("0"),
    "tax_deduction": Decimal("0"),
    "insurance_deduction": Decimal("0"),
    "other_deductions": Decimal("0"),
}


def preview_salary(**amounts: Any) -> SalaryBreakdown:
    """Compute derived salary fields for unsaved inputs.

    Raises:
        ValidationError: If an amount is missing, not numeric or negative
    """
    values = {**AMOUNT_DEFAULTS, **{k: v for k, v in amounts.items() if v is not None}}
    parsed = validate_payroll_amounts(values)
    if "base_salary" not in parsed:
        raise ValidationError("base_salary", "is required")
    return calculate_salary(SalaryInputs.from_values(**parsed))


class PayrollService:
    """Service for the payroll record lifecycle.

    Operations:
    - create_record: validate, compute, check period overlap, persist
    - update_record: same as create, excluding the record itself from the
      overlap check; only while PENDING
    - mark_paid / cancel: payment status transitions
    - get_record / list_records: reads with derived fields recomputed

    Each operation works inside the caller's session; the overlap check and
    the write share its transaction under the employee's payroll lock.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.store = RecordStore(session)
        self.conflict_checker = PeriodConflictChecker(self.store)

    async def create_record(
        self,
        employee_id: int,
        pay_period_start: date,
        pay_period_end: date,
        base_salary: Decimal | None = None,
        overtime_hours: Decimal | None = None,
        overtime_rate: Decimal | None = None,
        bonus: Decimal | None = None,
        allowances: Decimal | None = None,
        tax_deduction: Decimal | None = None,
        insurance_deduction: Decimal | None = None,
        other_deductions: Decimal | None = None,
        created_by: int | None = None,
    ) -> PayrollRecord:
        """Create a PENDING payroll record.

        The base salary defaults to a snapshot of the employee's current base
        salary.

        Raises:
            ValidationError: On invalid dates or amounts
            NotFoundError: If the employee or creator does not exist
            ConflictError: If the period overlaps another record of the employee
        """
        employee = await self.store.find_employee_by_id(employee_id)
        if employee is None:
            raise NotFoundError("employee", employee_id)
        if created_by is not None and await self.store.find_user_by_id(created_by) is None:
            raise NotFoundError("user", created_by)

        supplied = {
            "base_salary": base_salary if base_salary is not None else employee.base_salary,
            "overtime_hours": overtime_hours,
            "overtime_rate": overtime_rate,
            "bonus": bonus,
            "allowances": allowances,
            "tax_deduction": tax_deduction,
            "insurance_deduction": insurance_deduction,
            "other_deductions": other_deductions,
        }
        amounts = self._merge_amounts(AMOUNT_DEFAULTS, supplied)
        parsed = validate_payroll_inputs(pay_period_start, pay_period_end, amounts)

        await lock_employee_payroll(self.session, employee_id)
        await self.conflict_checker.ensure_no_conflict(
            employee_id, pay_period_start, pay_period_end
        )

        record = PayrollRecord(
            employee=employee,
            pay_period_start=pay_period_start,
            pay_period_end=pay_period_end,
            payment_status=PaymentLifecycle.INITIAL.value,
            payment_date=None,
            created_by=created_by,
            **parsed,
        )
        apply_breakdown(record)
        await self.store.add(record, "payroll_record")

        logger.info(
            "Created payroll record %s for employee %s (%s..%s), net %s",
            record.payroll_id,
            employee_id,
            pay_period_start,
            pay_period_end,
            record.net_salary,
        )
        return record

    async def update_record(
        self,
        payroll_id: int,
        employee_id: int | None = None,
        pay_period_start: date | None = None,
        pay_period_end: date | None = None,
        **amounts: Any,
    ) -> PayrollRecord:
        """Edit a PENDING record; unspecified fields keep their values.

        Raises:
            ValidationError: On invalid dates or amounts
            NotFoundError: If the record or new employee does not exist
            InvalidTransitionError: If the record is no longer PENDING
            ConflictError: If the new period overlaps another record
        """
        unknown = set(amounts) - set(AMOUNT_FIELDS)
        if unknown:
            raise TypeError(f"Unknown payroll fields: {sorted(unknown)}")

        record = await self._get_or_raise(payroll_id)
        if not PaymentLifecycle.can_modify_inputs(record.payment_status):
            raise InvalidTransitionError(
                record.payment_status,
                record.payment_status,
                "payroll inputs can only be edited while PENDING",
            )

        target_employee_id = employee_id if employee_id is not None else record.employee_id
        new_employee = None
        if target_employee_id != record.employee_id:
            new_employee = await self.store.find_employee_by_id(target_employee_id)
            if new_employee is None:
                raise NotFoundError("employee", target_employee_id)

        start = pay_period_start or record.pay_period_start
        end = pay_period_end or record.pay_period_end
        current = {name: getattr(record, name) for name in AMOUNT_FIELDS}
        parsed = validate_payroll_inputs(start, end, self._merge_amounts(current, amounts))

        await lock_employee_payroll(self.session, target_employee_id)
        await self.conflict_checker.ensure_no_conflict(
            target_employee_id, start, end, exclude_record_id=record.payroll_id
        )

        if new_employee is not None:
            record.employee = new_employee
        record.pay_period_start = start
        record.pay_period_end = end
        for name, value in parsed.items():
            setattr(record, name, value)
        apply_breakdown(record)
        await self.store.flush("payroll_record")

        logger.info("Updated payroll record %s", payroll_id)
        return record

    async def get_record(self, payroll_id: int) -> PayrollRecord:
        """Load a record with its derived fields recomputed."""
        record = await self._get_or_raise(payroll_id)
        apply_breakdown(record)
        return record

    async def list_records(
        self,
        employee_id: int | None = None,
        status: str | None = None,
        period_start: date | None = None,
        period_end: date | None = None,
    ) -> list[PayrollRecord]:
        """List records, newest period first, with derived fields recomputed."""
        if status is not None:
            status = parse_payment_status(status).value
        records = await self.store.list_payroll_records(
            employee_id=employee_id,
            status=status,
            period_start=period_start,
            period_end=period_end,
        )
        for record in records:
            apply_breakdown(record)
        return records

    async def mark_paid(
        self,
        payroll_id: int,
        payment_date: date | None = None,
        today: date | None = None,
    ) -> PayrollRecord:
        """PENDING → PAID; payment date defaults to today."""
        return await self._transition(payroll_id, PaymentStatus.PAID, payment_date, today)

    async def cancel(self, payroll_id: int) -> PayrollRecord:
        """PENDING → CANCELLED; clears any payment date."""
        return await self._transition(payroll_id, PaymentStatus.CANCELLED)

    async def _transition(
        self,
        payroll_id: int,
        to_status: PaymentStatus,
        payment_date: date | None = None,
        today: date | None = None,
    ) -> PayrollRecord:
        record = await self._get_or_raise(payroll_id)
        from_status = record.payment_status
        try:
            PaymentLifecycle.apply(record, to_status, payment_date, today)
        except InvalidTransitionError:
            logger.warning(
                "Rejected payment transition %s → %s for payroll record %s",
                from_status,
                to_status.value,
                payroll_id,
            )
            raise
        apply_breakdown(record)
        await self.store.flush("payroll_record")

        logger.info(
            "Payroll record %s: %s → %s (payment date %s)",
            payroll_id,
            from_status,
            record.payment_status,
            record.payment_date,
        )
        return record

    async def _get_or_raise(self, payroll_id: int) -> PayrollRecord:
        record = await self.store.find_payroll_record_by_id(payroll_id)
        if record is None:
            raise NotFoundError("payroll_record", payroll_id)
        return record

    @staticmethod
    def _merge_amounts(base: dict[str, Any], changes: dict[str, Any]) -> dict[str, Any]:
        merged = dict(base)
        merged.update({name: value for name, value in changes.items() if value is not None})
        return merged
