"""Pay period overlap detection."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Iterable

from payroll_records.errors import ConflictError

if TYPE_CHECKING:
    from payroll_records.models import PayrollRecord
    from payroll_records.store import RecordStore


def periods_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Closed-interval intersection; a shared boundary day counts as overlap."""
    return start_a <= end_b and start_b <= end_a


def find_conflicts(
    records: Iterable[PayrollRecord],
    period_start: date,
    period_end: date,
    exclude_record_id: int | None = None,
) -> list[PayrollRecord]:
    """Records whose pay period intersects [period_start, period_end]."""
    return [
        record
        for record in records
        if record.payroll_id != exclude_record_id
        and periods_overlap(
            record.pay_period_start,
            record.pay_period_end,
            period_start,
            period_end,
        )
    ]


class PeriodConflictChecker:
    """Checks a candidate pay period against an employee's existing records.

    Read-only. Callers must run the check and the write it guards inside
    one transaction holding the employee's payroll lock.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    async def find_conflicting_records(
        self,
        employee_id: int,
        period_start: date,
        period_end: date,
        exclude_record_id: int | None = None,
    ) -> list[PayrollRecord]:
        records = await self.store.find_payroll_records(employee_id)
        return find_conflicts(records, period_start, period_end, exclude_record_id)

    async def has_conflict(
        self,
        employee_id: int,
        period_start: date,
        period_end: date,
        exclude_record_id: int | None = None,
    ) -> bool:
        """Whether any other record of the employee overlaps the period."""
        conflicts = await self.find_conflicting_records(
            employee_id, period_start, period_end, exclude_record_id
        )
        return bool(conflicts)

    async def ensure_no_conflict(
        self,
        employee_id: int,
        period_start: date,
        period_end: date,
        exclude_record_id: int | None = None,
    ) -> None:
        """Raise ConflictError if the period overlaps an existing record."""
        conflicts = await self.find_conflicting_records(
            employee_id, period_start, period_end, exclude_record_id
        )
        if conflicts:
            existing = conflicts[0]
            raise ConflictError(
                "payroll_record",
                "pay_period",
                f"{period_start}..{period_end}",
                f"A payroll record already exists for employee {employee_id} "
                f"in {existing.pay_period_start}..{existing.pay_period_end}",
            )
