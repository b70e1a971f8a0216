"""Salary calculation from raw payroll inputs."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from payroll_records.calculators.money import Money
from payroll_records.calculators.types import SalaryBreakdown, SalaryInputs
from payroll_records.errors import ValidationError

if TYPE_CHECKING:
    from payroll_records.models import PayrollRecord

# Standard monthly hours used to derive the hourly rate; not configurable.
STANDARD_MONTHLY_HOURS = Decimal("160")


def calculate_salary(inputs: SalaryInputs) -> SalaryBreakdown:
    """Compute overtime, gross, deductions and net from raw inputs.

    overtime_pay     = overtime_hours * (base_salary / 160) * overtime_rate
    gross_salary     = base_salary + overtime_pay + bonus + allowances
    total_deductions = tax_deduction + insurance_deduction + other_deductions
    net_salary       = gross_salary - total_deductions

    Net salary may be negative. All inputs are checked before anything is
    computed.

    Raises:
        ValidationError: If any input is negative
    """
    for name, value in inputs.amounts().items():
        if value < 0:
            raise ValidationError(name, "must not be negative")

    hourly_rate = inputs.base_salary.divide(STANDARD_MONTHLY_HOURS)
    overtime_pay = hourly_rate * inputs.overtime_hours * inputs.overtime_rate

    gross_salary = inputs.base_salary + overtime_pay + inputs.bonus + inputs.allowances
    total_deductions = Money.sum(
        [inputs.tax_deduction, inputs.insurance_deduction, inputs.other_deductions]
    )

    return SalaryBreakdown(
        overtime_pay=overtime_pay,
        gross_salary=gross_salary,
        total_deductions=total_deductions,
        net_salary=gross_salary - total_deductions,
    )


def apply_breakdown(record: PayrollRecord) -> SalaryBreakdown:
    """Recompute and assign all derived fields of a payroll record.

    Stored derived values are never trusted; this is the single path that
    writes them. Nothing is assigned if the calculation fails.
    """
    breakdown = calculate_salary(record.salary_inputs())
    record.overtime_pay = breakdown.overtime_pay.amount
    record.gross_salary = breakdown.gross_salary.amount
    record.total_deductions = breakdown.total_deductions.amount
    record.net_salary = breakdown.net_salary.amount
    return breakdown
