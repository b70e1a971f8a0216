"""Salary calculation and money arithmetic."""

from payroll_records.calculators.money import Money
from payroll_records.calculators.salary import (
    STANDARD_MONTHLY_HOURS,
    apply_breakdown,
    calculate_salary,
)
from payroll_records.calculators.types import SalaryBreakdown, SalaryInputs

__all__ = [
    "Money",
    "STANDARD_MONTHLY_HOURS",
    "SalaryBreakdown",
    "SalaryInputs",
    "apply_breakdown",
    "calculate_salary",
]
