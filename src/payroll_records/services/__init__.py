"""Payroll record services."""

from payroll_records.services.aggregation import AggregationEngine
from payroll_records.services.department_service import DepartmentService
from payroll_records.services.employee_service import EmployeeService
from payroll_records.services.payroll_service import PayrollService, preview_salary
from payroll_records.services.period_conflicts import PeriodConflictChecker, periods_overlap
from payroll_records.services.state_machine import (
    InvalidTransitionError,
    PaymentLifecycle,
    PaymentStatus,
)
from payroll_records.services.user_service import UserService

__all__ = [
    "AggregationEngine",
    "DepartmentService",
    "EmployeeService",
    "InvalidTransitionError",
    "PaymentLifecycle",
    "PaymentStatus",
    "PayrollService",
    "PeriodConflictChecker",
    "UserService",
    "periods_overlap",
    "preview_salary",
]
