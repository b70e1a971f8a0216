"""ORM models for the payroll record store."""

from payroll_records.models.base import Base, TimestampMixin
from payroll_records.models.department import Department
from payroll_records.models.employee import Employee, EmploymentStatus
from payroll_records.models.payroll import PayrollRecord
from payroll_records.models.user import User, UserRole

__all__ = [
    "Base",
    "Department",
    "Employee",
    "EmploymentStatus",
    "PayrollRecord",
    "TimestampMixin",
    "User",
    "UserRole",
]
