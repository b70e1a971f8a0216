"""Pydantic schemas for API request/response models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import inspect

from payroll_records.calculators.money import Money
from payroll_records.calculators.types import SalaryBreakdown
from payroll_records.models import PayrollRecord
from payroll_records.services.aggregation import (
    BudgetUtilization,
    DepartmentSummary,
    EmployeeStatistics,
    PayrollReportRow,
    PayrollTotals,
)


def _cents(value: Decimal | Money | None) -> Decimal | None:
    if value is None:
        return None
    return Money(value).rounded()


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeCreate(BaseModel):
    """Schema for creating an employee."""

    employee_code: str
    first_name: str
    last_name: str
    email: str
    hire_date: date
    base_salary: Decimal
    department_id: int | None = None
    position: str | None = None
    phone: str | None = None
    address: str | None = None
    date_of_birth: date | None = None


class EmployeeUpdate(BaseModel):
    """Schema for editing an employee; only provided fields change."""

    employee_code: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    hire_date: date | None = None
    base_salary: Decimal | None = None
    department_id: int | None = None
    position: str | None = None
    phone: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    employment_status: str | None = None


class EmployeeResponse(BaseModel):
    """Schema for employee response."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: int
    employee_code: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    hire_date: date
    department_id: int | None = None
    position: str | None = None
    base_salary: Decimal
    employment_status: str


class EmployeeListResponse(BaseModel):
    items: list[EmployeeResponse]
    total: int


# ============================================================================
# Department schemas
# ============================================================================


class DepartmentCreate(BaseModel):
    """Schema for creating a department."""

    department_code: str
    department_name: str
    manager_name: str | None = None
    budget: Decimal | None = None


class DepartmentUpdate(BaseModel):
    """Schema for editing a department; an explicit null budget clears it."""

    department_code: str | None = None
    department_name: str | None = None
    manager_name: str | None = None
    budget: Decimal | None = None


class DepartmentResponse(BaseModel):
    """Schema for department response."""

    model_config = ConfigDict(from_attributes=True)

    department_id: int
    department_code: str
    department_name: str
    manager_name: str | None = None
    budget: Decimal | None = None
    is_active: bool


class DepartmentListResponse(BaseModel):
    items: list[DepartmentResponse]
    total: int


# ============================================================================
# User schemas
# ============================================================================


class UserCreate(BaseModel):
    username: str
    full_name: str
    role: str = "HR"
    email: str | None = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    username: str
    full_name: str
    email: str | None = None
    role: str
    is_active: bool


# ============================================================================
# Payroll schemas
# ============================================================================


class SalaryAmounts(BaseModel):
    """Raw payroll amounts; omitted values take their defaults."""

    base_salary: Decimal | None = None
    overtime_hours: Decimal | None = Field(default=None, description="Defaults to 0")
    overtime_rate: Decimal | None = Field(default=None, description="Defaults to 1.5")
    bonus: Decimal | None = None
    allowances: Decimal | None = None
    tax_deduction: Decimal | None = None
    insurance_deduction: Decimal | None = None
    other_deductions: Decimal | None = None


class PayrollCreate(SalaryAmounts):
    """Schema for creating a payroll record."""

    employee_id: int
    pay_period_start: date
    pay_period_end: date


class PayrollUpdate(SalaryAmounts):
    """Schema for editing a PENDING payroll record."""

    employee_id: int | None = None
    pay_period_start: date | None = None
    pay_period_end: date | None = None


class PaymentRequest(BaseModel):
    """Schema for marking a payroll record as paid."""

    payment_date: date | None = None


class SalaryBreakdownResponse(BaseModel):
    """Derived salary fields rounded to cents."""

    overtime_pay: Decimal
    gross_salary: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    negative_net: bool

    @classmethod
    def from_breakdown(cls, breakdown: SalaryBreakdown) -> SalaryBreakdownResponse:
        return cls(**breakdown.rounded(), negative_net=breakdown.is_negative_net)


class PayrollRecordResponse(BaseModel):
    """Schema for payroll record response."""

    payroll_id: int
    employee_id: int
    employee_code: str | None = None
    employee_name: str | None = None
    pay_period_start: date
    pay_period_end: date
    base_salary: Decimal
    overtime_hours: Decimal
    overtime_rate: Decimal
    bonus: Decimal
    allowances: Decimal
    tax_deduction: Decimal
    insurance_deduction: Decimal
    other_deductions: Decimal
    overtime_pay: Decimal
    gross_salary: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    payment_status: str
    payment_date: date | None = None
    created_by: int | None = None
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record: PayrollRecord) -> PayrollRecordResponse:
        # Only attributes already loaded; lazy loads are not allowed under asyncio
        unloaded = inspect(record).unloaded
        employee = None if "employee" in unloaded else record.employee
        return cls(
            payroll_id=record.payroll_id,
            employee_id=record.employee_id,
            employee_code=employee.employee_code if employee is not None else None,
            employee_name=employee.full_name if employee is not None else None,
            pay_period_start=record.pay_period_start,
            pay_period_end=record.pay_period_end,
            base_salary=_cents(record.base_salary),
            overtime_hours=record.overtime_hours,
            overtime_rate=record.overtime_rate,
            bonus=_cents(record.bonus),
            allowances=_cents(record.allowances),
            tax_deduction=_cents(record.tax_deduction),
            insurance_deduction=_cents(record.insurance_deduction),
            other_deductions=_cents(record.other_deductions),
            overtime_pay=_cents(record.overtime_pay),
            gross_salary=_cents(record.gross_salary),
            total_deductions=_cents(record.total_deductions),
            net_salary=_cents(record.net_salary),
            payment_status=record.payment_status,
            payment_date=record.payment_date,
            created_by=record.created_by,
            created_at=None if "created_at" in unloaded else record.created_at,
        )


class PayrollRecordListResponse(BaseModel):
    items: list[PayrollRecordResponse]
    total: int


# ============================================================================
# Report schemas
# ============================================================================


class EmployeeStatisticsResponse(BaseModel):
    total: int
    active: int
    inactive: int
    terminated: int

    @classmethod
    def from_statistics(cls, stats: EmployeeStatistics) -> EmployeeStatisticsResponse:
        return cls(
            total=stats.total,
            active=stats.active,
            inactive=stats.inactive,
            terminated=stats.terminated,
        )


class PayrollTotalsResponse(BaseModel):
    total_paid: Decimal
    record_count: int
    count_by_status: dict[str, int]

    @classmethod
    def from_totals(cls, totals: PayrollTotals) -> PayrollTotalsResponse:
        return cls(
            total_paid=totals.total_paid.rounded(),
            record_count=totals.record_count,
            count_by_status=totals.count_by_status,
        )


class BudgetUtilizationResponse(BaseModel):
    total_salary: Decimal
    budget: Decimal | None = None
    percentage: Decimal | None = None
    applicable: bool
    formatted: str

    @classmethod
    def from_utilization(cls, utilization: BudgetUtilization) -> BudgetUtilizationResponse:
        return cls(
            total_salary=utilization.total_salary.rounded(),
            budget=_cents(utilization.budget),
            percentage=utilization.percentage,
            applicable=utilization.applicable,
            formatted=utilization.formatted,
        )


class DepartmentSummaryResponse(BaseModel):
    department_id: int
    department_code: str
    department_name: str
    manager_name: str | None = None
    employee_count: int
    utilization: BudgetUtilizationResponse

    @classmethod
    def from_summary(cls, summary: DepartmentSummary) -> DepartmentSummaryResponse:
        return cls(
            department_id=summary.department_id,
            department_code=summary.department_code,
            department_name=summary.department_name,
            manager_name=summary.manager_name,
            employee_count=summary.employee_count,
            utilization=BudgetUtilizationResponse.from_utilization(summary.utilization),
        )


class PayrollReportRowResponse(BaseModel):
    payroll_id: int
    employee_id: int
    employee_code: str
    employee_name: str
    pay_period_start: date
    pay_period_end: date
    base_salary: Decimal
    salary: SalaryBreakdownResponse
    payment_status: str
    payment_date: date | None = None

    @classmethod
    def from_row(cls, row: PayrollReportRow) -> PayrollReportRowResponse:
        return cls(
            payroll_id=row.payroll_id,
            employee_id=row.employee_id,
            employee_code=row.employee_code,
            employee_name=row.employee_name,
            pay_period_start=row.pay_period_start,
            pay_period_end=row.pay_period_end,
            base_salary=row.base_salary.rounded(),
            salary=SalaryBreakdownResponse.from_breakdown(row.breakdown),
            payment_status=row.payment_status,
            payment_date=row.payment_date,
        )


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: str
    field: str | None = None
