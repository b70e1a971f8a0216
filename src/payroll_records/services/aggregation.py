"""Read-only reports derived live from the record store.

Nothing here is cached: every call re-reads the rows it needs, and
salary figures of payroll records are recomputed from their inputs rather
than read from the stored derived columns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable

from payroll_records.calculators.money import Money
from payroll_records.calculators.salary import calculate_salary
from payroll_records.calculators.types import SalaryBreakdown
from payroll_records.errors import NotFoundError
from payroll_records.models import EmploymentStatus
from payroll_records.services.state_machine import PaymentStatus, parse_payment_status

if TYPE_CHECKING:
    from payroll_records.models import Department, Employee, PayrollRecord
    from payroll_records.store import RecordStore

NOT_APPLICABLE = "N/A"


@dataclass(frozen=True)
class EmployeeStatistics:
    """Employee counts by employment status."""

    total: int
    active: int
    inactive: int
    terminated: int

    @property
    def by_status(self) -> dict[str, int]:
        return {
            EmploymentStatus.ACTIVE.value: self.active,
            EmploymentStatus.INACTIVE.value: self.inactive,
            EmploymentStatus.TERMINATED.value: self.terminated,
        }


@dataclass(frozen=True)
class PayrollTotals:
    """Totals across all payroll records."""

    total_paid: Money
    record_count: int
    count_by_status: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class BudgetUtilization:
    """Share of a department budget taken by current base salaries.

    ``percentage`` is None when the budget is missing or zero.
    """

    total_salary: Money
    budget: Money | None
    percentage: Decimal | None

    @property
    def applicable(self) -> bool:
        return self.percentage is not None

    @property
    def formatted(self) -> str:
        if self.percentage is None:
            return NOT_APPLICABLE
        return f"{self.percentage:.1f}%"


@dataclass(frozen=True)
class DepartmentSummary:
    """One row of the department report."""

    department_id: int
    department_code: str
    department_name: str
    manager_name: str | None
    employee_count: int
    utilization: BudgetUtilization

    @property
    def total_salary(self) -> Money:
        return self.utilization.total_salary

    @property
    def budget(self) -> Money | None:
        return self.utilization.budget


@dataclass(frozen=True)
class PayrollReportRow:
    """One row of the payroll report, with freshly computed salary figures."""

    payroll_id: int
    employee_id: int
    employee_code: str
    employee_name: str
    pay_period_start: date
    pay_period_end: date
    base_salary: Money
    breakdown: SalaryBreakdown
    payment_status: str
    payment_date: date | None


def summarize_statuses(counts: dict[str, int]) -> EmployeeStatistics:
    """Fold per-status counts into totals; missing statuses count as zero."""
    active = counts.get(EmploymentStatus.ACTIVE.value, 0)
    inactive = counts.get(EmploymentStatus.INACTIVE.value, 0)
    terminated = counts.get(EmploymentStatus.TERMINATED.value, 0)
    return EmployeeStatistics(
        total=sum(counts.values()),
        active=active,
        inactive=inactive,
        terminated=terminated,
    )


def total_paid(records: Iterable[PayrollRecord]) -> Money:
    """Sum of recomputed net salary over PAID records."""
    return Money.sum(
        calculate_salary(record.salary_inputs()).net_salary
        for record in records
        if record.payment_status == PaymentStatus.PAID
    )


def budget_utilization(total_salary: Money, budget: Decimal | Money | None) -> BudgetUtilization:
    """Percentage of budget used, 4 decimal places, or not applicable.

    Only a budget greater than zero gives a percentage.
    """
    budget_money = Money(budget) if budget is not None else None
    if budget_money is None or budget_money <= 0:
        return BudgetUtilization(total_salary, budget_money, None)
    percentage = total_salary.percentage_of(budget_money, places=4)
    return BudgetUtilization(total_salary, budget_money, percentage)


def department_salary_total(employees: Iterable[Employee]) -> Money:
    """Sum of current base salaries."""
    return Money.sum(employee.base_salary for employee in employees)


class AggregationEngine:
    """Employee statistics, payroll totals and department budget reports."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def employee_statistics(self) -> EmployeeStatistics:
        counts = await self.store.count_employees_by_status()
        return summarize_statuses(counts)

    async def payroll_totals(self) -> PayrollTotals:
        """Net salary paid (PAID records only) and record counts over all statuses."""
        records = await self.store.list_payroll_records()
        count_by_status = {status.value: 0 for status in PaymentStatus}
        for record in records:
            status = record.payment_status
            count_by_status[status] = count_by_status.get(status, 0) + 1
        return PayrollTotals(
            total_paid=total_paid(records),
            record_count=len(records),
            count_by_status=count_by_status,
        )

    async def department_budget_utilization(self, department_id: int) -> BudgetUtilization:
        """Utilization of one department's budget by its ACTIVE employees.

        Raises:
            NotFoundError: If the department does not exist
        """
        department = await self.store.find_department_by_id(department_id)
        if department is None:
            raise NotFoundError("department", department_id)
        employees = await self.store.list_active_employees_by_department(department_id)
        return budget_utilization(department_salary_total(employees), department.budget)

    async def department_report(self) -> list[DepartmentSummary]:
        """One summary per active department, ordered by name."""
        departments = await self.store.list_departments()
        summaries = []
        for department in departments:
            summaries.append(await self._summarize_department(department))
        return summaries

    async def _summarize_department(self, department: Department) -> DepartmentSummary:
        employees = await self.store.list_active_employees_by_department(department.department_id)
        return DepartmentSummary(
            department_id=department.department_id,
            department_code=department.department_code,
            department_name=department.department_name,
            manager_name=department.manager_name,
            employee_count=len(employees),
            utilization=budget_utilization(department_salary_total(employees), department.budget),
        )

    async def payroll_report(
        self,
        period_start: date | None = None,
        period_end: date | None = None,
        status: str | None = None,
    ) -> list[PayrollReportRow]:
        """Payroll rows within a date range and/or status, newest period first."""
        if status is not None:
            status = parse_payment_status(status).value
        records = await self.store.list_payroll_records(
            status=status,
            period_start=period_start,
            period_end=period_end,
        )
        return [
            PayrollReportRow(
                payroll_id=record.payroll_id,
                employee_id=record.employee_id,
                employee_code=record.employee.employee_code,
                employee_name=record.employee.full_name,
                pay_period_start=record.pay_period_start,
                pay_period_end=record.pay_period_end,
                base_salary=Money(record.base_salary),
                breakdown=calculate_salary(record.salary_inputs()),
                payment_status=record.payment_status,
                payment_date=record.payment_date,
            )
            for record in records
        ]
