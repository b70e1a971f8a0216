"""Payroll record model."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_records.calculators.money import Money
from payroll_records.calculators.types import DEFAULT_OVERTIME_RATE, SalaryInputs
from payroll_records.models.base import Base, MoneyColumn, TimestampMixin

if TYPE_CHECKING:
    from payroll_records.models.employee import Employee
    from payroll_records.models.user import User


class PayrollRecord(Base, TimestampMixin):
    """Payroll computation for one employee and one closed pay period.

    The four derived columns (overtime_pay, gross_salary, total_deductions,
    net_salary) are a cache of the last calculation. Read paths recompute
    them from the input columns.
    """

    __tablename__ = "payroll_record"

    payroll_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_id", ondelete="RESTRICT"),
        nullable=False,
    )
    pay_period_start: Mapped[date] = mapped_column(Date, nullable=False)
    pay_period_end: Mapped[date] = mapped_column(Date, nullable=False)

    # Inputs
    base_salary: Mapped[Decimal] = mapped_column(MoneyColumn, nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(MoneyColumn, nullable=False, default=Decimal("0"))
    overtime_rate: Mapped[Decimal] = mapped_column(
        MoneyColumn, nullable=False, default=DEFAULT_OVERTIME_RATE
    )
    bonus: Mapped[Decimal] = mapped_column(MoneyColumn, nullable=False, default=Decimal("0"))
    allowances: Mapped[Decimal] = mapped_column(MoneyColumn, nullable=False, default=Decimal("0"))
    tax_deduction: Mapped[Decimal] = mapped_column(MoneyColumn, nullable=False, default=Decimal("0"))
    insurance_deduction: Mapped[Decimal] = mapped_column(
        MoneyColumn, nullable=False, default=Decimal("0")
    )
    other_deductions: Mapped[Decimal] = mapped_column(
        MoneyColumn, nullable=False, default=Decimal("0")
    )

    # Derived (cache only)
    overtime_pay: Mapped[Decimal] = mapped_column(MoneyColumn, nullable=False, default=Decimal("0"))
    gross_salary: Mapped[Decimal] = mapped_column(MoneyColumn, nullable=False, default=Decimal("0"))
    total_deductions: Mapped[Decimal] = mapped_column(
        MoneyColumn, nullable=False, default=Decimal("0")
    )
    net_salary: Mapped[Decimal] = mapped_column(MoneyColumn, nullable=False, default=Decimal("0"))

    payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    payment_status: Mapped[str] = mapped_column(String, nullable=False, default="PENDING")
    created_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("app_user.user_id"),
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint(
            "payment_status IN ('PENDING', 'PAID', 'CANCELLED')",
            name="payroll_record_status_check",
        ),
        CheckConstraint(
            "pay_period_end >= pay_period_start",
            name="payroll_record_period_check",
        ),
        CheckConstraint(
            "payment_date IS NULL OR payment_status = 'PAID'",
            name="payroll_record_payment_date_check",
        ),
        CheckConstraint(
            "base_salary >= 0 AND overtime_hours >= 0 AND overtime_rate >= 0 "
            "AND bonus >= 0 AND allowances >= 0 AND tax_deduction >= 0 "
            "AND insurance_deduction >= 0 AND other_deductions >= 0",
            name="payroll_record_inputs_non_negative",
        ),
        Index("ix_payroll_record_employee_period", "employee_id", "pay_period_start", "pay_period_end"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="payroll_records")
    creator: Mapped[User | None] = relationship()

    def salary_inputs(self) -> SalaryInputs:
        """Raw calculation inputs held by this record."""
        return SalaryInputs(
            base_salary=Money(self.base_salary),
            overtime_hours=self.overtime_hours,
            overtime_rate=self.overtime_rate,
            bonus=Money(self.bonus),
            allowances=Money(self.allowances),
            tax_deduction=Money(self.tax_deduction),
            insurance_deduction=Money(self.insurance_deduction),
            other_deductions=Money(self.other_deductions),
        )
