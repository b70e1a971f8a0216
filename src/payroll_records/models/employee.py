"""Employee model."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_records.models.base import Base, MoneyColumn, TimestampMixin

if TYPE_CHECKING:
    from payroll_records.models.department import Department
    from payroll_records.models.payroll import PayrollRecord


class EmploymentStatus(str, Enum):
    """Employment status values."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    TERMINATED = "TERMINATED"


class Employee(Base, TimestampMixin):
    """Employee record; soft-deleted by moving to TERMINATED."""

    __tablename__ = "employee"

    employee_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(String, nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)
    department_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("department.department_id", ondelete="SET NULL"),
        nullable=True,
    )
    position: Mapped[str | None] = mapped_column(String(100), nullable=True)
    base_salary: Mapped[Decimal] = mapped_column(MoneyColumn, nullable=False)
    employment_status: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default=EmploymentStatus.ACTIVE.value,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint(
            "employment_status IN ('ACTIVE', 'INACTIVE', 'TERMINATED')",
            name="employee_status_check",
        ),
        CheckConstraint("base_salary >= 0", name="employee_base_salary_check"),
    )

    # Relationships
    department: Mapped[Department | None] = relationship(back_populates="employees")
    payroll_records: Mapped[list[PayrollRecord]] = relationship(
        back_populates="employee",
        passive_deletes="all",
    )

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"

    @property
    def is_active(self) -> bool:
        return self.employment_status == EmploymentStatus.ACTIVE
