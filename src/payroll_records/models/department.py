"""Department model."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_records.models.base import Base, MoneyColumn, TimestampMixin

if TYPE_CHECKING:
    from payroll_records.models.employee import Employee


class Department(Base, TimestampMixin):
    """Department; soft-deleted through ``is_active``."""

    __tablename__ = "department"

    department_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    department_code: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)
    department_name: Mapped[str] = mapped_column(String(100), nullable=False)
    manager_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    budget: Mapped[Decimal | None] = mapped_column(MoneyColumn, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("budget IS NULL OR budget >= 0", name="department_budget_check"),
    )

    # Non-owning: deactivating a department never touches its employees
    employees: Mapped[list[Employee]] = relationship(
        back_populates="department",
        passive_deletes="all",
    )
