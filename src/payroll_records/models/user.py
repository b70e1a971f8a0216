"""Application user model (audit identity for payroll records)."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from payroll_records.models.base import Base, TimestampMixin


class UserRole(str, Enum):
    """User role values."""

    ADMIN = "ADMIN"
    HR = "HR"


class User(Base, TimestampMixin):
    """User acting on payroll data."""

    __tablename__ = "app_user"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(100), nullable=True)
    role: Mapped[str] = mapped_column(String, nullable=False, default=UserRole.HR.value)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("role IN ('ADMIN', 'HR')", name="app_user_role_check"),
    )
