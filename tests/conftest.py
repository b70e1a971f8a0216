"""Pytest fixtures for payroll records tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from payroll_records.calculators import apply_breakdown
from payroll_records.database import make_session_factory
from payroll_records.models import (
    Base,
    Department,
    Employee,
    EmploymentStatus,
    PayrollRecord,
    User,
    UserRole,
)

# In-memory SQLite shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    """Create a fresh test database engine per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(engine)


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def admin_user(session: AsyncSession) -> User:
    user = User(username="admin", full_name="System Administrator", role=UserRole.ADMIN.value)
    session.add(user)
    await session.flush()
    return user


@pytest.fixture
async def hr_user(session: AsyncSession) -> User:
    user = User(username="hr.user", full_name="HR Officer", role=UserRole.HR.value)
    session.add(user)
    await session.flush()
    return user


@pytest.fixture
async def it_department(session: AsyncSession) -> Department:
    """Active department with a 20,000 budget."""
    department = Department(
        department_code="IT",
        department_name="Information Technology",
        manager_name="Brian Chen",
        budget=Decimal("20000.00"),
        is_active=True,
    )
    session.add(department)
    await session.flush()
    return department


@pytest.fixture
async def hr_department(session: AsyncSession) -> Department:
    """Active department without a budget."""
    department = Department(
        department_code="HR",
        department_name="Human Resources",
        manager_name="Alice Morgan",
        budget=None,
        is_active=True,
    )
    session.add(department)
    await session.flush()
    return department


def make_employee(
    code: str,
    first_name: str,
    last_name: str,
    base_salary: str,
    department: Department | None = None,
    status: EmploymentStatus = EmploymentStatus.ACTIVE,
) -> Employee:
    return Employee(
        employee_code=code,
        first_name=first_name,
        last_name=last_name,
        email=f"{first_name}.{last_name}@example.com".lower(),
        hire_date=date(2023, 6, 1),
        base_salary=Decimal(base_salary),
        department_id=department.department_id if department is not None else None,
        position="Engineer",
        employment_status=status.value,
    )


@pytest.fixture
async def employee(session: AsyncSession, it_department: Department) -> Employee:
    """ACTIVE IT employee with a 3,200 base salary."""
    employee = make_employee("EMP001", "John", "Smith", "3200.00", it_department)
    session.add(employee)
    await session.flush()
    return employee


@pytest.fixture
async def second_employee(session: AsyncSession, it_department: Department) -> Employee:
    employee = make_employee("EMP002", "Jane", "Doe", "4800.00", it_department)
    session.add(employee)
    await session.flush()
    return employee


@pytest.fixture
async def january_record(session: AsyncSession, employee: Employee) -> PayrollRecord:
    """PENDING record for employee covering January 2024."""
    record = PayrollRecord(
        employee=employee,
        pay_period_start=date(2024, 1, 1),
        pay_period_end=date(2024, 1, 31),
        base_salary=Decimal("3200.00"),
        overtime_hours=Decimal("10"),
        overtime_rate=Decimal("1.5"),
        bonus=Decimal("0"),
        allowances=Decimal("0"),
        tax_deduction=Decimal("0"),
        insurance_deduction=Decimal("0"),
        other_deductions=Decimal("0"),
        payment_status="PENDING",
    )
    apply_breakdown(record)
    session.add(record)
    await session.flush()
    return record


@pytest.fixture
def employee_factory():
    """Build unsaved employees: ``employee_factory(code, first, last, salary, ...)``."""
    return make_employee
