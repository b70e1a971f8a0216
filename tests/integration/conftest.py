"""API test fixtures: the app wired to the per-test SQLite engine."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from payroll_records.api.app import create_app
from payroll_records.api.dependencies import get_session_factory
from payroll_records.models import Department, Employee, User, UserRole


@dataclass
class SeedIds:
    admin_id: int
    hr_id: int
    it_department_id: int
    hr_department_id: int
    employee_id: int
    second_employee_id: int


@pytest.fixture
def app(session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    app = create_app()
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def seeded(session_factory: async_sessionmaker[AsyncSession]) -> SeedIds:
    """Committed users, departments and two IT employees."""
    async with session_factory() as session:
        admin = User(username="admin", full_name="System Administrator", role=UserRole.ADMIN.value)
        hr = User(username="hr.user", full_name="HR Officer", role=UserRole.HR.value)
        it_department = Department(
            department_code="IT",
            department_name="Information Technology",
            budget=Decimal("20000"),
        )
        hr_department = Department(department_code="HR", department_name="Human Resources")
        session.add_all([admin, hr, it_department, hr_department])
        await session.flush()

        john = Employee(
            employee_code="EMP001",
            first_name="John",
            last_name="Smith",
            email="john.smith@example.com",
            hire_date=date(2023, 6, 1),
            base_salary=Decimal("3200.00"),
            department_id=it_department.department_id,
        )
        jane = Employee(
            employee_code="EMP002",
            first_name="Jane",
            last_name="Doe",
            email="jane.doe@example.com",
            hire_date=date(2023, 6, 1),
            base_salary=Decimal("4800.00"),
            department_id=it_department.department_id,
        )
        session.add_all([john, jane])
        await session.commit()

        return SeedIds(
            admin_id=admin.user_id,
            hr_id=hr.user_id,
            it_department_id=it_department.department_id,
            hr_department_id=hr_department.department_id,
            employee_id=john.employee_id,
            second_employee_id=jane.employee_id,
        )
