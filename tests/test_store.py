"""Tests for the record store and its error translation."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_records.errors import ConflictError, StoreUnavailableError, ValidationError
from payroll_records.models import Department, Employee, User
from payroll_records.store import RecordStore, translate_store_errors


class TestTranslateStoreErrors:
    def test_unique_violation_becomes_conflict(self):
        with pytest.raises(ConflictError) as exc_info:
            with translate_store_errors("create employee", "employee"):
                raise IntegrityError(
                    "INSERT", {}, Exception("UNIQUE constraint failed: employee.email")
                )

        assert exc_info.value.entity == "employee"
        assert exc_info.value.field == "email"

    def test_unique_violation_by_sqlstate(self):
        class DriverError(Exception):
            sqlstate = "23505"

        orig = DriverError(
            'duplicate key value violates unique constraint "employee_employee_code_key"\n'
            "DETAIL:  Key (employee_code)=(EMP001) already exists."
        )
        with pytest.raises(ConflictError) as exc_info:
            with translate_store_errors("create employee", "employee"):
                raise IntegrityError("INSERT", {}, orig)

        assert exc_info.value.field == "employee_code"

    def test_check_violation_becomes_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            with translate_store_errors("create department", "department"):
                raise IntegrityError(
                    "INSERT", {}, Exception("CHECK constraint failed: department_budget_check")
                )

        assert exc_info.value.field == "department"

    def test_foreign_key_violation_by_sqlstate(self):
        class DriverError(Exception):
            sqlstate = "23503"

        with pytest.raises(ValidationError):
            with translate_store_errors("create payroll_record", "payroll_record"):
                raise IntegrityError("INSERT", {}, DriverError("foreign key violation"))

    def test_operational_error_becomes_unavailable(self):
        with pytest.raises(StoreUnavailableError) as exc_info:
            with translate_store_errors("list employees"):
                raise OperationalError("SELECT", {}, Exception("connection refused"))

        assert exc_info.value.operation == "list employees"
        assert isinstance(exc_info.value.cause, OperationalError)


class TestRecordStore:
    async def test_exists_unique_conflict(self, session: AsyncSession, employee: Employee):
        store = RecordStore(session)

        assert await store.exists_unique_conflict("employee", "employee_code", "EMP001")
        assert not await store.exists_unique_conflict(
            "employee", "employee_code", "EMP001", exclude_id=employee.employee_id
        )
        assert not await store.exists_unique_conflict("employee", "email", "new@example.com")

    async def test_exists_unique_conflict_user(self, session: AsyncSession, admin_user: User):
        assert await RecordStore(session).exists_unique_conflict("user", "username", "admin")

    async def test_exists_unique_conflict_rejects_unknown(self, session: AsyncSession):
        store = RecordStore(session)

        with pytest.raises(ValueError):
            await store.exists_unique_conflict("payroll", "payroll_id", 1)
        with pytest.raises(ValueError):
            await store.exists_unique_conflict("employee", "first_name", "John")

    async def test_duplicate_insert_surfaces_as_conflict(
        self, session: AsyncSession, employee: Employee, employee_factory
    ):
        duplicate = employee_factory("EMP001", "Johnny", "Smith", "1000")

        with pytest.raises(ConflictError) as exc_info:
            await RecordStore(session).add(duplicate, "employee")

        assert exc_info.value.field == "employee_code"

    async def test_count_employees_by_status(
        self, session: AsyncSession, employee: Employee, second_employee: Employee
    ):
        second_employee.employment_status = "INACTIVE"
        await session.flush()

        counts = await RecordStore(session).count_employees_by_status()

        assert counts == {"ACTIVE": 1, "INACTIVE": 1}

    async def test_check_constraint_surfaces_as_validation_error(self, session: AsyncSession):
        department = Department(
            department_code="OPS",
            department_name="Operations",
            budget=Decimal("-1"),
        )

        with pytest.raises(ValidationError):
            await RecordStore(session).add(department, "department")
