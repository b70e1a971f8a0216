"""Employee service: HR maintenance of employee records."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_records.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from payroll_records.models import Employee, EmploymentStatus, User, UserRole
from payroll_records.store import RecordStore
from payroll_records.validation import parse_decimal, sanitize_input, validate_employee_fields

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "employee_code",
        "first_name",
        "last_name",
        "email",
        "phone",
        "address",
        "date_of_birth",
        "hire_date",
        "department_id",
        "position",
        "base_salary",
        "employment_status",
    }
)


class EmployeeService:
    """Service for creating, editing and soft-deleting employees.

    Employee code and email are unique; the pre-check here gives a precise
    error, and the unique constraints catch a concurrent duplicate at flush.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.store = RecordStore(session)

    async def create_employee(
        self,
        employee_code: str,
        first_name: str,
        last_name: str,
        email: str,
        hire_date: date,
        base_salary: Decimal,
        department_id: int | None = None,
        position: str | None = None,
        phone: str | None = None,
        address: str | None = None,
        date_of_birth: date | None = None,
    ) -> Employee:
        """Create an ACTIVE employee.

        Raises:
            ValidationError: On an invalid field or unknown/inactive department
            ConflictError: If the code or email is taken
        """
        values = self._clean(
            {
                "employee_code": employee_code,
                "first_name": first_name,
                "last_name": last_name,
                "email": email,
                "phone": phone,
                "address": address,
                "position": position,
                "base_salary": base_salary,
            }
        )
        validate_employee_fields(
            values["employee_code"],
            values["first_name"],
            values["last_name"],
            values["email"],
            values["base_salary"],
            phone=values["phone"],
            hire_date=hire_date,
        )
        department_id = await self._check_department(department_id)
        await self._check_unique(values["employee_code"], values["email"])

        employee = Employee(
            employee_code=values["employee_code"],
            first_name=values["first_name"],
            last_name=values["last_name"],
            email=values["email"],
            phone=values["phone"] or None,
            address=values["address"] or None,
            date_of_birth=date_of_birth,
            hire_date=hire_date,
            department_id=department_id,
            position=values["position"] or None,
            base_salary=parse_decimal(values["base_salary"]),
            employment_status=EmploymentStatus.ACTIVE.value,
        )
        await self.store.add(employee, "employee")
        logger.info("Created employee %s (%s)", employee.employee_id, employee.employee_code)
        return employee

    async def update_employee(
        self,
        employee_id: int,
        changes: dict[str, Any],
        actor: User | None = None,
    ) -> Employee:
        """Apply field changes to an employee.

        Only ADMIN users may change the base salary of an existing employee.

        Raises:
            NotFoundError: If the employee does not exist
            PermissionDeniedError: If an HR user changes the base salary
            ValidationError: On an invalid field or status
            ConflictError: If the new code or email is taken
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(sorted(unknown)[0], "is not an editable employee field")

        employee = await self.get_employee(employee_id)
        merged = {name: getattr(employee, name) for name in EDITABLE_FIELDS}
        merged.update(self._clean(changes))

        new_salary = parse_decimal(merged["base_salary"])
        if (
            actor is not None
            and "base_salary" in changes
            and actor.role != UserRole.ADMIN.value
            and new_salary != employee.base_salary
        ):
            logger.warning(
                "User %s (%s) denied salary change for employee %s",
                actor.username,
                actor.role,
                employee_id,
            )
            raise PermissionDeniedError("Only ADMIN users can change an employee's base salary")

        validate_employee_fields(
            merged["employee_code"],
            merged["first_name"],
            merged["last_name"],
            merged["email"],
            merged["base_salary"],
            phone=merged["phone"],
            hire_date=merged["hire_date"],
        )
        try:
            merged["employment_status"] = EmploymentStatus(merged["employment_status"]).value
        except ValueError as e:
            raise ValidationError("employment_status", "is not a valid employment status") from e

        if "department_id" in changes:
            merged["department_id"] = await self._check_department(
                merged["department_id"], current=employee.department_id
            )
        await self._check_unique(merged["employee_code"], merged["email"], exclude_id=employee_id)

        merged["base_salary"] = new_salary
        for name in ("phone", "address", "position"):
            merged[name] = merged[name] or None
        for name, value in merged.items():
            setattr(employee, name, value)
        await self.store.flush("employee")

        logger.info("Updated employee %s", employee_id)
        return employee

    async def terminate_employee(self, employee_id: int) -> Employee:
        """Soft-delete: mark TERMINATED; payroll history is kept."""
        employee = await self.get_employee(employee_id)
        if employee.employment_status != EmploymentStatus.TERMINATED.value:
            employee.employment_status = EmploymentStatus.TERMINATED.value
            await self.store.flush("employee")
            logger.info("Terminated employee %s", employee_id)
        return employee

    async def get_employee(self, employee_id: int) -> Employee:
        employee = await self.store.find_employee_by_id(employee_id)
        if employee is None:
            raise NotFoundError("employee", employee_id)
        return employee

    async def list_employees(
        self,
        status: str | None = None,
        department_id: int | None = None,
    ) -> list[Employee]:
        if status is not None:
            try:
                status = EmploymentStatus(status).value
            except ValueError as e:
                raise ValidationError("employment_status", "is not a valid employment status") from e
        return await self.store.list_employees(status=status, department_id=department_id)

    async def search_employees(self, term: str) -> list[Employee]:
        if not sanitize_input(term):
            return await self.store.list_employees()
        return await self.store.search_employees(term)

    async def _check_department(
        self,
        department_id: int | None,
        current: int | None = None,
    ) -> int | None:
        """Resolve a department reference; 0 or None means unassigned.

        A new assignment must point at an active department; keeping the
        current (possibly deactivated) department is allowed.
        """
        if not department_id:
            return None
        if department_id == current:
            return department_id
        department = await self.store.find_department_by_id(department_id)
        if department is None or not department.is_active:
            raise ValidationError("department_id", f"department {department_id} is not active")
        return department_id

    async def _check_unique(
        self,
        employee_code: str,
        email: str,
        exclude_id: int | None = None,
    ) -> None:
        if await self.store.exists_unique_conflict(
            "employee", "employee_code", employee_code, exclude_id
        ):
            raise ConflictError("employee", "employee_code", employee_code)
        if await self.store.exists_unique_conflict("employee", "email", email, exclude_id):
            raise ConflictError("employee", "email", email)

    @staticmethod
    def _clean(values: dict[str, Any]) -> dict[str, Any]:
        return {
            name: sanitize_input(value) if isinstance(value, str) else value
            for name, value in values.items()
        }
