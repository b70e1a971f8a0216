"""Department service."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_records.errors import ConflictError, NotFoundError, ValidationError
from payroll_records.models import Department
from payroll_records.store import RecordStore
from payroll_records.validation import (
    parse_decimal,
    sanitize_input,
    validate_department_fields,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"department_code", "department_name", "manager_name", "budget"})


class DepartmentService:
    """Service for department maintenance; deletion is a soft deactivate."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.store = RecordStore(session)

    async def create_department(
        self,
        department_code: str,
        department_name: str,
        manager_name: str | None = None,
        budget: Decimal | None = None,
    ) -> Department:
        """Create an active department.

        Raises:
            ValidationError: On an invalid code, name or budget
            ConflictError: If the code is taken
        """
        department_code = sanitize_input(department_code)
        department_name = sanitize_input(department_name)
        validate_department_fields(department_code, department_name, budget)
        await self._check_unique(department_code)

        department = Department(
            department_code=department_code,
            department_name=department_name,
            manager_name=sanitize_input(manager_name) or None,
            budget=parse_decimal(budget) if budget is not None else None,
            is_active=True,
        )
        await self.store.add(department, "department")
        logger.info("Created department %s (%s)", department.department_id, department_code)
        return department

    async def update_department(self, department_id: int, changes: dict[str, Any]) -> Department:
        """Apply field changes; a ``None`` budget clears it.

        Raises:
            NotFoundError: If the department does not exist
            ValidationError: On an invalid field
            ConflictError: If the new code is taken
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(sorted(unknown)[0], "is not an editable department field")

        department = await self.get_department(department_id)
        merged = {name: getattr(department, name) for name in EDITABLE_FIELDS}
        merged.update(changes)
        merged["department_code"] = sanitize_input(merged["department_code"])
        merged["department_name"] = sanitize_input(merged["department_name"])
        merged["manager_name"] = sanitize_input(merged["manager_name"]) or None

        validate_department_fields(
            merged["department_code"], merged["department_name"], merged["budget"]
        )
        await self._check_unique(merged["department_code"], exclude_id=department_id)

        if merged["budget"] is not None:
            merged["budget"] = parse_decimal(merged["budget"])
        for name, value in merged.items():
            setattr(department, name, value)
        await self.store.flush("department")

        logger.info("Updated department %s", department_id)
        return department

    async def deactivate_department(self, department_id: int) -> Department:
        """Soft-delete; employees keep their department reference."""
        department = await self.get_department(department_id)
        if department.is_active:
            department.is_active = False
            await self.store.flush("department")
            logger.info("Deactivated department %s", department_id)
        return department

    async def get_department(self, department_id: int) -> Department:
        department = await self.store.find_department_by_id(department_id)
        if department is None:
            raise NotFoundError("department", department_id)
        return department

    async def list_departments(self, include_inactive: bool = False) -> list[Department]:
        return await self.store.list_departments(include_inactive=include_inactive)

    async def search_departments(self, term: str) -> list[Department]:
        if not sanitize_input(term):
            return await self.store.list_departments()
        return await self.store.search_departments(term)

    async def employee_count(self, department_id: int) -> int:
        """Live count of the department's ACTIVE employees."""
        await self.get_department(department_id)
        employees = await self.store.list_active_employees_by_department(department_id)
        return len(employees)

    async def _check_unique(self, department_code: str, exclude_id: int | None = None) -> None:
        if await self.store.exists_unique_conflict(
            "department", "department_code", department_code, exclude_id
        ):
            raise ConflictError("department", "department_code", department_code)
