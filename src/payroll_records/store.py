"""Record store: persistence collaborator for the payroll core.

Every method runs against the caller's session so a check and the write
that depends on it share one transaction. Driver failures are translated
into domain errors: unique violations become ConflictError, other integrity
violations (foreign key, check) become ValidationError, lost or refused
connections become StoreUnavailableError.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from datetime import date
from typing import Any, Iterator

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from payroll_records.errors import ConflictError, StoreUnavailableError, ValidationError
from payroll_records.models import (
    Department,
    Employee,
    EmploymentStatus,
    PayrollRecord,
    User,
)

logger = logging.getLogger(__name__)

# entity kind -> (model, primary key column name, fields with a unique constraint)
UNIQUE_FIELDS: dict[str, tuple[type, str, frozenset[str]]] = {
    "employee": (Employee, "employee_id", frozenset({"employee_code", "email"})),
    "department": (Department, "department_id", frozenset({"department_code"})),
    "user": (User, "user_id", frozenset({"username"})),
}

UNIQUE_VIOLATION_SQLSTATE = "23505"

# SQLite: "UNIQUE constraint failed: employee.email"; PostgreSQL: "Key (email)=(...)"
UNIQUE_COLUMN_PATTERNS = (
    re.compile(r"UNIQUE constraint failed: \w+\.(\w+)"),
    re.compile(r"Key \((\w+)\)="),
)


def is_unique_violation(error: IntegrityError) -> bool:
    """Whether an integrity error comes from a unique constraint."""
    sqlstate = getattr(error.orig, "sqlstate", None) or getattr(error.orig, "pgcode", None)
    if sqlstate:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    message = str(error.orig)
    return "UNIQUE constraint failed" in message or "unique constraint" in message


def violated_column(error: IntegrityError) -> str | None:
    """Column named in a unique violation message, when the driver reports one."""
    message = str(error.orig)
    for pattern in UNIQUE_COLUMN_PATTERNS:
        match = pattern.search(message)
        if match:
            return match.group(1)
    return None


@contextmanager
def translate_store_errors(operation: str, entity: str = "record") -> Iterator[None]:
    """Map SQLAlchemy/driver failures raised inside the block to domain errors."""
    try:
        yield
    except IntegrityError as e:
        logger.warning("Integrity violation during %s: %s", operation, e.orig)
        if is_unique_violation(e):
            column = violated_column(e)
            raise ConflictError(
                entity,
                column or "record",
                None,
                f"{entity} conflicts with an existing record ({operation})",
            ) from e
        raise ValidationError(entity, f"violates a store constraint ({operation})") from e
    except (OperationalError, InterfaceError, OSError) as e:
        logger.exception("Record store unavailable during %s", operation)
        raise StoreUnavailableError(operation, e) from e


class RecordStore:
    """Async accessors for employees, departments, users and payroll records."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _scalars(self, query: Any, operation: str) -> list[Any]:
        with translate_store_errors(operation):
            result = await self.session.execute(query)
            return list(result.scalars().all())

    async def _get(self, model: type, key: int, operation: str, *options: Any) -> Any:
        with translate_store_errors(operation):
            return await self.session.get(model, key, options=list(options) or None)

    # ===== Writes =====

    async def add(self, obj: Any, entity: str = "record") -> Any:
        """Add and flush a new object so constraint violations surface now."""
        with translate_store_errors(f"create {entity}", entity):
            self.session.add(obj)
            await self.session.flush()
        return obj

    async def flush(self, entity: str = "record") -> None:
        """Flush pending changes to the store."""
        with translate_store_errors(f"update {entity}", entity):
            await self.session.flush()

    # ===== Single-record reads =====

    async def find_employee_by_id(self, employee_id: int) -> Employee | None:
        return await self._get(Employee, employee_id, "find employee")

    async def find_department_by_id(self, department_id: int) -> Department | None:
        return await self._get(Department, department_id, "find department")

    async def find_user_by_id(self, user_id: int) -> User | None:
        return await self._get(User, user_id, "find user")

    async def find_payroll_record_by_id(self, payroll_id: int) -> PayrollRecord | None:
        return await self._get(
            PayrollRecord,
            payroll_id,
            "find payroll record",
            selectinload(PayrollRecord.employee),
        )

    # ===== Collections =====

    async def find_payroll_records(self, employee_id: int) -> list[PayrollRecord]:
        """All payroll records of one employee, newest period first."""
        query = (
            select(PayrollRecord)
            .where(PayrollRecord.employee_id == employee_id)
            .order_by(PayrollRecord.pay_period_end.desc())
        )
        return await self._scalars(query, "find payroll records")

    async def list_payroll_records(
        self,
        employee_id: int | None = None,
        status: str | None = None,
        period_start: date | None = None,
        period_end: date | None = None,
    ) -> list[PayrollRecord]:
        """Payroll records with their employee loaded.

        A date range selects records whose period lies entirely inside it.
        """
        query = (
            select(PayrollRecord)
            .join(Employee, PayrollRecord.employee_id == Employee.employee_id)
            .options(selectinload(PayrollRecord.employee))
        )
        if employee_id is not None:
            query = query.where(PayrollRecord.employee_id == employee_id)
        if status is not None:
            query = query.where(PayrollRecord.payment_status == status)
        if period_start is not None:
            query = query.where(PayrollRecord.pay_period_start >= period_start)
        if period_end is not None:
            query = query.where(PayrollRecord.pay_period_end <= period_end)
        query = query.order_by(
            PayrollRecord.pay_period_end.desc(),
            Employee.first_name,
            PayrollRecord.payroll_id,
        )
        return await self._scalars(query, "list payroll records")

    async def list_employees(
        self,
        status: str | None = None,
        department_id: int | None = None,
    ) -> list[Employee]:
        query = select(Employee)
        if status is not None:
            query = query.where(Employee.employment_status == status)
        if department_id is not None:
            query = query.where(Employee.department_id == department_id)
        query = query.order_by(Employee.first_name, Employee.last_name, Employee.employee_id)
        return await self._scalars(query, "list employees")

    async def search_employees(self, term: str) -> list[Employee]:
        """Employees whose code, name or email contains ``term``."""
        pattern = f"%{term.strip()}%"
        query = (
            select(Employee)
            .where(
                or_(
                    Employee.employee_code.ilike(pattern),
                    Employee.first_name.ilike(pattern),
                    Employee.last_name.ilike(pattern),
                    Employee.email.ilike(pattern),
                )
            )
            .order_by(Employee.first_name, Employee.last_name, Employee.employee_id)
        )
        return await self._scalars(query, "search employees")

    async def list_active_employees_by_department(self, department_id: int) -> list[Employee]:
        """ACTIVE employees linked to a department."""
        query = (
            select(Employee)
            .where(
                Employee.department_id == department_id,
                Employee.employment_status == EmploymentStatus.ACTIVE.value,
            )
            .order_by(Employee.first_name, Employee.last_name, Employee.employee_id)
        )
        return await self._scalars(query, "list department employees")

    async def list_departments(self, include_inactive: bool = False) -> list[Department]:
        query = select(Department)
        if not include_inactive:
            query = query.where(Department.is_active.is_(True))
        query = query.order_by(Department.department_name, Department.department_id)
        return await self._scalars(query, "list departments")

    async def search_departments(self, term: str) -> list[Department]:
        """Active departments whose code, name or manager contains ``term``."""
        pattern = f"%{term.strip()}%"
        query = (
            select(Department)
            .where(
                Department.is_active.is_(True),
                or_(
                    Department.department_code.ilike(pattern),
                    Department.department_name.ilike(pattern),
                    Department.manager_name.ilike(pattern),
                ),
            )
            .order_by(Department.department_name, Department.department_id)
        )
        return await self._scalars(query, "search departments")

    # ===== Counts and uniqueness =====

    async def count_employees_by_status(self) -> dict[str, int]:
        """Employee count per employment status (statuses with no rows omitted)."""
        query = select(Employee.employment_status, func.count()).group_by(
            Employee.employment_status
        )
        with translate_store_errors("count employees"):
            result = await self.session.execute(query)
            return {status: count for status, count in result.all()}

    async def exists_unique_conflict(
        self,
        entity_kind: str,
        field: str,
        value: Any,
        exclude_id: int | None = None,
    ) -> bool:
        """Whether another record of ``entity_kind`` already holds ``value``.

        Raises:
            ValueError: If the entity kind or field has no unique constraint
        """
        if entity_kind not in UNIQUE_FIELDS:
            raise ValueError(f"Unknown entity kind '{entity_kind}'")
        model, pk_name, fields = UNIQUE_FIELDS[entity_kind]
        if field not in fields:
            raise ValueError(f"'{field}' is not a unique field of {entity_kind}")

        query = select(func.count()).select_from(model).where(getattr(model, field) == value)
        if exclude_id is not None:
            query = query.where(getattr(model, pk_name) != exclude_id)

        with translate_store_errors(f"check {entity_kind} {field}"):
            count = await self.session.scalar(query)
        return bool(count)
