"""Load demo data through the application services.

Usage:
    DATABASE_URL=... python scripts/seed.py

Creates two users, three departments, a handful of employees and two months
of payroll records. Run scripts/init_db.py first.
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_records.database import dispose_db, get_session
from payroll_records.services import (
    DepartmentService,
    EmployeeService,
    PayrollService,
    UserService,
)

DEPARTMENTS = [
    ("HR", "Human Resources", "Alice Morgan", Decimal("250000")),
    ("IT", "Information Technology", "Brian Chen", Decimal("500000")),
    ("FIN", "Finance", "Carla Diaz", None),
]

EMPLOYEES = [
    ("EMP001", "John", "Smith", "john.smith@example.com", "IT", "Developer", "5000.00"),
    ("EMP002", "Jane", "Doe", "jane.doe@example.com", "IT", "Lead Developer", "6500.00"),
    ("EMP003", "Mark", "Lee", "mark.lee@example.com", "HR", "Recruiter", "3200.00"),
    ("EMP004", "Sara", "Khan", "sara.khan@example.com", "FIN", "Accountant", "4100.00"),
]

PERIODS = [
    (date(2024, 1, 1), date(2024, 1, 31)),
    (date(2024, 2, 1), date(2024, 2, 29)),
]


async def seed(session: AsyncSession) -> None:
    users = UserService(session)
    admin = await users.create_user("admin", "System Administrator", role="ADMIN")
    await users.create_user("hr.user", "HR Officer", role="HR")

    departments = {}
    for code, name, manager, budget in DEPARTMENTS:
        department = await DepartmentService(session).create_department(
            code, name, manager_name=manager, budget=budget
        )
        departments[code] = department.department_id

    employee_service = EmployeeService(session)
    employees = []
    for code, first, last, email, dept, position, salary in EMPLOYEES:
        employee = await employee_service.create_employee(
            employee_code=code,
            first_name=first,
            last_name=last,
            email=email,
            hire_date=date(2023, 6, 1),
            base_salary=Decimal(salary),
            department_id=departments[dept],
            position=position,
        )
        employees.append(employee)

    payroll = PayrollService(session)
    for start, end in PERIODS:
        for employee in employees:
            record = await payroll.create_record(
                employee.employee_id,
                start,
                end,
                overtime_hours=Decimal("10"),
                tax_deduction=Decimal("150.00"),
                created_by=admin.user_id,
            )
            if start.month == 1:
                await payroll.mark_paid(record.payroll_id, payment_date=end)

    print(f"Seeded {len(departments)} departments, {len(employees)} employees")
    print(f"Seeded {len(employees) * len(PERIODS)} payroll records")


async def run() -> None:
    try:
        async with get_session() as session:
            await seed(session)
    finally:
        await dispose_db()


def main() -> None:
    """Main entry point."""
    argparse.ArgumentParser(description="Load demo payroll data into DATABASE_URL").parse_args()
    asyncio.run(run())


if __name__ == "__main__":
    main()
