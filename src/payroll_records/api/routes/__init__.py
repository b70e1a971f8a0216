"""API routes."""

from payroll_records.api.routes.departments import router as departments_router
from payroll_records.api.routes.employees import router as employees_router
from payroll_records.api.routes.health import router as health_router
from payroll_records.api.routes.payroll import router as payroll_router
from payroll_records.api.routes.reports import router as reports_router
from payroll_records.api.routes.users import router as users_router

__all__ = [
    "departments_router",
    "employees_router",
    "health_router",
    "payroll_router",
    "reports_router",
    "users_router",
]
