"""Employee API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from payroll_records.api.dependencies import ActingUser, DbSession
from payroll_records.api.schemas import (
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeUpdate,
    ErrorResponse,
)
from payroll_records.services.employee_service import EmployeeService

router = APIRouter(prefix="/employees", tags=["employees"])


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_employee(db: DbSession, payload: EmployeeCreate) -> EmployeeResponse:
    """Create a new ACTIVE employee."""
    employee = await EmployeeService(db).create_employee(**payload.model_dump())
    await db.commit()
    return EmployeeResponse.model_validate(employee)


@router.get("", response_model=EmployeeListResponse)
async def list_employees(
    db: DbSession,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    department_id: int | None = None,
    q: Annotated[str | None, Query(description="Search code, name or email")] = None,
) -> EmployeeListResponse:
    """List employees, optionally filtered by status and department or searched."""
    service = EmployeeService(db)
    if q:
        employees = await service.search_employees(q)
    else:
        employees = await service.list_employees(status=status_filter, department_id=department_id)
    return EmployeeListResponse(
        items=[EmployeeResponse.model_validate(e) for e in employees],
        total=len(employees),
    )


@router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee(
    db: DbSession,
    employee_id: Annotated[int, Path()],
) -> EmployeeResponse:
    employee = await EmployeeService(db).get_employee(employee_id)
    return EmployeeResponse.model_validate(employee)


@router.patch(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def update_employee(
    db: DbSession,
    actor: ActingUser,
    employee_id: Annotated[int, Path()],
    payload: EmployeeUpdate,
) -> EmployeeResponse:
    """Edit an employee; only the fields present in the body change."""
    employee = await EmployeeService(db).update_employee(
        employee_id, payload.model_dump(exclude_unset=True), actor=actor
    )
    await db.commit()
    return EmployeeResponse.model_validate(employee)


@router.delete(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def terminate_employee(
    db: DbSession,
    employee_id: Annotated[int, Path()],
) -> EmployeeResponse:
    """Soft-delete: the employee is marked TERMINATED and kept."""
    employee = await EmployeeService(db).terminate_employee(employee_id)
    await db.commit()
    return EmployeeResponse.model_validate(employee)
