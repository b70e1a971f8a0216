"""Department API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from payroll_records.api.dependencies import DbSession
from payroll_records.api.schemas import (
    DepartmentCreate,
    DepartmentListResponse,
    DepartmentResponse,
    DepartmentUpdate,
    ErrorResponse,
)
from payroll_records.services.department_service import DepartmentService

router = APIRouter(prefix="/departments", tags=["departments"])


@router.post(
    "",
    response_model=DepartmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_department(db: DbSession, payload: DepartmentCreate) -> DepartmentResponse:
    department = await DepartmentService(db).create_department(**payload.model_dump())
    await db.commit()
    return DepartmentResponse.model_validate(department)


@router.get("", response_model=DepartmentListResponse)
async def list_departments(
    db: DbSession,
    include_inactive: bool = False,
    q: Annotated[str | None, Query(description="Search code, name or manager")] = None,
) -> DepartmentListResponse:
    """List active departments (or all), optionally searched."""
    service = DepartmentService(db)
    if q:
        departments = await service.search_departments(q)
    else:
        departments = await service.list_departments(include_inactive=include_inactive)
    return DepartmentListResponse(
        items=[DepartmentResponse.model_validate(d) for d in departments],
        total=len(departments),
    )


@router.get(
    "/{department_id}",
    response_model=DepartmentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_department(
    db: DbSession,
    department_id: Annotated[int, Path()],
) -> DepartmentResponse:
    department = await DepartmentService(db).get_department(department_id)
    return DepartmentResponse.model_validate(department)


@router.patch(
    "/{department_id}",
    response_model=DepartmentResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def update_department(
    db: DbSession,
    department_id: Annotated[int, Path()],
    payload: DepartmentUpdate,
) -> DepartmentResponse:
    """Edit a department; an explicit null budget clears it."""
    department = await DepartmentService(db).update_department(
        department_id, payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return DepartmentResponse.model_validate(department)


@router.delete(
    "/{department_id}",
    response_model=DepartmentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def deactivate_department(
    db: DbSession,
    department_id: Annotated[int, Path()],
) -> DepartmentResponse:
    """Soft-delete: the department is deactivated and kept."""
    department = await DepartmentService(db).deactivate_department(department_id)
    await db.commit()
    return DepartmentResponse.model_validate(department)


@router.get(
    "/{department_id}/employee-count",
    responses={404: {"model": ErrorResponse}},
)
async def department_employee_count(
    db: DbSession,
    department_id: Annotated[int, Path()],
) -> dict[str, int]:
    """Live count of the department's ACTIVE employees."""
    count = await DepartmentService(db).employee_count(department_id)
    return {"department_id": department_id, "employee_count": count}
