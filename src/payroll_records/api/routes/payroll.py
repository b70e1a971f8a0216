"""Payroll record API endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from payroll_records.api.dependencies import ActingUser, DbSession
from payroll_records.api.schemas import (
    ErrorResponse,
    PaymentRequest,
    PayrollCreate,
    PayrollRecordListResponse,
    PayrollRecordResponse,
    PayrollUpdate,
    SalaryAmounts,
    SalaryBreakdownResponse,
)
from payroll_records.services.payroll_service import PayrollService, preview_salary

router = APIRouter(prefix="/payroll-records", tags=["payroll-records"])


# ============================================================================
# Payroll record CRUD
# ============================================================================


@router.post(
    "",
    response_model=PayrollRecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def create_payroll_record(
    db: DbSession,
    actor: ActingUser,
    payload: PayrollCreate,
) -> PayrollRecordResponse:
    """Create a PENDING payroll record; the acting user is recorded as creator."""
    record = await PayrollService(db).create_record(
        **payload.model_dump(),
        created_by=actor.user_id if actor is not None else None,
    )
    await db.commit()
    await db.refresh(record, ["created_at"])
    return PayrollRecordResponse.from_record(record)


@router.get(
    "",
    response_model=PayrollRecordListResponse,
    responses={422: {"model": ErrorResponse}},
)
async def list_payroll_records(
    db: DbSession,
    employee_id: int | None = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    period_start: date | None = None,
    period_end: date | None = None,
) -> PayrollRecordListResponse:
    """List payroll records, newest pay period first."""
    records = await PayrollService(db).list_records(
        employee_id=employee_id,
        status=status_filter,
        period_start=period_start,
        period_end=period_end,
    )
    return PayrollRecordListResponse(
        items=[PayrollRecordResponse.from_record(r) for r in records],
        total=len(records),
    )


@router.post(
    "/calculate",
    response_model=SalaryBreakdownResponse,
    responses={422: {"model": ErrorResponse}},
)
async def calculate_salary(payload: SalaryAmounts) -> SalaryBreakdownResponse:
    """Compute derived salary fields without saving anything."""
    breakdown = preview_salary(**payload.model_dump())
    return SalaryBreakdownResponse.from_breakdown(breakdown)


@router.get(
    "/{payroll_id}",
    response_model=PayrollRecordResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll_record(
    db: DbSession,
    payroll_id: Annotated[int, Path()],
) -> PayrollRecordResponse:
    record = await PayrollService(db).get_record(payroll_id)
    return PayrollRecordResponse.from_record(record)


@router.patch(
    "/{payroll_id}",
    response_model=PayrollRecordResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def update_payroll_record(
    db: DbSession,
    payroll_id: Annotated[int, Path()],
    payload: PayrollUpdate,
) -> PayrollRecordResponse:
    """Edit a PENDING payroll record."""
    record = await PayrollService(db).update_record(
        payroll_id, **payload.model_dump(exclude_unset=True)
    )
    await db.commit()
    return PayrollRecordResponse.from_record(record)


# ============================================================================
# Payment status transitions
# ============================================================================


@router.post(
    "/{payroll_id}/pay",
    response_model=PayrollRecordResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def mark_paid(
    db: DbSession,
    payroll_id: Annotated[int, Path()],
    payload: PaymentRequest | None = None,
) -> PayrollRecordResponse:
    """Mark a PENDING record as PAID; the payment date defaults to today."""
    payment_date = payload.payment_date if payload is not None else None
    record = await PayrollService(db).mark_paid(payroll_id, payment_date=payment_date)
    await db.commit()
    return PayrollRecordResponse.from_record(record)


@router.post(
    "/{payroll_id}/cancel",
    response_model=PayrollRecordResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def cancel_payroll_record(
    db: DbSession,
    payroll_id: Annotated[int, Path()],
) -> PayrollRecordResponse:
    record = await PayrollService(db).cancel(payroll_id)
    await db.commit()
    return PayrollRecordResponse.from_record(record)
