"""Report API endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query

from payroll_records.api.dependencies import DbSession
from payroll_records.api.schemas import (
    BudgetUtilizationResponse,
    DepartmentSummaryResponse,
    EmployeeStatisticsResponse,
    ErrorResponse,
    PayrollReportRowResponse,
    PayrollTotalsResponse,
)
from payroll_records.services.aggregation import AggregationEngine
from payroll_records.store import RecordStore

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/employee-statistics", response_model=EmployeeStatisticsResponse)
async def employee_statistics(db: DbSession) -> EmployeeStatisticsResponse:
    stats = await AggregationEngine(RecordStore(db)).employee_statistics()
    return EmployeeStatisticsResponse.from_statistics(stats)


@router.get("/payroll-totals", response_model=PayrollTotalsResponse)
async def payroll_totals(db: DbSession) -> PayrollTotalsResponse:
    """Total net salary paid and record counts by payment status."""
    totals = await AggregationEngine(RecordStore(db)).payroll_totals()
    return PayrollTotalsResponse.from_totals(totals)


@router.get("/departments", response_model=list[DepartmentSummaryResponse])
async def department_report(db: DbSession) -> list[DepartmentSummaryResponse]:
    """Employee count and budget utilization per active department."""
    summaries = await AggregationEngine(RecordStore(db)).department_report()
    return [DepartmentSummaryResponse.from_summary(s) for s in summaries]


@router.get(
    "/departments/{department_id}/utilization",
    response_model=BudgetUtilizationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def department_utilization(
    db: DbSession,
    department_id: Annotated[int, Path()],
) -> BudgetUtilizationResponse:
    utilization = await AggregationEngine(RecordStore(db)).department_budget_utilization(
        department_id
    )
    return BudgetUtilizationResponse.from_utilization(utilization)


@router.get(
    "/payroll",
    response_model=list[PayrollReportRowResponse],
    responses={422: {"model": ErrorResponse}},
)
async def payroll_report(
    db: DbSession,
    period_start: date | None = None,
    period_end: date | None = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
) -> list[PayrollReportRowResponse]:
    """Payroll records within a date range and/or payment status."""
    rows = await AggregationEngine(RecordStore(db)).payroll_report(
        period_start=period_start,
        period_end=period_end,
        status=status_filter,
    )
    return [PayrollReportRowResponse.from_row(r) for r in rows]
