# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Path

from shift_scheduler.api.deps import HolidayDep, LimitsDep, ManagerDep
from shift_scheduler.db import SessionDep
from shift_scheduler.schemas.statistics import (
    EmployeeMonthlyCountResponse,
    EmployeeYearlyCountResponse,
    LeaderboardResponse,
    MonthlyScheduleResponse,
    RecalculateResponse,
    YearlyStatsResponse,
)
from shift_scheduler.services import statistics as statistics_service

statistics_router = APIRouter(
    prefix="/statistics",
    tags=["statistics"],
)


@statistics_router.get(
    "/monthly-schedule/{year}/{month}",
    response_model=MonthlyScheduleResponse,
)
async def get_monthly_schedule(
    session: SessionDep,
    holidays: HolidayDep,
    auth: ManagerDep,
    year: int = Path(ge=1),
    month: int = Path(ge=1, le=12),
) -> MonthlyScheduleResponse:
    """Whole-month overview of who is scheduled on each day (manager only)."""
    return await statistics_service.get_monthly_schedule(session, holidays, year, month)


@statistics_router.get(
    "/leaderboard/{year}/{month}",
    response_model=LeaderboardResponse,
)
async def get_monthly_leaderboard(
    session: SessionDep,
    auth: ManagerDep,
    limits: LimitsDep,
    year: int = Path(ge=1),
    month: int = Path(ge=1, le=12),
) -> LeaderboardResponse:
    """Employees ranked by shift days in the month (manager only)."""
    return await statistics_service.get_monthly_leaderboard(session, year, month, limits)


@statistics_router.get(
    "/yearly/{year}",
    response_model=YearlyStatsResponse,
)
async def get_yearly_stats(
    session: SessionDep,
    auth: ManagerDep,
    limits: LimitsDep,
    year: int = Path(ge=1),
) -> YearlyStatsResponse:
    """Per-employee yearly statistics (manager only)."""
    return await statistics_service.get_yearly_stats(session, year, limits)


@statistics_router.get(
    "/employees/{user_id}/monthly/{year}/{month}",
    response_model=EmployeeMonthlyCountResponse,
)
async def get_employee_monthly_count(
    user_id: uuid.UUID,
    session: SessionDep,
    auth: ManagerDep,
    limits: LimitsDep,
    year: int = Path(ge=1),
    month: int = Path(ge=1, le=12),
) -> EmployeeMonthlyCountResponse:
    """Shift days of one employee in a month (manager only)."""
    return await statistics_service.get_employee_monthly_count(session, user_id, year, month, limits)


@statistics_router.get(
    "/employees/{user_id}/yearly/{year}",
    response_model=EmployeeYearlyCountResponse,
)
async def get_employee_yearly_count(
    user_id: uuid.UUID,
    session: SessionDep,
    auth: ManagerDep,
    year: int = Path(ge=1),
) -> EmployeeYearlyCountResponse:
    """Shift days of one employee in a year (manager only)."""
    return await statistics_service.get_employee_yearly_count(session, user_id, year)


@statistics_router.post(
    "/recalculate/{year}/{month}",
    response_model=RecalculateResponse,
)
async def recalculate_statistics(
    session: SessionDep,
    auth: ManagerDep,
    year: int = Path(ge=1),
    month: int = Path(ge=1, le=12),
) -> RecalculateResponse:
    """Rewrite the statistics snapshot for a month and its year (manager only)."""
    processed = await statistics_service.recalculate_statistics(session, year, month)
    return RecalculateResponse(year=year, month=month, employees_processed=processed)
