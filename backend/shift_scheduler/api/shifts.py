# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Path, Query, status

from shift_scheduler.api.deps import AuthDep, HolidayDep, LimitsDep, TodayDep, raise_for_outcome
from shift_scheduler.db import SessionDep
from shift_scheduler.exceptions import AppError
from shift_scheduler.schemas.shift import (
    AddShiftRequest,
    BulkShiftRequest,
    DailyCountResponse,
    MonthlyProgressResponse,
    ShiftActionResponse,
)
from shift_scheduler.services import shift as shift_service

shifts_router = APIRouter(prefix="/shifts", tags=["shifts"])


@shifts_router.post(
    "",
    response_model=ShiftActionResponse,
    status_code=201,
)
async def add_shift(
    payload: AddShiftRequest,
    session: SessionDep,
    holidays: HolidayDep,
    auth: AuthDep,
    today: TodayDep,
    limits: LimitsDep,
) -> ShiftActionResponse:
    """Schedule a single day (managers may target another employee)."""
    outcome = await shift_service.add_shift(
        session,
        holidays,
        auth,
        payload.shift_date,
        today=today,
        limits=limits,
        target_user_id=payload.target_user_id,
    )
    raise_for_outcome(outcome)
    return ShiftActionResponse(message=outcome.message)


@shifts_router.delete(
    "/{shift_date}",
    response_model=ShiftActionResponse,
)
async def remove_shift(
    shift_date: date,
    session: SessionDep,
    auth: AuthDep,
    target_user_id: uuid.UUID | None = Query(default=None),
) -> ShiftActionResponse:
    """Remove a scheduled day."""
    outcome = await shift_service.remove_shift(session, auth, shift_date, target_user_id=target_user_id)
    raise_for_outcome(outcome)
    return ShiftActionResponse(message=outcome.message)


@shifts_router.put(
    "/months/{year}/{month}",
    response_model=ShiftActionResponse,
)
async def save_monthly_shifts(
    payload: BulkShiftRequest,
    session: SessionDep,
    holidays: HolidayDep,
    auth: AuthDep,
    today: TodayDep,
    limits: LimitsDep,
    year: int = Path(ge=1),
    month: int = Path(ge=1, le=12),
) -> ShiftActionResponse:
    """Replace a whole month of shifts; all-or-nothing."""
    outcome = await shift_service.save_monthly_shifts(
        session,
        holidays,
        auth,
        year,
        month,
        payload.shift_dates,
        today=today,
        limits=limits,
        target_user_id=payload.target_user_id,
    )
    raise_for_outcome(outcome)
    return ShiftActionResponse(message=outcome.message)


@shifts_router.get(
    "/progress/{year}/{month}",
    response_model=MonthlyProgressResponse,
)
async def get_monthly_progress(
    session: SessionDep,
    auth: AuthDep,
    limits: LimitsDep,
    year: int = Path(ge=1),
    month: int = Path(ge=1, le=12),
    target_user_id: uuid.UUID | None = Query(default=None),
) -> MonthlyProgressResponse:
    """Scheduled dates and compliance bounds for one month."""
    user_id = auth.resolve_target(target_user_id)
    if user_id is None:
        raise AppError("Manager access required", status_code=status.HTTP_403_FORBIDDEN)
    return await shift_service.get_monthly_progress(session, user_id, year, month, limits)


@shifts_router.get(
    "/daily-count/{shift_date}",
    response_model=DailyCountResponse,
)
async def get_daily_count(
    shift_date: date,
    session: SessionDep,
    auth: AuthDep,
    limits: LimitsDep,
) -> DailyCountResponse:
    """Number of employees scheduled on a date."""
    return await shift_service.get_daily_count(session, shift_date, limits)
