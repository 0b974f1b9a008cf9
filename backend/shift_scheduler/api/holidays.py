# ruff: noqa: B008, TC001
from __future__ import annotations

from fastapi import APIRouter, Path

from shift_scheduler.api.deps import AuthDep, HolidayDep
from shift_scheduler.schemas.holiday import HolidayResponse, MonthCalendarResponse
from shift_scheduler.services.policy import is_weekend, iter_month_days

calendar_router = APIRouter(
    prefix="/calendar",
    tags=["calendar"],
)


@calendar_router.get(
    "/{year}/{month}",
    response_model=MonthCalendarResponse,
)
async def get_month_calendar(
    holidays: HolidayDep,
    auth: AuthDep,
    year: int = Path(ge=1),
    month: int = Path(ge=1, le=12),
) -> MonthCalendarResponse:
    """Holidays and weekends of a month, for rendering the scheduling calendar."""
    entries = await holidays.month_holidays(year, month)
    days = iter_month_days(year, month)
    return MonthCalendarResponse(
        year=year,
        month=month,
        holidays=[
            HolidayResponse(date=h.holiday_date, name=await holidays.holiday_name(h.holiday_date)) for h in entries
        ],
        weekends=[d for d in days if is_weekend(d)],
        total_days=len(days),
    )
