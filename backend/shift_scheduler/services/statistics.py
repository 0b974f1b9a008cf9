"""Reporting service: monthly overview, leaderboard, yearly stats, and snapshot recompute."""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from shift_scheduler.models.base import utc_now
from shift_scheduler.models.statistic import ShiftStatistic
from shift_scheduler.schemas.statistics import (
    DaySchedule,
    EmployeeMonthlyCountResponse,
    EmployeeSummary,
    EmployeeYearlyCountResponse,
    EmployeeYearlyStats,
    LeaderboardEntry,
    LeaderboardResponse,
    MonthlyScheduleResponse,
    ScheduledEmployee,
    YearlyStatsResponse,
)
from shift_scheduler.services.employee import get_employee_service, list_active_employees
from shift_scheduler.services.occupancy import count_user_month_shifts, count_user_year_shifts, list_shifts_between
from shift_scheduler.services.policy import (
    ShiftLimits,
    compliance_percentage,
    format_month,
    is_compliant,
    is_weekend,
    iter_month_days,
    month_bounds,
    round_two_places,
)

if TYPE_CHECKING:
    import uuid
    from datetime import datetime

    from sqlalchemy.ext.asyncio import AsyncSession

    from shift_scheduler.services.holiday import HolidayService

logger = logging.getLogger(__name__)

_MONTHS_PER_YEAR = 12


def _average_per_month(total: int) -> float:
    return round_two_places(Decimal(total) / _MONTHS_PER_YEAR)


async def get_monthly_schedule(
    session: AsyncSession,
    holidays: HolidayService,
    year: int,
    month: int,
) -> MonthlyScheduleResponse:
    """Day-by-day overview of who is scheduled in the month."""
    logger.info("Building monthly schedule for %s", format_month(year, month))
    employees = await list_active_employees(get_employee_service())
    names = {e.id: e.full_name for e in employees}

    first_day, next_first = month_bounds(year, month)
    records = await list_shifts_between(session, first_day, next_first)
    by_date: dict[date, list[ScheduledEmployee]] = defaultdict(list)
    for record in records:
        by_date[record.shift_date].append(
            ScheduledEmployee(
                user_id=record.user_id,
                full_name=names.get(record.user_id, str(record.user_id)),
                shift_date=record.shift_date,
            )
        )

    holiday_names: dict[date, str] = {}
    for entry in await holidays.month_holidays(year, month):
        holiday_names[entry.holiday_date] = await holidays.holiday_name(entry.holiday_date)

    days = iter_month_days(year, month)
    day_schedules = [
        DaySchedule(
            date=day,
            day_of_month=day.day,
            day_of_week=day.isoweekday() % 7,
            is_weekend=is_weekend(day),
            is_holiday=day in holiday_names,
            holiday_name=holiday_names.get(day, ""),
            scheduled_employees=by_date.get(day, []),
            current_shift_count=len(by_date.get(day, [])),
        )
        for day in days
    ]

    return MonthlyScheduleResponse(
        year=year,
        month=month,
        employees=[EmployeeSummary(user_id=e.id, full_name=e.full_name, username=e.username) for e in employees],
        day_schedules=day_schedules,
        total_days=len(days),
    )


async def get_monthly_leaderboard(
    session: AsyncSession,
    year: int,
    month: int,
    limits: ShiftLimits | None = None,
) -> LeaderboardResponse:
    """Employees ranked by shift count (descending), ties broken by name."""
    limits = limits or ShiftLimits()
    employees = await list_active_employees(get_employee_service())

    first_day, next_first = month_bounds(year, month)
    counts = Counter(r.user_id for r in await list_shifts_between(session, first_day, next_first))

    ranked = sorted(employees, key=lambda e: (-counts[e.id], e.full_name))
    items = [
        LeaderboardEntry(
            rank=index + 1,
            user_id=employee.id,
            full_name=employee.full_name,
            shift_days=counts[employee.id],
            is_compliant=is_compliant(counts[employee.id], limits),
            compliance_percentage=compliance_percentage(counts[employee.id], limits),
        )
        for index, employee in enumerate(ranked)
    ]
    return LeaderboardResponse(year=year, month=month, items=items, total=len(items))


async def get_yearly_stats(
    session: AsyncSession,
    year: int,
    limits: ShiftLimits | None = None,
) -> YearlyStatsResponse:
    """Per-employee yearly totals with a month-by-month breakdown."""
    limits = limits or ShiftLimits()
    employees = await list_active_employees(get_employee_service())

    records = await list_shifts_between(session, date(year, 1, 1), date(year + 1, 1, 1))
    per_user: dict[uuid.UUID, Counter[int]] = defaultdict(Counter)
    for record in records:
        per_user[record.user_id][record.shift_date.month] += 1

    items: list[EmployeeYearlyStats] = []
    for employee in employees:
        months = per_user.get(employee.id, Counter())
        breakdown = {m: months[m] for m in range(1, _MONTHS_PER_YEAR + 1)}
        total = sum(breakdown.values())
        compliant_months = sum(1 for count in breakdown.values() if is_compliant(count, limits))
        items.append(
            EmployeeYearlyStats(
                user_id=employee.id,
                full_name=employee.full_name,
                total_yearly_shifts=total,
                average_monthly_shifts=_average_per_month(total),
                monthly_breakdown=breakdown,
                average_compliance_percentage=round_two_places(
                    Decimal(compliant_months) / _MONTHS_PER_YEAR * 100
                ),
            )
        )

    return YearlyStatsResponse(year=year, items=items, total=len(items))


async def get_employee_monthly_count(
    session: AsyncSession,
    user_id: uuid.UUID,
    year: int,
    month: int,
    limits: ShiftLimits | None = None,
) -> EmployeeMonthlyCountResponse:
    limits = limits or ShiftLimits()
    count = await count_user_month_shifts(session, user_id, year, month)
    return EmployeeMonthlyCountResponse(
        user_id=user_id,
        year=year,
        month=month,
        shift_days=count,
        is_compliant=is_compliant(count, limits),
        min_required=limits.min_shifts_per_month,
        max_allowed=limits.max_shifts_per_month,
    )


async def get_employee_yearly_count(
    session: AsyncSession,
    user_id: uuid.UUID,
    year: int,
) -> EmployeeYearlyCountResponse:
    total = await count_user_year_shifts(session, user_id, year)
    return EmployeeYearlyCountResponse(
        user_id=user_id,
        year=year,
        total_shift_days=total,
        average_monthly_shifts=_average_per_month(total),
    )


async def _upsert_statistic(
    session: AsyncSession,
    user_id: uuid.UUID,
    year: int,
    month: int | None,
    total: int,
    calculated_at: datetime,
) -> None:
    if month is None:
        month_filter = col(ShiftStatistic.stat_month).is_(None)
    else:
        month_filter = col(ShiftStatistic.stat_month) == month
    result = await session.execute(
        select(ShiftStatistic).where(
            col(ShiftStatistic.user_id) == user_id,
            col(ShiftStatistic.stat_year) == year,
            month_filter,
        )
    )
    statistic = result.scalar_one_or_none()
    if statistic is None:
        session.add(
            ShiftStatistic(
                user_id=user_id,
                stat_year=year,
                stat_month=month,
                total_shift_days=total,
                last_calculated_at=calculated_at,
            )
        )
    else:
        statistic.total_shift_days = total
        statistic.last_calculated_at = calculated_at


async def recalculate_statistics(session: AsyncSession, year: int, month: int) -> int:
    """Rewrite the monthly and yearly snapshot rows of every active employee.

    Returns the number of employees processed.
    """
    logger.info("Recalculating statistics for %s", format_month(year, month))
    employees = await list_active_employees(get_employee_service())
    calculated_at = utc_now()

    try:
        for employee in employees:
            monthly = await count_user_month_shifts(session, employee.id, year, month)
            yearly = await count_user_year_shifts(session, employee.id, year)
            await _upsert_statistic(session, employee.id, year, month, monthly, calculated_at)
            await _upsert_statistic(session, employee.id, year, None, yearly, calculated_at)
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception("Statistics recalculation failed for %s", format_month(year, month))
        raise

    logger.info("Recalculated statistics for %s (%d employees)", format_month(year, month), len(employees))
    return len(employees)
