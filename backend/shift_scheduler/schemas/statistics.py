# ruff: noqa: TC003
from __future__ import annotations

import uuid
import datetime

from pydantic import BaseModel


class ScheduledEmployee(BaseModel):
    """An employee scheduled on a given day."""

    user_id: uuid.UUID
    full_name: str
    shift_date: datetime.date


class EmployeeSummary(BaseModel):
    """Basic employee information shown alongside a schedule."""

    user_id: uuid.UUID
    full_name: str
    username: str


class DaySchedule(BaseModel):
    """One calendar day of the monthly overview."""

    date: datetime.date
    day_of_month: int
    day_of_week: int  # 0 = Sunday ... 6 = Saturday
    is_weekend: bool
    is_holiday: bool
    holiday_name: str
    scheduled_employees: list[ScheduledEmployee]
    current_shift_count: int


class MonthlyScheduleResponse(BaseModel):
    """Whole-month overview for managers."""

    year: int
    month: int
    employees: list[EmployeeSummary]
    day_schedules: list[DaySchedule]
    total_days: int


class LeaderboardEntry(BaseModel):
    """Ranked monthly shift count for one employee."""

    rank: int
    user_id: uuid.UUID
    full_name: str
    shift_days: int
    is_compliant: bool
    compliance_percentage: float


class LeaderboardResponse(BaseModel):
    """Monthly leaderboard."""

    year: int
    month: int
    items: list[LeaderboardEntry]
    total: int


class EmployeeYearlyStats(BaseModel):
    """Yearly totals and per-month breakdown for one employee."""

    user_id: uuid.UUID
    full_name: str
    total_yearly_shifts: int
    average_monthly_shifts: float
    monthly_breakdown: dict[int, int]
    average_compliance_percentage: float


class YearlyStatsResponse(BaseModel):
    """Yearly statistics across all employees."""

    year: int
    items: list[EmployeeYearlyStats]
    total: int


class EmployeeMonthlyCountResponse(BaseModel):
    """Shift count of one employee in one month."""

    user_id: uuid.UUID
    year: int
    month: int
    shift_days: int
    is_compliant: bool
    min_required: int
    max_allowed: int


class EmployeeYearlyCountResponse(BaseModel):
    """Shift count of one employee in one year."""

    user_id: uuid.UUID
    year: int
    total_shift_days: int
    average_monthly_shifts: float


class RecalculateResponse(BaseModel):
    """Result of a statistics recompute."""

    year: int
    month: int
    employees_processed: int
