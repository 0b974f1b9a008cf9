"""Decides whether a user may claim a date."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shift_scheduler.services.occupancy import count_daily_shifts, count_user_month_shifts, has_pending_shift
from shift_scheduler.services.policy import ShiftLimits, format_month, open_scheduling_month

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from shift_scheduler.services.holiday import HolidayService


@dataclass(frozen=True)
class ValidationResult:
    """Accept/reject decision with a user-facing reason."""

    valid: bool
    reason: str


_PASSED = ValidationResult(valid=True, reason="Validation passed")


def already_scheduled_message(shift_date: date) -> str:
    return f"Already scheduled on {shift_date.isoformat()}"


def window_message(today: date) -> str:
    return f"Only {format_month(*open_scheduling_month(today))} is open for scheduling"


class ShiftValidator:
    """Runs the scheduling checks in a fixed order, stopping at the first failure.

    1. holiday or weekend
    2. scheduling window (only the month after ``today``)
    3. the user's monthly cap
    4. the per-day staffing cap
    5. duplicate claim

    The validator only reads; it never writes to the session.
    """

    def __init__(self, session: AsyncSession, holidays: HolidayService, limits: ShiftLimits | None = None) -> None:
        self._session = session
        self._holidays = holidays
        self._limits = limits or ShiftLimits()

    async def check_holiday(self, shift_date: date) -> ValidationResult | None:
        await self._holidays.ensure_year_cached(shift_date.year)
        if await self._holidays.is_holiday(shift_date):
            name = await self._holidays.holiday_name(shift_date)
            return ValidationResult(False, f"Cannot schedule on {shift_date.isoformat()}: {name}")
        return None

    def check_window(self, shift_date: date, today: date) -> ValidationResult | None:
        if (shift_date.year, shift_date.month) != open_scheduling_month(today):
            return ValidationResult(False, window_message(today))
        return None

    async def check_monthly_cap(self, user_id: uuid.UUID, shift_date: date) -> ValidationResult | None:
        count = await count_user_month_shifts(self._session, user_id, shift_date.year, shift_date.month)
        if count >= self._limits.max_shifts_per_month:
            return ValidationResult(False, f"Monthly limit of {self._limits.max_shifts_per_month} days reached")
        return None

    async def check_daily_cap(self, shift_date: date) -> ValidationResult | None:
        if await count_daily_shifts(self._session, shift_date) >= self._limits.max_employees_per_day:
            return ValidationResult(False, f"Date is fully booked ({self._limits.max_employees_per_day} employees)")
        return None

    async def check_duplicate(self, user_id: uuid.UUID, shift_date: date) -> ValidationResult | None:
        if await has_pending_shift(self._session, user_id, shift_date):
            return ValidationResult(False, already_scheduled_message(shift_date))
        return None

    async def validate(self, user_id: uuid.UUID, shift_date: date, today: date) -> ValidationResult:
        """Return the first failing check, or a passing result."""
        failure = await self.check_holiday(shift_date)
        if failure is None:
            failure = self.check_window(shift_date, today)
        if failure is None:
            failure = await self.check_monthly_cap(user_id, shift_date)
        if failure is None:
            failure = await self.check_daily_cap(shift_date)
        if failure is None:
            failure = await self.check_duplicate(user_id, shift_date)
        return failure or _PASSED
