"""Scheduling policy: limits, the open scheduling month, and compliance math."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_EVEN, Decimal
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

if TYPE_CHECKING:
    from shift_scheduler.config import Settings

_TWO_PLACES = Decimal("0.01")
_WEEKDAY_LABELS = {5: "Saturday", 6: "Sunday"}


@dataclass(frozen=True)
class ShiftLimits:
    """Numeric scheduling rules applied by the validator and the store."""

    min_shifts_per_month: int = 6
    max_shifts_per_month: int = 15
    max_employees_per_day: int = 2

    @classmethod
    def from_settings(cls, settings: Settings) -> ShiftLimits:
        return cls(
            min_shifts_per_month=settings.min_shifts_per_month,
            max_shifts_per_month=settings.max_shifts_per_month,
            max_employees_per_day=settings.max_employees_per_day,
        )


def local_today(tz_name: str, now: datetime | None = None) -> date:
    """Return the calendar date in ``tz_name`` at ``now`` (defaults to the current instant)."""
    tz = ZoneInfo(tz_name)
    current = now.astimezone(tz) if now is not None else datetime.now(tz)
    return current.date()


def open_scheduling_month(today: date) -> tuple[int, int]:
    """Return (year, month) of the only month open for scheduling: the one after ``today``."""
    if today.month == 12:
        return today.year + 1, 1
    return today.year, today.month + 1


def format_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first day of the month and the first day of the following month."""
    first_day = date(year, month, 1)
    next_year, next_month = open_scheduling_month(first_day)
    return first_day, date(next_year, next_month, 1)


def days_in_month(year: int, month: int) -> int:
    first_day, next_first = month_bounds(year, month)
    return (next_first - first_day).days


def iter_month_days(year: int, month: int) -> list[date]:
    first_day = date(year, month, 1)
    return [first_day + timedelta(days=offset) for offset in range(days_in_month(year, month))]


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def weekend_label(day: date) -> str:
    """Display label for a weekend day, empty for weekdays."""
    return _WEEKDAY_LABELS.get(day.weekday(), "")


def is_compliant(count: int, limits: ShiftLimits) -> bool:
    return limits.min_shifts_per_month <= count <= limits.max_shifts_per_month


def round_two_places(value: Decimal) -> float:
    """Round half-to-even at two decimal places."""
    return float(value.quantize(_TWO_PLACES, rounding=ROUND_HALF_EVEN))


def compliance_percentage(count: int, limits: ShiftLimits) -> float:
    """Progress towards compliance.

    Below the minimum the percentage is relative to the minimum; at or above
    the maximum it is capped at 100; in between it is relative to the maximum.
    """
    if count < limits.min_shifts_per_month:
        return round_two_places(Decimal(count) / Decimal(limits.min_shifts_per_month) * 100)
    if count >= limits.max_shifts_per_month:
        return 100.0
    return round_two_places(Decimal(count) / Decimal(limits.max_shifts_per_month) * 100)
