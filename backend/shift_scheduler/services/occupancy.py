"""Read-side queries over pending shift records."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from shift_scheduler.models.enums import ShiftStatus
from shift_scheduler.models.shift import ShiftRecord
from shift_scheduler.services.policy import month_bounds

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession


def _pending() -> list:
    return [col(ShiftRecord.status) == ShiftStatus.PENDING.value]


def _in_range(start: date, end: date) -> list:
    return [col(ShiftRecord.shift_date) >= start, col(ShiftRecord.shift_date) < end]


async def count_user_month_shifts(session: AsyncSession, user_id: uuid.UUID, year: int, month: int) -> int:
    """Number of pending shifts the user holds in the given month."""
    first_day, next_first = month_bounds(year, month)
    result = await session.execute(
        select(func.count())
        .select_from(ShiftRecord)
        .where(col(ShiftRecord.user_id) == user_id, *_in_range(first_day, next_first), *_pending())
    )
    return result.scalar_one()


async def count_user_year_shifts(session: AsyncSession, user_id: uuid.UUID, year: int) -> int:
    """Number of pending shifts the user holds in the given year."""
    first_day = date(year, 1, 1)
    next_first = date(year + 1, 1, 1)
    result = await session.execute(
        select(func.count())
        .select_from(ShiftRecord)
        .where(col(ShiftRecord.user_id) == user_id, *_in_range(first_day, next_first), *_pending())
    )
    return result.scalar_one()


async def count_daily_shifts(session: AsyncSession, shift_date: date) -> int:
    """Number of pending shifts on ``shift_date`` across all users."""
    result = await session.execute(
        select(func.count())
        .select_from(ShiftRecord)
        .where(col(ShiftRecord.shift_date) == shift_date, *_pending())
    )
    return result.scalar_one()


async def has_pending_shift(session: AsyncSession, user_id: uuid.UUID, shift_date: date) -> bool:
    result = await session.execute(
        select(col(ShiftRecord.id))
        .where(col(ShiftRecord.user_id) == user_id, col(ShiftRecord.shift_date) == shift_date, *_pending())
        .limit(1)
    )
    return result.scalar_one_or_none() is not None


async def list_user_month_shifts(
    session: AsyncSession,
    user_id: uuid.UUID,
    year: int,
    month: int,
) -> list[ShiftRecord]:
    """The user's pending shifts in the month, ordered by date."""
    first_day, next_first = month_bounds(year, month)
    result = await session.execute(
        select(ShiftRecord)
        .where(col(ShiftRecord.user_id) == user_id, *_in_range(first_day, next_first), *_pending())
        .order_by(col(ShiftRecord.shift_date))
    )
    return list(result.scalars().all())


async def list_shifts_between(session: AsyncSession, start: date, end: date) -> list[ShiftRecord]:
    """All pending shifts with ``start <= shift_date < end``, ordered by date."""
    result = await session.execute(
        select(ShiftRecord)
        .where(*_in_range(start, end), *_pending())
        .order_by(col(ShiftRecord.shift_date), col(ShiftRecord.created_at))
    )
    return list(result.scalars().all())
