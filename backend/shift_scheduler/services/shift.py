"""Shift store: single-day add/remove and whole-month replacement."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from shift_scheduler.models.base import utc_now
from shift_scheduler.models.enums import OutcomeCode, ShiftStatus
from shift_scheduler.models.shift import ShiftRecord
from shift_scheduler.schemas.shift import DailyCountResponse, MonthlyProgressResponse, ShiftOutcome
from shift_scheduler.services.occupancy import count_daily_shifts, list_user_month_shifts
from shift_scheduler.services.policy import (
    ShiftLimits,
    format_month,
    is_compliant,
    month_bounds,
    open_scheduling_month,
)
from shift_scheduler.services.unit_of_work import ScheduleRejected, UnitOfWork, lock_shift_date
from shift_scheduler.services.validator import ShiftValidator, already_scheduled_message, window_message

if TYPE_CHECKING:
    import uuid
    from collections.abc import Sequence
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from shift_scheduler.schemas.auth import AuthContext
    from shift_scheduler.services.holiday import HolidayService

logger = logging.getLogger(__name__)

_FORBIDDEN_MESSAGE = "Only managers can manage other employees' shifts"
_INTERNAL_ERROR_MESSAGE = "Internal error while updating the schedule"


def _new_record(user_id: uuid.UUID, shift_date: date) -> ShiftRecord:
    now = utc_now()
    return ShiftRecord(
        user_id=user_id,
        shift_date=shift_date,
        status=ShiftStatus.PENDING.value,
        created_at=now,
        updated_at=now,
    )


# ---------------------------------------------------------------------------
# Point operations
# ---------------------------------------------------------------------------


async def add_shift(
    session: AsyncSession,
    holidays: HolidayService,
    acting_as: AuthContext,
    shift_date: date,
    *,
    today: date,
    limits: ShiftLimits | None = None,
    target_user_id: uuid.UUID | None = None,
) -> ShiftOutcome:
    """Claim one date for a user after re-running every validation check."""
    user_id = acting_as.resolve_target(target_user_id)
    if user_id is None:
        return ShiftOutcome.fail(OutcomeCode.FORBIDDEN, _FORBIDDEN_MESSAGE)

    # Fill the holiday cache before the lock: it commits on its own.
    await holidays.ensure_year_cached(shift_date.year)
    validator = ShiftValidator(session, holidays, limits)

    try:
        await lock_shift_date(session, shift_date)
        result = await validator.validate(user_id, shift_date, today)
        if not result.valid:
            await session.rollback()
            return ShiftOutcome.fail(OutcomeCode.REJECTED, result.reason)

        session.add(_new_record(user_id, shift_date))
        await session.commit()
    except IntegrityError:
        # Lost a race against a concurrent claim of the same date.
        await session.rollback()
        return ShiftOutcome.fail(OutcomeCode.REJECTED, already_scheduled_message(shift_date))
    except Exception:
        await session.rollback()
        logger.exception("Failed to schedule user %s on %s", user_id, shift_date)
        return ShiftOutcome.fail(OutcomeCode.ERROR, _INTERNAL_ERROR_MESSAGE)

    logger.info("User %s scheduled on %s", user_id, shift_date)
    return ShiftOutcome.ok("Shift scheduled")


async def remove_shift(
    session: AsyncSession,
    acting_as: AuthContext,
    shift_date: date,
    *,
    target_user_id: uuid.UUID | None = None,
) -> ShiftOutcome:
    """Delete the user's pending claim on one date."""
    user_id = acting_as.resolve_target(target_user_id)
    if user_id is None:
        return ShiftOutcome.fail(OutcomeCode.FORBIDDEN, _FORBIDDEN_MESSAGE)

    try:
        result = await session.execute(
            select(ShiftRecord).where(
                col(ShiftRecord.user_id) == user_id,
                col(ShiftRecord.shift_date) == shift_date,
                col(ShiftRecord.status) == ShiftStatus.PENDING.value,
            )
        )
        record = result.scalar_one_or_none()
        if record is None:
            await session.rollback()
            return ShiftOutcome.fail(OutcomeCode.NOT_FOUND, "Shift record not found")

        await session.delete(record)
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception("Failed to remove shift of user %s on %s", user_id, shift_date)
        return ShiftOutcome.fail(OutcomeCode.ERROR, _INTERNAL_ERROR_MESSAGE)

    logger.info("User %s removed shift on %s", user_id, shift_date)
    return ShiftOutcome.ok("Shift removed")


# ---------------------------------------------------------------------------
# Bulk month replace
# ---------------------------------------------------------------------------


async def save_monthly_shifts(
    session: AsyncSession,
    holidays: HolidayService,
    acting_as: AuthContext,
    year: int,
    month: int,
    candidate_dates: Sequence[date],
    *,
    today: date,
    limits: ShiftLimits | None = None,
    target_user_id: uuid.UUID | None = None,
) -> ShiftOutcome:
    """Replace the user's whole month with ``candidate_dates``, atomically.

    Flow:
    1. Check the number of dates and the scheduling window.
    2. Warm the holiday cache (outside the transaction).
    3. Delete the user's pending shifts in the month.
    4. Walk the dates in the caller's order, rejecting on the first holiday
       or full day, inserting otherwise.
    5. Commit, or roll back steps 3-4 entirely on any rejection or error.
    """
    limits = limits or ShiftLimits()
    user_id = acting_as.resolve_target(target_user_id)
    if user_id is None:
        return ShiftOutcome.fail(OutcomeCode.FORBIDDEN, _FORBIDDEN_MESSAGE)

    if not limits.min_shifts_per_month <= len(candidate_dates) <= limits.max_shifts_per_month:
        return ShiftOutcome.fail(
            OutcomeCode.REJECTED,
            f"Monthly schedule must contain between {limits.min_shifts_per_month} "
            f"and {limits.max_shifts_per_month} days",
        )

    if (year, month) != open_scheduling_month(today):
        return ShiftOutcome.fail(OutcomeCode.REJECTED, window_message(today))

    await holidays.ensure_year_cached(year)
    first_day, next_first = month_bounds(year, month)
    claiming: date | None = None

    try:
        async with UnitOfWork(session) as uow:
            await session.execute(
                delete(ShiftRecord).where(
                    col(ShiftRecord.user_id) == user_id,
                    col(ShiftRecord.shift_date) >= first_day,
                    col(ShiftRecord.shift_date) < next_first,
                    col(ShiftRecord.status) == ShiftStatus.PENDING.value,
                )
            )

            # Lock in date order so concurrent batches cannot deadlock.
            for locked_date in sorted({d for d in candidate_dates if first_day <= d < next_first}):
                await lock_shift_date(session, locked_date)

            seen: set[date] = set()
            for candidate in candidate_dates:
                label = candidate.strftime("%m/%d")
                if not first_day <= candidate < next_first:
                    uow.reject(f"{candidate.isoformat()} is outside {format_month(year, month)}")
                if candidate in seen:
                    uow.reject(f"{label} is selected more than once")
                seen.add(candidate)

                if await holidays.is_holiday(candidate):
                    uow.reject(f"{label} is a holiday or weekend")

                if await count_daily_shifts(session, candidate) >= limits.max_employees_per_day:
                    uow.reject(f"{label} is fully booked ({limits.max_employees_per_day} employees)")

                claiming = candidate
                session.add(_new_record(user_id, candidate))
                await session.flush()
    except ScheduleRejected as exc:
        logger.info("Monthly schedule for user %s in %s rejected: %s", user_id, format_month(year, month), exc)
        return ShiftOutcome.fail(OutcomeCode.REJECTED, exc.message)
    except IntegrityError:
        logger.info("Monthly schedule for user %s in %s hit a concurrent claim", user_id, format_month(year, month))
        # Lost a race against a concurrent claim of the same date.
        message = already_scheduled_message(claiming) if claiming else "Already scheduled on a selected date"
        return ShiftOutcome.fail(OutcomeCode.REJECTED, message)
    except Exception:
        logger.exception("Failed to save monthly schedule for user %s in %s", user_id, format_month(year, month))
        return ShiftOutcome.fail(OutcomeCode.ERROR, _INTERNAL_ERROR_MESSAGE)

    logger.info("Saved %d shifts for user %s in %s", len(candidate_dates), user_id, format_month(year, month))
    return ShiftOutcome.ok("Monthly schedule saved")


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def get_monthly_progress(
    session: AsyncSession,
    user_id: uuid.UUID,
    year: int,
    month: int,
    limits: ShiftLimits | None = None,
) -> MonthlyProgressResponse:
    """The user's scheduled dates in the month with the compliance bounds."""
    limits = limits or ShiftLimits()
    records = await list_user_month_shifts(session, user_id, year, month)
    count = len(records)
    return MonthlyProgressResponse(
        user_id=user_id,
        year=year,
        month=month,
        current_shifts=count,
        existing_dates=[r.shift_date for r in records],
        min_required=limits.min_shifts_per_month,
        max_allowed=limits.max_shifts_per_month,
        is_compliant=is_compliant(count, limits),
    )


async def get_daily_count(
    session: AsyncSession,
    shift_date: date,
    limits: ShiftLimits | None = None,
) -> DailyCountResponse:
    limits = limits or ShiftLimits()
    return DailyCountResponse(
        shift_date=shift_date,
        count=await count_daily_shifts(session, shift_date),
        max_allowed=limits.max_employees_per_day,
    )
