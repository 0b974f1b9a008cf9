# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, Field

from shift_scheduler.models.enums import OutcomeCode


class AddShiftRequest(BaseModel):
    """Request body for scheduling a single day."""

    shift_date: date
    target_user_id: uuid.UUID | None = None


class BulkShiftRequest(BaseModel):
    """Request body for replacing a whole month of shifts."""

    shift_dates: list[date] = Field(default_factory=list)
    target_user_id: uuid.UUID | None = None


class ShiftOutcome(BaseModel):
    """Structured result of a scheduling operation."""

    success: bool
    message: str
    code: OutcomeCode

    @classmethod
    def ok(cls, message: str) -> ShiftOutcome:
        return cls(success=True, message=message, code=OutcomeCode.OK)

    @classmethod
    def fail(cls, code: OutcomeCode, message: str) -> ShiftOutcome:
        return cls(success=False, message=message, code=code)


class ShiftActionResponse(BaseModel):
    """Response body for a successful scheduling mutation."""

    message: str


class MonthlyProgressResponse(BaseModel):
    """A user's scheduling progress for one month."""

    user_id: uuid.UUID
    year: int
    month: int
    current_shifts: int
    existing_dates: list[date]
    min_required: int
    max_allowed: int
    is_compliant: bool


class DailyCountResponse(BaseModel):
    """Number of pending shifts on a date."""

    shift_date: date
    count: int
    max_allowed: int
