# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import Depends, Header, status

from shift_scheduler.config import get_settings
from shift_scheduler.db import SessionDep
from shift_scheduler.exceptions import AppError
from shift_scheduler.models.enums import OutcomeCode, UserRole
from shift_scheduler.schemas.auth import AuthContext
from shift_scheduler.schemas.shift import ShiftOutcome
from shift_scheduler.services.holiday import HolidayService
from shift_scheduler.services.policy import ShiftLimits, local_today


async def get_auth_context(
    x_user_id: uuid.UUID = Header(),
    x_role: str = Header(default="employee"),
) -> AuthContext:
    """Extract dev auth context from request headers."""
    try:
        role = UserRole(x_role.upper())
    except ValueError:
        raise AppError(f"Unknown role: {x_role}", status_code=status.HTTP_403_FORBIDDEN) from None
    return AuthContext(user_id=x_user_id, role=role)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_manager(
    auth: AuthDep,
) -> AuthContext:
    """Require manager role for the request."""
    if not auth.is_manager:
        raise AppError("Manager access required", status_code=status.HTTP_403_FORBIDDEN)
    return auth


ManagerDep = Annotated[AuthContext, Depends(require_manager)]


def get_today() -> date:
    """Current calendar date in the configured scheduling timezone."""
    return local_today(get_settings().timezone)


TodayDep = Annotated[date, Depends(get_today)]


def get_shift_limits() -> ShiftLimits:
    return ShiftLimits.from_settings(get_settings())


LimitsDep = Annotated[ShiftLimits, Depends(get_shift_limits)]


async def get_holiday_service(session: SessionDep) -> HolidayService:
    """FastAPI dependency for the holiday oracle bound to the request session."""
    return HolidayService(session)


HolidayDep = Annotated[HolidayService, Depends(get_holiday_service)]


_OUTCOME_STATUS = {
    OutcomeCode.REJECTED: status.HTTP_400_BAD_REQUEST,
    OutcomeCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    OutcomeCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    OutcomeCode.ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def raise_for_outcome(outcome: ShiftOutcome) -> None:
    """Turn a failed scheduling outcome into an HTTP error."""
    if not outcome.success:
        raise AppError(outcome.message, status_code=_OUTCOME_STATUS.get(outcome.code, status.HTTP_400_BAD_REQUEST))

