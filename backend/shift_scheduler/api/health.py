import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text

from shift_scheduler.api.deps import TodayDep
from shift_scheduler.config import get_settings
from shift_scheduler.db import SessionDep
from shift_scheduler.services.policy import format_month, open_scheduling_month

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service status plus the month currently open for scheduling."""

    status: Literal["ok", "degraded"]
    version: str
    environment: str
    open_month: str
    timezone: str


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep, today: TodayDep) -> HealthResponse:
    """Liveness check; reports ``degraded`` when the database does not answer."""
    settings = get_settings()
    status: Literal["ok", "degraded"] = "ok"

    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check: database connectivity failed")
        status = "degraded"

    return HealthResponse(
        status=status,
        version=settings.app_version,
        environment=settings.environment,
        open_month=format_month(*open_scheduling_month(today)),
        timezone=settings.timezone,
    )
