from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from shift_scheduler.api.health import router as health_router
from shift_scheduler.api.router import api_router
from shift_scheduler.config import configure_logging, get_settings
from shift_scheduler.db import dispose_engine, get_session_factory
from shift_scheduler.exceptions import setup_exception_handlers
from shift_scheduler.middleware import setup_middleware
from shift_scheduler.services.holiday import HolidayService
from shift_scheduler.services.policy import local_today

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


async def warm_holiday_cache(year: int) -> None:
    """Load a year of holidays into the cache so the first request does not wait on the feed."""
    try:
        async with get_session_factory()() as session:
            await HolidayService(session).ensure_year_cached(year)
    except Exception:
        logger.exception("Holiday cache warm-up failed for %d", year)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup and shutdown."""
    settings = get_settings()
    configure_logging(settings)
    logger.info("Starting %s v%s [%s]", settings.app_name, settings.app_version, settings.environment)
    today = local_today(settings.timezone)
    await warm_holiday_cache(today.year)
    yield
    logger.info("Shutting down %s", settings.app_name)
    await dispose_engine()


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
    )

    setup_middleware(application, settings)
    setup_exception_handlers(application)

    application.include_router(health_router)
    application.include_router(api_router)

    return application


app = create_app()
