"""Worker process for scheduled maintenance jobs.

Runs an asyncio loop once a day that keeps the holiday cache populated and
rewrites the shift statistics snapshot for the current and open months.
"""

from __future__ import annotations

import asyncio
import logging

from shift_scheduler.config import configure_logging, get_settings
from shift_scheduler.db import get_session_factory
from shift_scheduler.services.holiday import HolidayService
from shift_scheduler.services.policy import local_today, open_scheduling_month
from shift_scheduler.services.statistics import recalculate_statistics

logger = logging.getLogger(__name__)


async def run_daily_jobs() -> None:
    """Run one pass of the holiday refresh and statistics recompute."""
    settings = get_settings()
    session_factory = get_session_factory()
    today = local_today(settings.timezone)

    years = [today.year]
    if today.month == 12:
        years.append(today.year + 1)
    for year in years:
        try:
            async with session_factory() as session:
                await HolidayService(session, settings).ensure_year_cached(year)
        except Exception:
            logger.exception("Holiday cache refresh failed for %d", year)

    periods = {(today.year, today.month), open_scheduling_month(today)}
    for year, month in sorted(periods):
        try:
            async with session_factory() as session:
                await recalculate_statistics(session, year, month)
        except Exception:
            logger.exception("Statistics recompute failed for %04d-%02d", year, month)


async def run_worker_loop() -> None:
    """Main worker loop; runs the daily jobs then sleeps for the configured interval."""
    settings = get_settings()
    logger.info("Shift worker started (interval=%ds)", settings.worker_interval_seconds)
    while True:
        await run_daily_jobs()
        await asyncio.sleep(settings.worker_interval_seconds)


def main() -> None:
    """Entry point for the worker process."""
    configure_logging(get_settings())
    asyncio.run(run_worker_loop())


if __name__ == "__main__":
    main()
