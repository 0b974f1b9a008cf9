"""Holiday oracle backed by a per-year database cache of the public holiday feed."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import col

from shift_scheduler.config import get_settings
from shift_scheduler.models.base import utc_now
from shift_scheduler.models.enums import HolidayCategory
from shift_scheduler.models.holiday import HolidayCacheEntry
from shift_scheduler.schemas.holiday import FeedHoliday, HolidayFeed
from shift_scheduler.services.policy import is_weekend, month_bounds, weekend_label

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from shift_scheduler.config import Settings

logger = logging.getLogger(__name__)

_FEED_DATE_FORMAT = "%Y%m%d"
_UNNAMED_HOLIDAY = "Holiday"


def _categorize(item: FeedHoliday) -> HolidayCategory:
    if item.is_special_holiday:
        return HolidayCategory.NATIONAL
    return HolidayCategory.WEEKEND


def parse_holiday_feed(feed: HolidayFeed, year: int) -> list[HolidayCacheEntry]:
    """Convert a feed document into cache entries for ``year``, one per day off."""
    fetched_at = utc_now()
    entries: dict[date, HolidayCacheEntry] = {}
    for month in feed.months or []:
        for item in month.holidays or []:
            # Make-up workdays are not cached, so the weekend rule still applies to them.
            if not item.is_holiday:
                continue
            try:
                holiday_date = datetime.strptime(item.date, _FEED_DATE_FORMAT).date()
            except ValueError:
                logger.debug("Skipping unparseable feed date %r", item.date)
                continue
            if holiday_date.year != year:
                continue
            entries[holiday_date] = HolidayCacheEntry(
                holiday_date=holiday_date,
                holiday_name=(item.name or "").strip(),
                category=_categorize(item).value,
                description=item.description or None,
                is_official_holiday=item.is_holiday,
                cache_year=year,
                last_updated_from_api=fetched_at,
            )
    return [entries[d] for d in sorted(entries)]


class HolidayService:
    """Answers "is this date a holiday, and what is it called".

    The cache for a year is filled lazily by ``ensure_year_cached`` and never
    refreshed afterwards. When the feed is unavailable the service falls back
    to treating Saturdays and Sundays as the only holidays.

    ``ensure_year_cached`` commits its own inserts, so callers must invoke it
    before starting any unit of work on the same session.
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._settings = settings or get_settings()
        self._transport = transport
        self._attempted_years: set[int] = set()

    async def _get_entry(self, day: date) -> HolidayCacheEntry | None:
        result = await self._session.execute(
            select(HolidayCacheEntry).where(col(HolidayCacheEntry.holiday_date) == day)
        )
        return result.scalar_one_or_none()

    async def _cached_count(self, year: int) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(HolidayCacheEntry).where(col(HolidayCacheEntry.cache_year) == year)
        )
        return result.scalar_one()

    async def is_holiday(self, day: date) -> bool:
        """Return True for official holidays and, absent cache data, for weekends."""
        entry = await self._get_entry(day)
        if entry is not None:
            return entry.is_official_holiday
        return is_weekend(day)

    async def holiday_name(self, day: date) -> str:
        """Display name of the holiday on ``day``; weekday label for plain weekends; empty otherwise."""
        entry = await self._get_entry(day)
        if entry is not None and entry.is_official_holiday and entry.holiday_name:
            return entry.holiday_name
        if is_weekend(day):
            return weekend_label(day)
        if entry is not None and entry.is_official_holiday:
            return _UNNAMED_HOLIDAY
        return ""

    async def month_holidays(self, year: int, month: int) -> list[HolidayCacheEntry]:
        """Official holidays in the given month, ordered by date."""
        await self.ensure_year_cached(year)
        first_day, next_first = month_bounds(year, month)
        result = await self._session.execute(
            select(HolidayCacheEntry)
            .where(
                col(HolidayCacheEntry.cache_year) == year,
                col(HolidayCacheEntry.holiday_date) >= first_day,
                col(HolidayCacheEntry.holiday_date) < next_first,
                col(HolidayCacheEntry.is_official_holiday).is_(True),
            )
            .order_by(col(HolidayCacheEntry.holiday_date))
        )
        return list(result.scalars().all())

    async def ensure_year_cached(self, year: int) -> None:
        """Populate the cache for ``year`` if it is empty. Never raises."""
        if year in self._attempted_years:
            return
        self._attempted_years.add(year)

        try:
            if await self._cached_count(year) > 0:
                return
        except SQLAlchemyError:
            await self._session.rollback()
            logger.warning("Could not read holiday cache for %d", year, exc_info=True)
            return

        logger.info("Fetching holidays for %d", year)
        entries = await self._fetch_year(year)
        if not entries:
            return

        try:
            # Another request may have filled the year while we were fetching.
            if await self._cached_count(year) > 0:
                return
            self._session.add_all(entries)
            await self._session.commit()
        except IntegrityError:
            await self._session.rollback()
            logger.info("Holiday cache for %d was populated concurrently", year)
            return
        except SQLAlchemyError:
            await self._session.rollback()
            logger.warning("Failed to store holiday cache for %d", year, exc_info=True)
            return

        logger.info("Cached %d holiday entries for %d", len(entries), year)

    async def _fetch_year(self, year: int) -> list[HolidayCacheEntry]:
        url = self._settings.holiday_api_url.format(year=year)
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._settings.holiday_api_timeout_seconds,
                headers={"User-Agent": self._settings.holiday_api_user_agent},
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.warning("Holiday feed request for %d failed: %s", year, exc)
            return []

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.warning("Holiday feed for %d is not published yet (404)", year)
            return []
        if response.is_error:
            logger.warning("Holiday feed for %d returned HTTP %d", year, response.status_code)
            return []

        try:
            feed = HolidayFeed.model_validate_json(response.content)
        except ValidationError as exc:
            logger.warning("Holiday feed for %d is malformed: %s", year, exc)
            return []

        return parse_holiday_feed(feed, year)
