"""Tests for the holiday feed cache, weekend fallback and calendar API."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING

import httpx
import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col

from shift_scheduler.models.enums import HolidayCategory
from shift_scheduler.models.holiday import HolidayCacheEntry
from shift_scheduler.schemas.holiday import HolidayFeed
from shift_scheduler.services.holiday import HolidayService, parse_holiday_feed

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

USER_HEADERS = {"X-User-Id": str(uuid.uuid4()), "X-Role": "employee"}


async def _cached_rows(session: AsyncSession, year: int) -> int:
    result = await session.execute(
        select(func.count()).select_from(HolidayCacheEntry).where(col(HolidayCacheEntry.cache_year) == year)
    )
    return result.scalar_one()


# ---------------------------------------------------------------------------
# Feed parsing
# ---------------------------------------------------------------------------


def test_parse_feed_categorizes_days_off() -> None:
    feed = HolidayFeed.model_validate(
        {
            "months": [
                {
                    "month": 2,
                    "holidays": [
                        {"date": "20260216", "name": "Lunar New Year's Eve", "isHoliday": True,
                         "isSpecialHoliday": True},
                        {"date": "20260208", "name": "", "isHoliday": True, "isSpecialHoliday": False},
                        {"date": "20260207", "name": "", "isHoliday": False, "isSpecialHoliday": False},
                    ],
                }
            ]
        }
    )
    entries = {e.holiday_date: e for e in parse_holiday_feed(feed, 2026)}

    assert entries[date(2026, 2, 16)].category == HolidayCategory.NATIONAL
    assert entries[date(2026, 2, 16)].is_official_holiday is True
    assert entries[date(2026, 2, 8)].category == HolidayCategory.WEEKEND
    assert date(2026, 2, 7) not in entries
    assert all(e.cache_year == 2026 for e in entries.values())


def test_parse_feed_skips_bad_and_foreign_dates() -> None:
    feed = HolidayFeed.model_validate(
        {
            "months": [
                {
                    "month": 1,
                    "holidays": [
                        {"date": "2026-01-01", "name": "Bad format", "isHoliday": True},
                        {"date": "20250101", "name": "Last year", "isHoliday": True},
                        {"date": "20260101", "name": "Founding Day", "isHoliday": True, "isSpecialHoliday": True},
                    ],
                },
                {"month": 2, "holidays": None},
            ]
        }
    )
    entries = parse_holiday_feed(feed, 2026)
    assert [e.holiday_date for e in entries] == [date(2026, 1, 1)]
    assert entries[0].holiday_name == "Founding Day"


def test_parse_empty_feed() -> None:
    assert parse_holiday_feed(HolidayFeed(), 2026) == []


# ---------------------------------------------------------------------------
# Cache population
# ---------------------------------------------------------------------------


async def test_ensure_year_cached_stores_feed(db_session: AsyncSession, holiday_service: HolidayService) -> None:
    await holiday_service.ensure_year_cached(2026)
    assert await _cached_rows(db_session, 2026) == 4


async def test_ensure_year_cached_fetches_once(db_session: AsyncSession) -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(200, json={"months": [{"month": 3, "holidays": []}]})

    svc = HolidayService(db_session, transport=httpx.MockTransport(handler))
    await svc.ensure_year_cached(2026)
    await svc.ensure_year_cached(2026)
    await svc.is_holiday(date(2026, 3, 2))
    assert len(calls) == 1


async def test_cached_year_is_not_refetched(db_session: AsyncSession, holiday_service: HolidayService) -> None:
    await holiday_service.ensure_year_cached(2026)

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("feed should not be requested for a cached year")

    fresh = HolidayService(db_session, transport=httpx.MockTransport(handler))
    await fresh.ensure_year_cached(2026)
    assert await fresh.is_holiday(date(2026, 2, 16)) is True


async def test_feed_request_sends_user_agent(db_session: AsyncSession) -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ua"] = request.headers["user-agent"]
        seen["path"] = request.url.path
        return httpx.Response(404)

    await HolidayService(db_session, transport=httpx.MockTransport(handler)).ensure_year_cached(2030)
    assert seen["ua"].startswith("shift-scheduler/")
    assert seen["path"].endswith("/2030/all.json")


# ---------------------------------------------------------------------------
# Lookups against the cached feed
# ---------------------------------------------------------------------------


async def test_is_holiday_uses_cached_entries(holiday_service: HolidayService) -> None:
    await holiday_service.ensure_year_cached(2026)

    assert await holiday_service.is_holiday(date(2026, 2, 16)) is True
    assert await holiday_service.is_holiday(date(2026, 2, 8)) is True
    # Make-up workday on a Saturday is still a weekend
    assert await holiday_service.is_holiday(date(2026, 2, 7)) is True
    # Weekend the feed slice does not list
    assert await holiday_service.is_holiday(date(2026, 2, 14)) is True
    assert await holiday_service.is_holiday(date(2026, 2, 18)) is False


async def test_holiday_name_priority(holiday_service: HolidayService) -> None:
    await holiday_service.ensure_year_cached(2026)

    assert await holiday_service.holiday_name(date(2026, 2, 16)) == "Lunar New Year's Eve"
    assert await holiday_service.holiday_name(date(2026, 2, 8)) == "Sunday"
    assert await holiday_service.holiday_name(date(2026, 2, 14)) == "Saturday"
    assert await holiday_service.holiday_name(date(2026, 2, 18)) == ""


async def test_month_holidays_lists_official_days(holiday_service: HolidayService) -> None:
    entries = await holiday_service.month_holidays(2026, 2)
    assert [e.holiday_date for e in entries] == [date(2026, 2, 8), date(2026, 2, 16), date(2026, 2, 17)]


# ---------------------------------------------------------------------------
# Degraded feed
# ---------------------------------------------------------------------------


async def test_feed_404_falls_back_to_weekends(
    db_session: AsyncSession, holiday_service: HolidayService, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="shift_scheduler.services.holiday"):
        await holiday_service.ensure_year_cached(2027)

    assert await _cached_rows(db_session, 2027) == 0
    assert "not published" in caplog.text
    assert await holiday_service.is_holiday(date(2027, 1, 2)) is True  # Saturday
    assert await holiday_service.is_holiday(date(2027, 1, 4)) is False


async def test_feed_timeout_falls_back_to_weekends(
    db_session: AsyncSession, caplog: pytest.LogCaptureFixture
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    svc = HolidayService(db_session, transport=httpx.MockTransport(handler))
    with caplog.at_level(logging.WARNING, logger="shift_scheduler.services.holiday"):
        await svc.ensure_year_cached(2026)

    assert "failed" in caplog.text
    assert await svc.is_holiday(date(2026, 2, 16)) is False
    assert await svc.is_holiday(date(2026, 2, 7)) is True


async def test_feed_server_error_falls_back(db_session: AsyncSession) -> None:
    svc = HolidayService(db_session, transport=httpx.MockTransport(lambda request: httpx.Response(503)))
    await svc.ensure_year_cached(2026)
    assert await _cached_rows(db_session, 2026) == 0


async def test_malformed_feed_falls_back(db_session: AsyncSession, caplog: pytest.LogCaptureFixture) -> None:
    svc = HolidayService(
        db_session,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"months": "nope"})),
    )
    with caplog.at_level(logging.WARNING, logger="shift_scheduler.services.holiday"):
        await svc.ensure_year_cached(2026)

    assert "malformed" in caplog.text
    assert await _cached_rows(db_session, 2026) == 0


async def test_cache_read_failure_rolls_back_session(
    db_session: AsyncSession, holiday_service: HolidayService, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def _unreadable(self: HolidayService, year: int) -> int:
        raise SQLAlchemyError("cache table unavailable")

    rollbacks: list[bool] = []
    session_rollback = db_session.rollback

    async def _tracking_rollback() -> None:
        rollbacks.append(True)
        await session_rollback()

    monkeypatch.setattr(HolidayService, "_cached_count", _unreadable)
    monkeypatch.setattr(db_session, "rollback", _tracking_rollback)
    await holiday_service.ensure_year_cached(2026)

    assert rollbacks == [True]
    # The session is still usable and the weekend fallback answers.
    assert await holiday_service.is_holiday(date(2026, 2, 14)) is True
    assert await holiday_service.is_holiday(date(2026, 2, 18)) is False


# ---------------------------------------------------------------------------
# Calendar API
# ---------------------------------------------------------------------------


async def test_calendar_month(async_client: AsyncClient) -> None:
    resp = await async_client.get("/calendar/2026/2", headers=USER_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["year"] == 2026
    assert data["month"] == 2
    assert data["total_days"] == 28
    assert data["holidays"] == [
        {"date": "2026-02-08", "name": "Sunday"},
        {"date": "2026-02-16", "name": "Lunar New Year's Eve"},
        {"date": "2026-02-17", "name": "Spring Festival"},
    ]
    assert data["weekends"] == [
        "2026-02-01",
        "2026-02-07",
        "2026-02-08",
        "2026-02-14",
        "2026-02-15",
        "2026-02-21",
        "2026-02-22",
        "2026-02-28",
    ]


async def test_calendar_without_feed_lists_all_weekends(async_client: AsyncClient) -> None:
    resp = await async_client.get("/calendar/2027/1", headers=USER_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["holidays"] == []
    assert len(data["weekends"]) == 10
    assert data["total_days"] == 31


async def test_calendar_rejects_invalid_month(async_client: AsyncClient) -> None:
    resp = await async_client.get("/calendar/2026/13", headers=USER_HEADERS)
    assert resp.status_code == 422
    assert resp.json()["error"] == "ValidationError"


async def test_calendar_requires_user_header(async_client: AsyncClient) -> None:
    resp = await async_client.get("/calendar/2026/2")
    assert resp.status_code == 422


async def test_calendar_rejects_unknown_role(async_client: AsyncClient) -> None:
    resp = await async_client.get("/calendar/2026/2", headers={"X-User-Id": str(uuid.uuid4()), "X-Role": "admin"})
    assert resp.status_code == 403
