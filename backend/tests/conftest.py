from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shift_scheduler.api.deps import get_holiday_service, get_today
from shift_scheduler.db import get_session
from shift_scheduler.main import app
from shift_scheduler.models import SQLModel
from shift_scheduler.models.enums import ShiftStatus
from shift_scheduler.models.shift import ShiftRecord
from shift_scheduler.services.employee import (
    InMemoryEmployeeService,
    get_employee_service,
    set_employee_service,
)
from shift_scheduler.services.holiday import HolidayService

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine

# "Today" for every test: the open scheduling month is February 2026.
TEST_TODAY = date(2026, 1, 15)

# A slice of the yearly feed: Lunar New Year closes Feb 16-17 (Mon-Tue) and
# Saturday Feb 7 is a make-up workday, which the cache leaves out.
HOLIDAY_FEED_2026 = {
    "year": 2026,
    "months": [
        {
            "month": 1,
            "holidays": [
                {"date": "20260101", "name": "Founding Day", "isHoliday": True, "isSpecialHoliday": True},
            ],
        },
        {
            "month": 2,
            "holidays": [
                {"date": "20260207", "name": "", "isHoliday": False, "isSpecialHoliday": False,
                 "description": "Make-up workday"},
                {"date": "20260208", "name": "", "isHoliday": True, "isSpecialHoliday": False},
                {"date": "20260216", "name": "Lunar New Year's Eve", "isHoliday": True, "isSpecialHoliday": True},
                {"date": "20260217", "name": "Spring Festival", "isHoliday": True, "isSpecialHoliday": True},
            ],
        },
    ],
}


def _feed_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/2026/all.json"):
        return httpx.Response(200, json=HOLIDAY_FEED_2026)
    return httpx.Response(404)


@pytest.fixture
def feed_transport() -> httpx.MockTransport:
    """Transport that serves the 2026 feed and 404s for any other year."""
    return httpx.MockTransport(_feed_handler)


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create a fresh in-memory database per test so commits and rollbacks are real."""
    _engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def holiday_service(db_session: AsyncSession, feed_transport: httpx.MockTransport) -> HolidayService:
    return HolidayService(db_session, transport=feed_transport)


@pytest.fixture
def employee_directory() -> Iterator[InMemoryEmployeeService]:
    """Swap in an empty directory for the duration of a test."""
    previous = get_employee_service()
    directory = InMemoryEmployeeService()
    set_employee_service(directory)
    yield directory
    set_employee_service(previous)


@pytest.fixture
def make_shift(db_session: AsyncSession) -> Callable[[uuid.UUID, date], Awaitable[ShiftRecord]]:
    """Insert a pending shift directly, bypassing validation."""

    async def _make(user_id: uuid.UUID, shift_date: date) -> ShiftRecord:
        now = datetime.now(UTC)
        record = ShiftRecord(
            user_id=user_id,
            shift_date=shift_date,
            status=ShiftStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        db_session.add(record)
        await db_session.commit()
        return record

    return _make


@pytest.fixture
async def async_client(
    db_session: AsyncSession,
    feed_transport: httpx.MockTransport,
    employee_directory: InMemoryEmployeeService,
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to the test database, feed stub and fixed date."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    async def _override_get_holiday_service() -> HolidayService:
        return HolidayService(db_session, transport=feed_transport)

    app.dependency_overrides[get_session] = _override_get_session
    app.dependency_overrides[get_holiday_service] = _override_get_holiday_service
    app.dependency_overrides[get_today] = lambda: TEST_TODAY
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
