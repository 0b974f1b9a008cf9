# ruff: noqa: TC003
from __future__ import annotations

import datetime

import sqlalchemy as sa
from sqlmodel import Field

from shift_scheduler.models.base import UUIDBase, timestamp_field
from shift_scheduler.models.enums import HolidayCategory


class HolidayCacheEntry(UUIDBase, table=True):
    """A cached fact about one calendar date, populated once per year from the holiday feed."""

    __tablename__ = "holiday_cache"
    __table_args__ = (sa.UniqueConstraint("holiday_date", name="uq_holiday_cache_date"),)

    holiday_date: datetime.date
    holiday_name: str = Field(default="", max_length=255)
    category: str = Field(default=HolidayCategory.WEEKEND, max_length=50)
    description: str | None = Field(default=None, max_length=500)
    is_official_holiday: bool = Field(default=True)
    cache_year: int = Field(index=True)
    last_updated_from_api: datetime.datetime = timestamp_field(server_default=False)
