# ruff: noqa: TC003
from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field


class FeedHoliday(BaseModel):
    """One day as published by the holiday feed."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    date: str
    name: str | None = None
    is_holiday: bool = Field(default=False, alias="isHoliday")
    is_special_holiday: bool = Field(default=False, alias="isSpecialHoliday")
    description: str | None = None


class FeedMonth(BaseModel):
    """A month block of the holiday feed."""

    model_config = ConfigDict(extra="ignore")

    month: int
    holidays: list[FeedHoliday] | None = None


class HolidayFeed(BaseModel):
    """Top-level document of the yearly holiday feed."""

    model_config = ConfigDict(extra="ignore")

    year: int | None = None
    months: list[FeedMonth] | None = None


class HolidayResponse(BaseModel):
    """A holiday within a calendar month."""

    date: datetime.date
    name: str


class MonthCalendarResponse(BaseModel):
    """Holiday and weekend information for rendering a month."""

    year: int
    month: int
    holidays: list[HolidayResponse]
    weekends: list[datetime.date]
    total_days: int
