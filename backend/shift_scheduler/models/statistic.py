# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from shift_scheduler.models.base import UUIDBase, timestamp_field

# NULLs are distinct in unique constraints, so the yearly row needs its own index.
_YEARLY_ROW = sa.text("stat_month IS NULL")


class ShiftStatistic(UUIDBase, table=True):
    """Derived shift-count snapshot, written only by the explicit recompute.

    A NULL ``stat_month`` marks the whole-year row.
    """

    __tablename__ = "shift_statistic"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "stat_year", "stat_month", name="uq_statistic_user_period"),
        sa.Index(
            "uq_statistic_user_year_total",
            "user_id",
            "stat_year",
            unique=True,
            postgresql_where=_YEARLY_ROW,
            sqlite_where=_YEARLY_ROW,
        ),
    )

    user_id: uuid.UUID = Field(index=True)
    stat_year: int
    stat_month: int | None = None
    total_shift_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    last_calculated_at: datetime = timestamp_field(on_update=True)
