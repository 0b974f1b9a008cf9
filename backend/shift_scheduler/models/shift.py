# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field

from shift_scheduler.models.base import TimestampMixin, UUIDBase
from shift_scheduler.models.enums import ShiftStatus

_PENDING_ONLY = sa.text("status = 'PENDING'")


class ShiftRecord(UUIDBase, TimestampMixin, table=True):
    """One employee's claim on one calendar date."""

    __tablename__ = "shift_record"
    __table_args__ = (
        sa.Index(
            "uq_shift_user_date_pending",
            "user_id",
            "shift_date",
            unique=True,
            postgresql_where=_PENDING_ONLY,
            sqlite_where=_PENDING_ONLY,
        ),
        sa.Index("ix_shift_date_status", "shift_date", "status"),
    )

    user_id: uuid.UUID = Field(index=True)
    shift_date: datetime.date
    status: str = Field(
        default=ShiftStatus.PENDING, max_length=50, sa_column_kwargs={"server_default": "PENDING"}
    )
