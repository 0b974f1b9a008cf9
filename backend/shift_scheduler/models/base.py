from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Timezone-aware current instant; all stored timestamps are UTC."""
    return datetime.now(UTC)


def timestamp_field(*, server_default: bool = True, on_update: bool = False) -> Any:
    """A timezone-aware timestamp column defaulting to the current instant."""
    column_kwargs: dict[str, Any] = {}
    if server_default:
        column_kwargs["server_default"] = sa.func.now()
    if on_update:
        column_kwargs["onupdate"] = sa.func.now()
    return Field(
        default_factory=utc_now,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs=column_kwargs,
    )


class UUIDBase(SQLModel):
    """Table base with a random UUID primary key."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, sa_type=sa.Uuid)


class TimestampMixin(SQLModel):
    """Row creation and last-modification instants."""

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field(on_update=True)
