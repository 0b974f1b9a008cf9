"""Initial schema: holiday cache, shift records, statistics snapshots.

Revision ID: 0001
Revises:
Create Date: 2026-01-05 09:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_PENDING_ONLY = sa.text("status = 'PENDING'")
_YEARLY_ROW = sa.text("stat_month IS NULL")


def upgrade() -> None:
    op.create_table(
        "holiday_cache",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("holiday_date", sa.Date(), nullable=False),
        sa.Column("holiday_name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("is_official_holiday", sa.Boolean(), nullable=False),
        sa.Column("cache_year", sa.Integer(), nullable=False),
        sa.Column("last_updated_from_api", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("holiday_date", name="uq_holiday_cache_date"),
    )
    op.create_index("ix_holiday_cache_cache_year", "holiday_cache", ["cache_year"])

    op.create_table(
        "shift_record",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("shift_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=50), server_default="PENDING", nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_shift_record_user_id", "shift_record", ["user_id"])
    op.create_index("ix_shift_date_status", "shift_record", ["shift_date", "status"])
    op.create_index(
        "uq_shift_user_date_pending",
        "shift_record",
        ["user_id", "shift_date"],
        unique=True,
        postgresql_where=_PENDING_ONLY,
        sqlite_where=_PENDING_ONLY,
    )

    op.create_table(
        "shift_statistic",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("stat_year", sa.Integer(), nullable=False),
        sa.Column("stat_month", sa.Integer(), nullable=True),
        sa.Column("total_shift_days", sa.Integer(), server_default="0", nullable=False),
        sa.Column("last_calculated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "stat_year", "stat_month", name="uq_statistic_user_period"),
    )
    op.create_index("ix_shift_statistic_user_id", "shift_statistic", ["user_id"])
    op.create_index(
        "uq_statistic_user_year_total",
        "shift_statistic",
        ["user_id", "stat_year"],
        unique=True,
        postgresql_where=_YEARLY_ROW,
        sqlite_where=_YEARLY_ROW,
    )


def downgrade() -> None:
    op.drop_index("uq_statistic_user_year_total", table_name="shift_statistic")
    op.drop_index("ix_shift_statistic_user_id", table_name="shift_statistic")
    op.drop_table("shift_statistic")
    op.drop_index("uq_shift_user_date_pending", table_name="shift_record")
    op.drop_index("ix_shift_date_status", table_name="shift_record")
    op.drop_index("ix_shift_record_user_id", table_name="shift_record")
    op.drop_table("shift_record")
    op.drop_index("ix_holiday_cache_cache_year", table_name="holiday_cache")
    op.drop_table("holiday_cache")
