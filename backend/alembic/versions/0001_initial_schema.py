"""Create accommodations, pricing rules and blocked periods.

Revision ID: 0001
Revises:
Create Date: 2026-01-06
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

JSONB_TYPE = postgresql.JSONB().with_variant(sa.JSON(), "sqlite")

period_type = sa.Enum("SEASONAL", "WEEKEND", "HOLIDAY", "CUSTOM", name="periodtype")
block_reason = sa.Enum("RESERVATION", "MANUAL", name="blockreason")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    is_postgres = op.get_bind().dialect.name == "postgresql"

    op.create_table(
        "accommodations",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("amenities", JSONB_TYPE, nullable=False),
        sa.Column("photo_keys", JSONB_TYPE, nullable=False),
        sa.Column("min_guests", sa.Integer(), nullable=False),
        sa.Column("max_guests", sa.Integer(), nullable=False),
        sa.Column("host_id", sa.String(255), nullable=False),
        sa.Column("auto_approve", sa.Boolean(), nullable=False),
        sa.Column("is_per_unit", sa.Boolean(), nullable=False),
        sa.Column("base_price", sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("min_guests <= max_guests", name="ck_accommodation_guests"),
        sa.CheckConstraint("base_price >= 0", name="ck_accommodation_base_price"),
    )
    op.create_index("ix_accommodations_host_id", "accommodations", ["host_id"])

    op.create_table(
        "pricing_rules",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "accommodation_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("accommodations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("override_price", sa.Numeric(10, 2)),
        sa.Column(
            "multiplier",
            sa.Numeric(5, 2),
            server_default=sa.text("1.00"),
            nullable=False,
        ),
        sa.Column("period_type", period_type),
        sa.Column("min_stay_days", sa.Integer()),
        sa.Column("max_stay_days", sa.Integer()),
        *_timestamps(),
        sa.CheckConstraint("start_date < end_date", name="ck_pricing_rule_range"),
    )
    op.create_index(
        "ix_pricing_rules_accommodation_start",
        "pricing_rules",
        ["accommodation_id", "start_date"],
    )

    op.create_table(
        "blocked_periods",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "accommodation_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("accommodations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("reason", block_reason, nullable=False),
        sa.Column("reservation_id", sa.String(255), unique=True),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index(
        "ix_blocked_periods_accommodation_reason",
        "blocked_periods",
        ["accommodation_id", "reason", "start_date"],
    )

    if is_postgres:
        # Rule ranges are inclusive on both ends.
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            """
            ALTER TABLE pricing_rules
            ADD CONSTRAINT ex_pricing_rules_no_overlap
            EXCLUDE USING gist (
                accommodation_id WITH =,
                daterange(start_date, end_date, '[]') WITH &&
            )
            """
        )


def downgrade() -> None:
    is_postgres = op.get_bind().dialect.name == "postgresql"

    op.drop_index("ix_blocked_periods_accommodation_reason", table_name="blocked_periods")
    op.drop_table("blocked_periods")
    op.drop_index("ix_pricing_rules_accommodation_start", table_name="pricing_rules")
    op.drop_table("pricing_rules")
    op.drop_index("ix_accommodations_host_id", table_name="accommodations")
    op.drop_table("accommodations")

    if is_postgres:
        block_reason.drop(op.get_bind(), checkfirst=True)
        period_type.drop(op.get_bind(), checkfirst=True)
