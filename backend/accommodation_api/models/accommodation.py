"""Accommodation listing model."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import JSON

from accommodation_api.db.base import Base
from accommodation_api.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from accommodation_api.models.blocked_period import BlockedPeriod
    from accommodation_api.models.pricing_rule import PricingRule

JSONB_TYPE = JSONB().with_variant(JSON(), "sqlite")


class Accommodation(TimestampMixin, Base):
    """A lodging listing owned by a host."""

    __tablename__ = "accommodations"
    __table_args__ = (
        CheckConstraint("min_guests <= max_guests", name="ck_accommodation_guests"),
        CheckConstraint("base_price >= 0", name="ck_accommodation_base_price"),
        Index("ix_accommodations_host_id", "host_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    amenities: Mapped[list[str]] = mapped_column(
        JSONB_TYPE, default=list, nullable=False
    )
    photo_keys: Mapped[list[str]] = mapped_column(
        JSONB_TYPE, default=list, nullable=False
    )
    min_guests: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    max_guests: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    host_id: Mapped[str] = mapped_column(String(255), nullable=False)
    auto_approve: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_per_unit: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    pricing_rules: Mapped[list["PricingRule"]] = relationship(
        "PricingRule",
        back_populates="accommodation",
        cascade="all, delete-orphan",
    )
    blocked_periods: Mapped[list["BlockedPeriod"]] = relationship(
        "BlockedPeriod",
        back_populates="accommodation",
        cascade="all, delete-orphan",
    )
