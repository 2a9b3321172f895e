"""Blocked availability periods."""

from __future__ import annotations

import datetime
import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Date, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accommodation_api.db.base import Base
from accommodation_api.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from accommodation_api.models.accommodation import Accommodation


class BlockReason(str, enum.Enum):
    """Why an accommodation is unavailable for a period."""

    RESERVATION = "RESERVATION"
    MANUAL = "MANUAL"


class BlockedPeriod(TimestampMixin, Base):
    """Date range during which an accommodation cannot be booked."""

    __tablename__ = "blocked_periods"
    __table_args__ = (
        Index(
            "ix_blocked_periods_accommodation_reason",
            "accommodation_id",
            "reason",
            "start_date",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    accommodation_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accommodations.id", ondelete="CASCADE"), nullable=False
    )
    start_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    end_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    reason: Mapped[BlockReason] = mapped_column(Enum(BlockReason), nullable=False)
    # Idempotency key for reservation-driven blocks.
    reservation_id: Mapped[str | None] = mapped_column(String(255), unique=True)
    notes: Mapped[str | None] = mapped_column(Text)

    accommodation: Mapped["Accommodation"] = relationship(
        "Accommodation", back_populates="blocked_periods"
    )
