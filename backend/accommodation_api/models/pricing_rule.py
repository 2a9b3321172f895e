"""Host-defined seasonal pricing rules."""

from __future__ import annotations

import datetime
import enum
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, Enum, ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accommodation_api.db.base import Base
from accommodation_api.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from accommodation_api.models.accommodation import Accommodation


class PeriodType(str, enum.Enum):
    """Descriptive tag for a pricing period; has no effect on pricing."""

    SEASONAL = "SEASONAL"
    WEEKEND = "WEEKEND"
    HOLIDAY = "HOLIDAY"
    CUSTOM = "CUSTOM"


class PricingRule(TimestampMixin, Base):
    """Date-range price override or multiplier over the base nightly price."""

    __tablename__ = "pricing_rules"
    __table_args__ = (
        CheckConstraint("start_date < end_date", name="ck_pricing_rule_range"),
        Index("ix_pricing_rules_accommodation_start", "accommodation_id", "start_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    accommodation_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accommodations.id", ondelete="CASCADE"), nullable=False
    )
    start_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    end_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    override_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    multiplier: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("1.00"), nullable=False
    )
    period_type: Mapped[PeriodType | None] = mapped_column(Enum(PeriodType))
    min_stay_days: Mapped[int | None] = mapped_column(Integer)
    max_stay_days: Mapped[int | None] = mapped_column(Integer)

    accommodation: Mapped["Accommodation"] = relationship(
        "Accommodation", back_populates="pricing_rules"
    )

    def covers(self, night: datetime.date) -> bool:
        """Return True when the night falls inside the inclusive rule range."""

        return self.start_date <= night <= self.end_date
