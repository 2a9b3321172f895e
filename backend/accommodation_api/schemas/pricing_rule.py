"""Pricing rule schema definitions."""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from accommodation_api.models.pricing_rule import PeriodType


class PricingRuleCreate(BaseModel):
    """Payload to create a pricing rule for an accommodation."""

    start_date: datetime.date
    end_date: datetime.date
    override_price: Decimal | None = Field(
        default=None, ge=0, max_digits=10, decimal_places=2
    )
    multiplier: Decimal = Field(
        default=Decimal("1.0"), gt=0, max_digits=5, decimal_places=2
    )
    period_type: PeriodType | None = None
    min_stay_days: int | None = Field(default=None, ge=1)
    max_stay_days: int | None = Field(default=None, ge=1)


class PricingRuleUpdate(BaseModel):
    """Partial rule changes; only fields present in the payload are applied."""

    start_date: datetime.date | None = None
    end_date: datetime.date | None = None
    override_price: Decimal | None = Field(
        default=None, ge=0, max_digits=10, decimal_places=2
    )
    multiplier: Decimal | None = Field(
        default=None, gt=0, max_digits=5, decimal_places=2
    )
    period_type: PeriodType | None = None
    min_stay_days: int | None = Field(default=None, ge=1)
    max_stay_days: int | None = Field(default=None, ge=1)


class PricingRuleRead(BaseModel):
    """Serialized pricing rule."""

    id: uuid.UUID
    accommodation_id: uuid.UUID
    start_date: datetime.date
    end_date: datetime.date
    override_price: Decimal | None = None
    multiplier: Decimal
    period_type: PeriodType | None = None
    min_stay_days: int | None = None
    max_stay_days: int | None = None

    model_config = ConfigDict(from_attributes=True)
