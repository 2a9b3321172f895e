"""Schemas for operations called by peer services."""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal

from pydantic import BaseModel, Field


class AccommodationInfo(BaseModel):
    """Summary the reservation service needs before booking."""

    exists: bool
    accommodation_id: uuid.UUID
    base_price: Decimal
    auto_approve: bool
    host_id: str
    min_guests: int
    max_guests: int
    is_per_unit: bool


class PriceCalculationRequest(BaseModel):
    """Stay to validate; dates are ``YYYY-MM-DD`` strings."""

    check_in: str
    check_out: str
    guest_count: int


class NightlyPrice(BaseModel):
    """Charge for one night; `rule_id` names the pricing rule that set it."""

    night: datetime.date
    price: Decimal
    rule_id: uuid.UUID | None = None


class PriceCalculationResult(BaseModel):
    """Validation outcome and, on success, the priced stay."""

    success: bool
    message: str
    nights: int = 0
    total_price: Decimal = Decimal("0.00")
    price_per_night: Decimal = Decimal("0.00")
    rules_applied: int = 0
    base_price: Decimal = Decimal("0.00")
    is_per_unit: bool = False
    auto_approve: bool = False
    nightly_prices: list[NightlyPrice] = Field(default_factory=list)
