"""Accommodation schema definitions."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class AccommodationBase(BaseModel):
    """Shared accommodation fields."""

    name: str = Field(min_length=1, max_length=255)
    location: str = Field(min_length=1, max_length=255)
    amenities: list[str] = Field(default_factory=list)
    min_guests: int = Field(ge=1)
    max_guests: int = Field(ge=1)
    auto_approve: bool = False
    is_per_unit: bool = False
    base_price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


class AccommodationCreate(AccommodationBase):
    """Payload for listing a new accommodation; the host is the caller."""


class AccommodationUpdate(BaseModel):
    """Mutable accommodation fields; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    amenities: list[str] | None = None
    min_guests: int | None = Field(default=None, ge=1)
    max_guests: int | None = Field(default=None, ge=1)
    auto_approve: bool | None = None
    is_per_unit: bool | None = None
    base_price: Decimal | None = Field(
        default=None, ge=0, max_digits=10, decimal_places=2
    )


class AccommodationRead(AccommodationBase):
    """Serialized accommodation response."""

    id: uuid.UUID
    host_id: str
    photo_urls: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AccommodationSearchItem(AccommodationRead):
    """Search result optionally carrying the computed stay price."""

    total_price_for_stay: Decimal | None = None
    price_per_night: Decimal | None = None
    nights: int | None = None
    rules_applied: int | None = None


class AccommodationPage(BaseModel):
    """Paginated search response."""

    data: list[AccommodationSearchItem]
    total: int
    page: int
    page_size: int
