"""Payloads published by peer services on the event bus."""

from __future__ import annotations

import datetime
import uuid

from pydantic import BaseModel, ConfigDict, Field


class _EventModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ReservationCreatedEvent(_EventModel):
    """``reservation.created``: block the reserved dates."""

    reservation_id: str = Field(alias="reservationId", min_length=1)
    accommodation_id: uuid.UUID = Field(alias="accommodationId")
    start_date: datetime.date = Field(alias="startDate")
    end_date: datetime.date = Field(alias="endDate")


class ReservationRemovedEvent(_EventModel):
    """``reservation.removed``: release the reserved dates."""

    reservation_id: str = Field(alias="reservationId", min_length=1)


class UserDeletedEvent(_EventModel):
    """``user.deleted``: remove listings owned by a deleted host."""

    user_id: str = Field(alias="userId", min_length=1)
    user_email: str | None = Field(default=None, alias="userEmail")
    user_role: str | None = Field(default=None, alias="userRole")


class EventAck(BaseModel):
    """Outcome reported back to the bus bridge."""

    status: str
