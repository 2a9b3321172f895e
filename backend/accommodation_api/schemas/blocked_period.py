"""Blocked period schema definitions."""

from __future__ import annotations

import datetime
import uuid

from pydantic import BaseModel, ConfigDict, Field

from accommodation_api.models.blocked_period import BlockReason


class ManualBlockCreate(BaseModel):
    """Payload for a host-authored availability block."""

    start_date: datetime.date
    end_date: datetime.date
    notes: str | None = Field(default=None, max_length=1024)


class BlockedPeriodRead(BaseModel):
    """Serialized blocked period; reservation ids stay internal."""

    id: uuid.UUID
    accommodation_id: uuid.UUID
    start_date: datetime.date
    end_date: datetime.date
    reason: BlockReason
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True)
