"""Accommodation persistence."""

from __future__ import annotations

import datetime
import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import Select, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from accommodation_api.models import Accommodation, BlockedPeriod
from accommodation_api.services.intervals import open_overlap_clause


@dataclass(slots=True)
class AccommodationSearch:
    """Filters applied when listing accommodations."""

    location: str | None = None
    guests: int | None = None
    available_from: datetime.date | None = None
    available_to: datetime.date | None = None
    offset: int = 0
    limit: int = 20


def _escape_like(value: str) -> str:
    return (
        value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )

class AccommodationRepository(ABC):
    """Repository interface for the Accommodation aggregate root."""

    @abstractmethod
    async def get(
        self, accommodation_id: uuid.UUID, *, for_update: bool = False
    ) -> Accommodation | None:
        """Return the accommodation or None.

        With ``for_update`` the row stays locked until the transaction ends,
        serialising writers that check and then insert rules or blocks.
        """

    @abstractmethod
    async def add(self, accommodation: Accommodation) -> Accommodation:
        """Persist a new accommodation."""

    @abstractmethod
    async def save(self, accommodation: Accommodation) -> Accommodation:
        """Flush pending changes to an existing accommodation."""

    @abstractmethod
    async def delete(self, accommodation: Accommodation) -> None:
        """Remove the accommodation together with its rules and blocks."""

    @abstractmethod
    async def list_by_host(self, host_id: str) -> Sequence[Accommodation]:
        """Return every accommodation owned by the host."""

    @abstractmethod
    async def search(
        self, criteria: AccommodationSearch
    ) -> tuple[Sequence[Accommodation], int]:
        """Return one page of matches and the total match count."""


class SqlAlchemyAccommodationRepository(AccommodationRepository):
    """Accommodation repository backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(
        self, accommodation_id: uuid.UUID, *, for_update: bool = False
    ) -> Accommodation | None:
        if for_update:
            return await self.session.get(
                Accommodation,
                accommodation_id,
                with_for_update=True,
                populate_existing=True,
            )
        return await self.session.get(Accommodation, accommodation_id)

    async def add(self, accommodation: Accommodation) -> Accommodation:
        self.session.add(accommodation)
        await self.session.commit()
        await self.session.refresh(accommodation)
        return accommodation

    async def save(self, accommodation: Accommodation) -> Accommodation:
        await self.session.commit()
        await self.session.refresh(accommodation)
        return accommodation

    async def delete(self, accommodation: Accommodation) -> None:
        await self.session.delete(accommodation)
        await self.session.commit()

    async def list_by_host(self, host_id: str) -> Sequence[Accommodation]:
        result = await self.session.execute(
            select(Accommodation)
            .where(Accommodation.host_id == host_id)
            .order_by(Accommodation.created_at)
        )
        return result.scalars().all()

    async def search(
        self, criteria: AccommodationSearch
    ) -> tuple[Sequence[Accommodation], int]:
        stmt = self._filtered(criteria)
        total = await self.session.scalar(
            select(func.count()).select_from(stmt.subquery())
        )
        result = await self.session.execute(
            stmt.order_by(Accommodation.created_at, Accommodation.id)
            .offset(criteria.offset)
            .limit(criteria.limit)
        )
        return result.scalars().all(), int(total or 0)

    def _filtered(self, criteria: AccommodationSearch) -> Select[tuple[Accommodation]]:
        stmt = select(Accommodation)
        if criteria.location:
            pattern = _escape_like(criteria.location)
            stmt = stmt.where(
                Accommodation.location.ilike(f"%{pattern}%", escape="\\")
            )
        if criteria.guests is not None:
            stmt = stmt.where(
                Accommodation.min_guests <= criteria.guests,
                Accommodation.max_guests >= criteria.guests,
            )
        if criteria.available_from is not None and criteria.available_to is not None:
            blocked = exists().where(
                BlockedPeriod.accommodation_id == Accommodation.id,
                open_overlap_clause(
                    BlockedPeriod.start_date,
                    BlockedPeriod.end_date,
                    criteria.available_from,
                    criteria.available_to,
                ),
            )
            stmt = stmt.where(~blocked)
        return stmt


__all__ = [
    "AccommodationRepository",
    "AccommodationSearch",
    "SqlAlchemyAccommodationRepository",
]
