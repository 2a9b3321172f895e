"""Blocked period persistence."""

from __future__ import annotations

import datetime
import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from accommodation_api.models import BlockedPeriod, BlockReason
from accommodation_api.services.intervals import overlap_clause


class BlockedPeriodRepository(ABC):
    """Repository interface for blocked periods."""

    @abstractmethod
    async def get(
        self,
        accommodation_id: uuid.UUID,
        block_id: uuid.UUID,
        *,
        reason: BlockReason | None = None,
    ) -> BlockedPeriod | None:
        """Return the block when it belongs to the accommodation."""

    @abstractmethod
    async def get_by_reservation_id(self, reservation_id: str) -> BlockedPeriod | None:
        """Return the block created for a reservation, if any."""

    @abstractmethod
    async def list_for_accommodation(
        self, accommodation_id: uuid.UUID
    ) -> Sequence[BlockedPeriod]:
        """Return blocks ordered by start date ascending."""

    @abstractmethod
    async def count_overlapping(
        self,
        accommodation_id: uuid.UUID,
        start: datetime.date,
        end: datetime.date,
        *,
        reason: BlockReason | None = None,
    ) -> int:
        """Count blocks whose closed range intersects ``[start, end]``."""

    @abstractmethod
    async def add(self, block: BlockedPeriod) -> BlockedPeriod:
        """Persist a new block."""

    @abstractmethod
    async def delete(self, block: BlockedPeriod) -> None:
        """Remove the block."""

    @abstractmethod
    async def delete_by_reservation_id(self, reservation_id: str) -> int:
        """Remove blocks for a reservation and return how many were removed."""


class SqlAlchemyBlockedPeriodRepository(BlockedPeriodRepository):
    """Blocked period repository backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(
        self,
        accommodation_id: uuid.UUID,
        block_id: uuid.UUID,
        *,
        reason: BlockReason | None = None,
    ) -> BlockedPeriod | None:
        stmt = select(BlockedPeriod).where(
            BlockedPeriod.id == block_id,
            BlockedPeriod.accommodation_id == accommodation_id,
        )
        if reason is not None:
            stmt = stmt.where(BlockedPeriod.reason == reason)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_reservation_id(self, reservation_id: str) -> BlockedPeriod | None:
        result = await self.session.execute(
            select(BlockedPeriod).where(BlockedPeriod.reservation_id == reservation_id)
        )
        return result.scalar_one_or_none()

    async def list_for_accommodation(
        self, accommodation_id: uuid.UUID
    ) -> Sequence[BlockedPeriod]:
        result = await self.session.execute(
            select(BlockedPeriod)
            .where(BlockedPeriod.accommodation_id == accommodation_id)
            .order_by(BlockedPeriod.start_date, BlockedPeriod.id)
        )
        return result.scalars().all()

    async def count_overlapping(
        self,
        accommodation_id: uuid.UUID,
        start: datetime.date,
        end: datetime.date,
        *,
        reason: BlockReason | None = None,
    ) -> int:
        stmt = select(func.count(BlockedPeriod.id)).where(
            BlockedPeriod.accommodation_id == accommodation_id,
            overlap_clause(BlockedPeriod.start_date, BlockedPeriod.end_date, start, end),
        )
        if reason is not None:
            stmt = stmt.where(BlockedPeriod.reason == reason)
        return int(await self.session.scalar(stmt) or 0)

    async def add(self, block: BlockedPeriod) -> BlockedPeriod:
        self.session.add(block)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
        await self.session.refresh(block)
        return block

    async def delete(self, block: BlockedPeriod) -> None:
        await self.session.delete(block)
        await self.session.commit()

    async def delete_by_reservation_id(self, reservation_id: str) -> int:
        result = await self.session.execute(
            delete(BlockedPeriod).where(BlockedPeriod.reservation_id == reservation_id)
        )
        await self.session.commit()
        return int(result.rowcount or 0)


__all__ = ["BlockedPeriodRepository", "SqlAlchemyBlockedPeriodRepository"]
