"""Pricing rule persistence."""

from __future__ import annotations

import datetime
import uuid
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Iterable, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from accommodation_api.models import PricingRule
from accommodation_api.services.intervals import overlap_clause


class PricingRuleRepository(ABC):
    """Repository interface for pricing rules."""

    @abstractmethod
    async def get(
        self, accommodation_id: uuid.UUID, rule_id: uuid.UUID
    ) -> PricingRule | None:
        """Return the rule when it belongs to the accommodation."""

    @abstractmethod
    async def list_for_accommodation(
        self, accommodation_id: uuid.UUID
    ) -> Sequence[PricingRule]:
        """Return rules ordered by start date ascending."""

    @abstractmethod
    async def list_for_accommodations(
        self, accommodation_ids: Iterable[uuid.UUID]
    ) -> dict[uuid.UUID, list[PricingRule]]:
        """Return ordered rules grouped by accommodation id."""

    @abstractmethod
    async def count_overlapping(
        self,
        accommodation_id: uuid.UUID,
        start: datetime.date,
        end: datetime.date,
        *,
        exclude_rule_id: uuid.UUID | None = None,
    ) -> int:
        """Count rules whose closed range intersects ``[start, end]``."""

    @abstractmethod
    async def add(self, rule: PricingRule) -> PricingRule:
        """Persist a new rule."""

    @abstractmethod
    async def save(self, rule: PricingRule) -> PricingRule:
        """Flush pending changes to an existing rule."""

    @abstractmethod
    async def delete(self, rule: PricingRule) -> None:
        """Remove the rule."""


class SqlAlchemyPricingRuleRepository(PricingRuleRepository):
    """Pricing rule repository backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(
        self, accommodation_id: uuid.UUID, rule_id: uuid.UUID
    ) -> PricingRule | None:
        result = await self.session.execute(
            select(PricingRule).where(
                PricingRule.id == rule_id,
                PricingRule.accommodation_id == accommodation_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_accommodation(
        self, accommodation_id: uuid.UUID
    ) -> Sequence[PricingRule]:
        result = await self.session.execute(
            select(PricingRule)
            .where(PricingRule.accommodation_id == accommodation_id)
            .order_by(PricingRule.start_date, PricingRule.id)
        )
        return result.scalars().all()

    async def list_for_accommodations(
        self, accommodation_ids: Iterable[uuid.UUID]
    ) -> dict[uuid.UUID, list[PricingRule]]:
        ids = list(accommodation_ids)
        grouped: dict[uuid.UUID, list[PricingRule]] = defaultdict(list)
        if not ids:
            return grouped
        result = await self.session.execute(
            select(PricingRule)
            .where(PricingRule.accommodation_id.in_(ids))
            .order_by(PricingRule.start_date, PricingRule.id)
        )
        for rule in result.scalars().all():
            grouped[rule.accommodation_id].append(rule)
        return grouped

    async def count_overlapping(
        self,
        accommodation_id: uuid.UUID,
        start: datetime.date,
        end: datetime.date,
        *,
        exclude_rule_id: uuid.UUID | None = None,
    ) -> int:
        stmt = select(func.count(PricingRule.id)).where(
            PricingRule.accommodation_id == accommodation_id,
            overlap_clause(PricingRule.start_date, PricingRule.end_date, start, end),
        )
        if exclude_rule_id is not None:
            stmt = stmt.where(PricingRule.id != exclude_rule_id)
        return int(await self.session.scalar(stmt) or 0)

    async def add(self, rule: PricingRule) -> PricingRule:
        self.session.add(rule)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
        await self.session.refresh(rule)
        return rule

    async def save(self, rule: PricingRule) -> PricingRule:
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
        await self.session.refresh(rule)
        return rule

    async def delete(self, rule: PricingRule) -> None:
        await self.session.delete(rule)
        await self.session.commit()


__all__ = ["PricingRuleRepository", "SqlAlchemyPricingRuleRepository"]
