"""Repository interfaces and their SQLAlchemy implementations."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from accommodation_api.repositories.accommodation import (
    AccommodationRepository,
    AccommodationSearch,
    SqlAlchemyAccommodationRepository,
)
from accommodation_api.repositories.blocked_period import (
    BlockedPeriodRepository,
    SqlAlchemyBlockedPeriodRepository,
)
from accommodation_api.repositories.pricing_rule import (
    PricingRuleRepository,
    SqlAlchemyPricingRuleRepository,
)


@dataclass(slots=True)
class Repositories:
    """The repositories one unit of work operates on."""

    accommodations: AccommodationRepository
    rules: PricingRuleRepository
    blocks: BlockedPeriodRepository


def build_repositories(session: AsyncSession) -> Repositories:
    """Wire the SQLAlchemy repositories around a single session."""

    return Repositories(
        accommodations=SqlAlchemyAccommodationRepository(session),
        rules=SqlAlchemyPricingRuleRepository(session),
        blocks=SqlAlchemyBlockedPeriodRepository(session),
    )


__all__ = [
    "AccommodationRepository",
    "AccommodationSearch",
    "BlockedPeriodRepository",
    "PricingRuleRepository",
    "Repositories",
    "SqlAlchemyAccommodationRepository",
    "SqlAlchemyBlockedPeriodRepository",
    "SqlAlchemyPricingRuleRepository",
    "build_repositories",
]
