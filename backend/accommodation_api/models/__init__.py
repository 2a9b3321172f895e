"""ORM models package export."""

from accommodation_api.models.accommodation import Accommodation
from accommodation_api.models.blocked_period import BlockedPeriod, BlockReason
from accommodation_api.models.pricing_rule import PeriodType, PricingRule

__all__ = [
    "Accommodation",
    "BlockedPeriod",
    "BlockReason",
    "PeriodType",
    "PricingRule",
]
