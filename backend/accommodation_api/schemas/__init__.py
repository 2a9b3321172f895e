"""Schema exports."""

from accommodation_api.schemas.accommodation import (
    AccommodationCreate,
    AccommodationPage,
    AccommodationRead,
    AccommodationSearchItem,
    AccommodationUpdate,
)
from accommodation_api.schemas.blocked_period import BlockedPeriodRead, ManualBlockCreate
from accommodation_api.schemas.events import (
    EventAck,
    ReservationCreatedEvent,
    ReservationRemovedEvent,
    UserDeletedEvent,
)
from accommodation_api.schemas.internal import (
    AccommodationInfo,
    NightlyPrice,
    PriceCalculationRequest,
    PriceCalculationResult,
)
from accommodation_api.schemas.pricing_rule import (
    PricingRuleCreate,
    PricingRuleRead,
    PricingRuleUpdate,
)

__all__ = [
    "AccommodationCreate",
    "AccommodationInfo",
    "AccommodationPage",
    "AccommodationRead",
    "AccommodationSearchItem",
    "AccommodationUpdate",
    "BlockedPeriodRead",
    "EventAck",
    "ManualBlockCreate",
    "NightlyPrice",
    "PriceCalculationRequest",
    "PriceCalculationResult",
    "PricingRuleCreate",
    "PricingRuleRead",
    "PricingRuleUpdate",
    "ReservationCreatedEvent",
    "ReservationRemovedEvent",
    "UserDeletedEvent",
]
