"""Operations called by peer services (reservation service)."""

from __future__ import annotations

import datetime
import logging
import re
import uuid
from decimal import Decimal

from accommodation_api.repositories import Repositories
from accommodation_api.schemas.internal import (
    AccommodationInfo,
    NightlyPrice,
    PriceCalculationResult,
)
from accommodation_api.services import pricing_service

logger = logging.getLogger(__name__)

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def _parse_date(value: str) -> datetime.date | None:
    """Parse a strict zero-padded ``YYYY-MM-DD`` date; anything else is None."""

    if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
        return None
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        return None


async def get_accommodation_info(
    repos: Repositories, *, accommodation_id: uuid.UUID
) -> AccommodationInfo:
    """Summarise an accommodation; unknown ids report ``exists=False``."""

    accommodation = await repos.accommodations.get(accommodation_id)
    if accommodation is None:
        return AccommodationInfo(
            exists=False,
            accommodation_id=accommodation_id,
            base_price=Decimal("0.00"),
            auto_approve=False,
            host_id="",
            min_guests=0,
            max_guests=0,
            is_per_unit=False,
        )
    return AccommodationInfo(
        exists=True,
        accommodation_id=accommodation.id,
        base_price=accommodation.base_price,
        auto_approve=accommodation.auto_approve,
        host_id=accommodation.host_id,
        min_guests=accommodation.min_guests,
        max_guests=accommodation.max_guests,
        is_per_unit=accommodation.is_per_unit,
    )


async def validate_and_calculate_price(
    repos: Repositories,
    *,
    accommodation_id: uuid.UUID,
    check_in: str,
    check_out: str,
    guest_count: int,
) -> PriceCalculationResult:
    """Validate a requested stay and price it.

    Validation failures are reported through ``success=False`` and a message
    instead of raising, so the caller can relay the reason to its client.
    """

    start = _parse_date(check_in)
    end = _parse_date(check_out)
    if start is None or end is None:
        return PriceCalculationResult(
            success=False, message="Dates must use the YYYY-MM-DD format"
        )
    if start >= end:
        return PriceCalculationResult(
            success=False, message="checkIn must be before checkOut"
        )

    accommodation = await repos.accommodations.get(accommodation_id)
    if accommodation is None:
        return PriceCalculationResult(
            success=False,
            message=f"Accommodation with ID {accommodation_id} not found",
        )
    if not accommodation.min_guests <= guest_count <= accommodation.max_guests:
        return PriceCalculationResult(
            success=False,
            message=(
                f"Guest count must be between {accommodation.min_guests} "
                f"and {accommodation.max_guests}"
            ),
            base_price=accommodation.base_price,
            is_per_unit=accommodation.is_per_unit,
            auto_approve=accommodation.auto_approve,
        )

    rules = await repos.rules.list_for_accommodation(accommodation.id)
    stay = pricing_service.price_for_stay(
        accommodation,
        rules,
        check_in=start,
        nights=pricing_service.nights_between(start, end),
        guest_count=guest_count,
    )
    logger.debug(
        "Priced %s nights on accommodation %s at %s",
        stay.nights,
        accommodation.id,
        stay.total,
    )
    return PriceCalculationResult(
        success=True,
        message="Price calculated successfully",
        nights=stay.nights,
        total_price=stay.total,
        price_per_night=stay.price_per_night,
        rules_applied=stay.rules_applied,
        base_price=accommodation.base_price,
        is_per_unit=accommodation.is_per_unit,
        auto_approve=accommodation.auto_approve,
        nightly_prices=[
            NightlyPrice(
                night=item.night,
                price=pricing_service.to_money(item.amount),
                rule_id=item.rule.id if item.rule is not None else None,
            )
            for item in stay.breakdown
        ],
    )
