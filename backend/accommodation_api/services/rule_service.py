"""Pricing rule management for accommodations."""

from __future__ import annotations

import datetime
import logging
import uuid
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError

from accommodation_api.core.errors import ConflictError, InvalidInputError, NotFoundError
from accommodation_api.models import PricingRule
from accommodation_api.repositories import Repositories
from accommodation_api.schemas.pricing_rule import PricingRuleCreate, PricingRuleUpdate
from accommodation_api.security.identity import CallerIdentity
from accommodation_api.services import block_service
from accommodation_api.services.accommodation_service import get_owned_accommodation

logger = logging.getLogger(__name__)

RULE_OVERLAP_MESSAGE = "A rule already exists for this accommodation in the selected period"
_NON_NULLABLE_FIELDS = ("start_date", "end_date", "multiplier")


def _validate_range(start: datetime.date, end: datetime.date) -> None:
    if start >= end:
        raise InvalidInputError("startDate must be before endDate")


def _validate_stay_bounds(min_stay: int | None, max_stay: int | None) -> None:
    if min_stay is not None and max_stay is not None and min_stay > max_stay:
        raise InvalidInputError("minStayDays cannot exceed maxStayDays")


async def _ensure_no_overlapping_rules(
    repos: Repositories,
    *,
    accommodation_id: uuid.UUID,
    start: datetime.date,
    end: datetime.date,
    exclude_rule_id: uuid.UUID | None = None,
) -> None:
    overlapping = await repos.rules.count_overlapping(
        accommodation_id, start, end, exclude_rule_id=exclude_rule_id
    )
    if overlapping > 0:
        raise ConflictError(RULE_OVERLAP_MESSAGE)


async def _get_rule_or_fail(
    repos: Repositories, *, accommodation_id: uuid.UUID, rule_id: uuid.UUID
) -> PricingRule:
    rule = await repos.rules.get(accommodation_id, rule_id)
    if rule is None:
        raise NotFoundError(f"Rule with ID {rule_id} not found")
    return rule


async def list_rules(
    repos: Repositories, *, accommodation_id: uuid.UUID
) -> Sequence[PricingRule]:
    """Return the accommodation's rules ordered by start date."""

    if await repos.accommodations.get(accommodation_id) is None:
        raise NotFoundError(f"Accommodation with ID {accommodation_id} not found")
    return await repos.rules.list_for_accommodation(accommodation_id)


async def create_rule(
    repos: Repositories,
    *,
    accommodation_id: uuid.UUID,
    payload: PricingRuleCreate,
    caller: CallerIdentity,
) -> PricingRule:
    """Create a rule after ownership, range, reservation and overlap checks."""

    _validate_range(payload.start_date, payload.end_date)
    _validate_stay_bounds(payload.min_stay_days, payload.max_stay_days)
    await get_owned_accommodation(
        repos, accommodation_id=accommodation_id, caller=caller, lock=True
    )
    await block_service.ensure_no_active_reservations(
        repos,
        accommodation_id=accommodation_id,
        start=payload.start_date,
        end=payload.end_date,
    )
    await _ensure_no_overlapping_rules(
        repos,
        accommodation_id=accommodation_id,
        start=payload.start_date,
        end=payload.end_date,
    )

    rule = PricingRule(
        accommodation_id=accommodation_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        override_price=payload.override_price,
        multiplier=payload.multiplier,
        period_type=payload.period_type,
        min_stay_days=payload.min_stay_days,
        max_stay_days=payload.max_stay_days,
    )
    try:
        saved = await repos.rules.add(rule)
    except IntegrityError as exc:
        raise ConflictError(RULE_OVERLAP_MESSAGE) from exc
    logger.info(
        "Created pricing rule %s for accommodation %s (%s..%s)",
        saved.id,
        accommodation_id,
        saved.start_date,
        saved.end_date,
    )
    return saved


async def update_rule(
    repos: Repositories,
    *,
    accommodation_id: uuid.UUID,
    rule_id: uuid.UUID,
    payload: PricingRuleUpdate,
    caller: CallerIdentity,
) -> PricingRule:
    """Apply partial changes validated against the effective date range."""

    rule = await _get_rule_or_fail(
        repos, accommodation_id=accommodation_id, rule_id=rule_id
    )
    await get_owned_accommodation(
        repos, accommodation_id=accommodation_id, caller=caller, lock=True
    )

    changes = payload.model_dump(exclude_unset=True)
    for required in _NON_NULLABLE_FIELDS:
        if required in changes and changes[required] is None:
            raise InvalidInputError(f"{required} cannot be null")
    effective_start = changes.get("start_date", rule.start_date)
    effective_end = changes.get("end_date", rule.end_date)
    _validate_range(effective_start, effective_end)
    _validate_stay_bounds(
        changes.get("min_stay_days", rule.min_stay_days),
        changes.get("max_stay_days", rule.max_stay_days),
    )

    await block_service.ensure_no_active_reservations(
        repos,
        accommodation_id=accommodation_id,
        start=effective_start,
        end=effective_end,
    )
    await _ensure_no_overlapping_rules(
        repos,
        accommodation_id=accommodation_id,
        start=effective_start,
        end=effective_end,
        exclude_rule_id=rule.id,
    )

    for field_name, value in changes.items():
        setattr(rule, field_name, value)
    try:
        return await repos.rules.save(rule)
    except IntegrityError as exc:
        raise ConflictError(RULE_OVERLAP_MESSAGE) from exc


async def delete_rule(
    repos: Repositories,
    *,
    accommodation_id: uuid.UUID,
    rule_id: uuid.UUID,
    caller: CallerIdentity,
) -> None:
    """Remove a rule unless a confirmed reservation depends on its pricing."""

    rule = await _get_rule_or_fail(
        repos, accommodation_id=accommodation_id, rule_id=rule_id
    )
    await get_owned_accommodation(
        repos, accommodation_id=accommodation_id, caller=caller, lock=True
    )
    await block_service.ensure_no_active_reservations(
        repos,
        accommodation_id=accommodation_id,
        start=rule.start_date,
        end=rule.end_date,
    )
    await repos.rules.delete(rule)
    logger.info("Deleted pricing rule %s for accommodation %s", rule_id, accommodation_id)
