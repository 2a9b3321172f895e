"""Nightly price computation for a stay."""

from __future__ import annotations

import datetime
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from accommodation_api.models import Accommodation, PricingRule
from accommodation_api.services.intervals import iter_nights

MONEY_PLACES = Decimal("0.01")


@dataclass(slots=True)
class NightPrice:
    """Price charged for a single night of a stay."""

    night: datetime.date
    amount: Decimal
    rule: PricingRule | None = None


@dataclass(slots=True)
class StayPrice:
    """Aggregate pricing output for a stay."""

    nights: int
    total: Decimal
    price_per_night: Decimal
    rules_applied: int
    breakdown: list[NightPrice]


def to_money(value: Decimal | float | str) -> Decimal:
    return Decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def nights_between(check_in: datetime.date, check_out: datetime.date) -> int:
    """Number of nights between arrival and departure."""

    return (check_out - check_in).days


def find_rule(
    rules: Sequence[PricingRule], night: datetime.date
) -> PricingRule | None:
    """Return the first rule covering the night, in the order given."""

    for rule in rules:
        if rule.covers(night):
            return rule
    return None


def rule_night_price(rule: PricingRule, base_price: Decimal) -> Decimal:
    """Nightly price under a rule; an override wins over the multiplier."""

    if rule.override_price is not None:
        return Decimal(rule.override_price)
    return Decimal(base_price) * Decimal(rule.multiplier)


def order_rules(rules: Sequence[PricingRule]) -> list[PricingRule]:
    """Rules in lookup order: start date ascending, then id."""

    return sorted(rules, key=lambda rule: (rule.start_date, str(rule.id)))


def price_for_stay(
    accommodation: Accommodation,
    rules: Sequence[PricingRule],
    *,
    check_in: datetime.date,
    nights: int,
    guest_count: int,
) -> StayPrice:
    """Price each night of a stay by overlaying rules on the base price.

    Amounts are accumulated unrounded; only the returned total and the
    average per-night price are rounded to cents (half up).
    """

    base_price = Decimal(accommodation.base_price)
    ordered = order_rules(rules)
    breakdown: list[NightPrice] = []
    total = Decimal("0")
    rules_applied = 0

    for night in iter_nights(check_in, nights):
        rule = find_rule(ordered, night)
        if rule is not None:
            amount = rule_night_price(rule, base_price)
            rules_applied += 1
        else:
            amount = base_price
        if not accommodation.is_per_unit:
            amount *= guest_count
        breakdown.append(NightPrice(night=night, amount=amount, rule=rule))
        total += amount

    price_per_night = total / nights if nights > 0 else Decimal("0")
    return StayPrice(
        nights=max(nights, 0),
        total=to_money(total),
        price_per_night=to_money(price_per_night),
        rules_applied=rules_applied,
        breakdown=breakdown,
    )


__all__ = [
    "MONEY_PLACES",
    "NightPrice",
    "StayPrice",
    "find_rule",
    "nights_between",
    "order_rules",
    "price_for_stay",
    "rule_night_price",
    "to_money",
]
