"""Pricing rule endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from accommodation_api.api import deps
from accommodation_api.core.errors import AccommodationServiceError
from accommodation_api.repositories import Repositories
from accommodation_api.schemas.pricing_rule import (
    PricingRuleCreate,
    PricingRuleRead,
    PricingRuleUpdate,
)
from accommodation_api.security.identity import CallerIdentity, UserRole
from accommodation_api.security.permissions import require_roles
from accommodation_api.services import rule_service

router = APIRouter(prefix="/accommodations/{accommodation_id}/rules")

_HOST_ROLES = {UserRole.HOST, UserRole.ADMIN}


@router.get(
    "",
    response_model=list[PricingRuleRead],
    summary="List pricing rules for an accommodation",
)
async def list_rules(
    accommodation_id: uuid.UUID,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
) -> list[PricingRuleRead]:
    try:
        rules = await rule_service.list_rules(repos, accommodation_id=accommodation_id)
    except AccommodationServiceError as exc:
        raise deps.http_error(exc) from exc
    return [PricingRuleRead.model_validate(rule) for rule in rules]


@router.post(
    "",
    response_model=PricingRuleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create pricing rule",
    dependencies=[deps.DEFAULT_RATE_DEP],
)
async def create_rule(
    accommodation_id: uuid.UUID,
    payload: PricingRuleCreate,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
    caller: Annotated[CallerIdentity, Depends(deps.get_caller_identity)],
) -> PricingRuleRead:
    require_roles(caller, _HOST_ROLES)
    try:
        rule = await rule_service.create_rule(
            repos, accommodation_id=accommodation_id, payload=payload, caller=caller
        )
    except AccommodationServiceError as exc:
        raise deps.http_error(exc) from exc
    return PricingRuleRead.model_validate(rule)


@router.patch(
    "/{rule_id}",
    response_model=PricingRuleRead,
    summary="Update pricing rule",
    dependencies=[deps.DEFAULT_RATE_DEP],
)
async def update_rule(
    accommodation_id: uuid.UUID,
    rule_id: uuid.UUID,
    payload: PricingRuleUpdate,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
    caller: Annotated[CallerIdentity, Depends(deps.get_caller_identity)],
) -> PricingRuleRead:
    require_roles(caller, _HOST_ROLES)
    try:
        rule = await rule_service.update_rule(
            repos,
            accommodation_id=accommodation_id,
            rule_id=rule_id,
            payload=payload,
            caller=caller,
        )
    except AccommodationServiceError as exc:
        raise deps.http_error(exc) from exc
    return PricingRuleRead.model_validate(rule)


@router.delete(
    "/{rule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete pricing rule",
    dependencies=[deps.DEFAULT_RATE_DEP],
)
async def delete_rule(
    accommodation_id: uuid.UUID,
    rule_id: uuid.UUID,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
    caller: Annotated[CallerIdentity, Depends(deps.get_caller_identity)],
) -> Response:
    require_roles(caller, _HOST_ROLES)
    try:
        await rule_service.delete_rule(
            repos, accommodation_id=accommodation_id, rule_id=rule_id, caller=caller
        )
    except AccommodationServiceError as exc:
        raise deps.http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
