"""Availability block endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from accommodation_api.api import deps
from accommodation_api.core.errors import AccommodationServiceError
from accommodation_api.repositories import Repositories
from accommodation_api.schemas.blocked_period import BlockedPeriodRead, ManualBlockCreate
from accommodation_api.security.identity import CallerIdentity, UserRole
from accommodation_api.security.permissions import require_roles
from accommodation_api.services import block_service

router = APIRouter(prefix="/accommodations/{accommodation_id}/blocks")


@router.get(
    "",
    response_model=list[BlockedPeriodRead],
    summary="List blocked periods",
)
async def list_blocks(
    accommodation_id: uuid.UUID,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
) -> list[BlockedPeriodRead]:
    try:
        blocks = await block_service.list_blocks(
            repos, accommodation_id=accommodation_id
        )
    except AccommodationServiceError as exc:
        raise deps.http_error(exc) from exc
    return [BlockedPeriodRead.model_validate(block) for block in blocks]


@router.post(
    "",
    response_model=BlockedPeriodRead,
    status_code=status.HTTP_201_CREATED,
    summary="Block dates manually",
    dependencies=[deps.DEFAULT_RATE_DEP],
)
async def create_block(
    accommodation_id: uuid.UUID,
    payload: ManualBlockCreate,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
    caller: Annotated[CallerIdentity, Depends(deps.get_caller_identity)],
) -> BlockedPeriodRead:
    require_roles(caller, {UserRole.HOST, UserRole.ADMIN})
    try:
        block = await block_service.create_manual_block(
            repos, accommodation_id=accommodation_id, payload=payload, caller=caller
        )
    except AccommodationServiceError as exc:
        raise deps.http_error(exc) from exc
    return BlockedPeriodRead.model_validate(block)


@router.delete(
    "/{block_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a manual block",
    dependencies=[deps.DEFAULT_RATE_DEP],
)
async def delete_block(
    accommodation_id: uuid.UUID,
    block_id: uuid.UUID,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
    caller: Annotated[CallerIdentity, Depends(deps.get_caller_identity)],
) -> Response:
    require_roles(caller, {UserRole.HOST, UserRole.ADMIN})
    try:
        await block_service.delete_manual_block(
            repos, accommodation_id=accommodation_id, block_id=block_id, caller=caller
        )
    except AccommodationServiceError as exc:
        raise deps.http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
