"""Operations for peer services inside the cluster."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends

from accommodation_api.api import deps
from accommodation_api.repositories import Repositories
from accommodation_api.schemas.internal import (
    AccommodationInfo,
    PriceCalculationRequest,
    PriceCalculationResult,
)
from accommodation_api.services import internal_service

router = APIRouter(prefix="/internal/accommodations/{accommodation_id}")


@router.get("/info", response_model=AccommodationInfo, summary="Accommodation summary")
async def get_accommodation_info(
    accommodation_id: uuid.UUID,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
) -> AccommodationInfo:
    return await internal_service.get_accommodation_info(
        repos, accommodation_id=accommodation_id
    )


@router.post(
    "/price",
    response_model=PriceCalculationResult,
    summary="Validate a stay and calculate its price",
)
async def validate_and_calculate_price(
    accommodation_id: uuid.UUID,
    payload: PriceCalculationRequest,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
) -> PriceCalculationResult:
    return await internal_service.validate_and_calculate_price(
        repos,
        accommodation_id=accommodation_id,
        check_in=payload.check_in,
        check_out=payload.check_out,
        guest_count=payload.guest_count,
    )
