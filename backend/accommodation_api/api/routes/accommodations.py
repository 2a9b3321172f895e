"""Accommodation listing, search and photo endpoints."""

from __future__ import annotations

import datetime
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status

from accommodation_api.api import deps
from accommodation_api.core.config import get_settings
from accommodation_api.core.errors import AccommodationServiceError, PhotoStorageError
from accommodation_api.integrations import S3Client
from accommodation_api.models import Accommodation
from accommodation_api.repositories import Repositories
from accommodation_api.schemas.accommodation import (
    AccommodationCreate,
    AccommodationPage,
    AccommodationRead,
    AccommodationSearchItem,
    AccommodationUpdate,
)
from accommodation_api.security.identity import CallerIdentity, UserRole
from accommodation_api.security.permissions import require_roles
from accommodation_api.services import accommodation_service
from accommodation_api.services.accommodation_service import SearchFilters, SearchHit
from accommodation_api.services.photo_service import PhotoUpload

router = APIRouter(prefix="/accommodations")
settings = get_settings()

_HOST_ROLES = {UserRole.HOST, UserRole.ADMIN}


def _accommodation_to_read(
    accommodation: Accommodation, *, s3_client: S3Client
) -> AccommodationRead:
    result = AccommodationRead.model_validate(accommodation)
    result.photo_urls = s3_client.build_object_urls(list(accommodation.photo_keys))
    return result


def _hit_to_item(hit: SearchHit, *, s3_client: S3Client) -> AccommodationSearchItem:
    item = AccommodationSearchItem.model_validate(hit.accommodation)
    item.photo_urls = s3_client.build_object_urls(list(hit.accommodation.photo_keys))
    if hit.price is not None:
        item.total_price_for_stay = hit.price.total
        item.price_per_night = hit.price.price_per_night
        item.nights = hit.price.nights
        item.rules_applied = hit.price.rules_applied
    return item


@router.get("", response_model=AccommodationPage, summary="Search accommodations")
async def list_accommodations(
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
    s3_client: Annotated[S3Client, Depends(deps.get_s3_client)],
    location: str | None = Query(default=None, max_length=255),
    guests: int | None = Query(default=None, ge=1),
    check_in: datetime.date | None = Query(default=None, alias="checkIn"),
    check_out: datetime.date | None = Query(default=None, alias="checkOut"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(
        default=settings.page_size_default,
        ge=1,
        le=settings.page_size_max,
        alias="pageSize",
    ),
) -> AccommodationPage:
    try:
        result = await accommodation_service.find_all(
            repos,
            filters=SearchFilters(
                location=location,
                guests=guests,
                check_in=check_in,
                check_out=check_out,
                page=page,
                page_size=page_size,
            ),
        )
    except AccommodationServiceError as exc:
        raise deps.http_error(exc) from exc
    return AccommodationPage(
        data=[_hit_to_item(hit, s3_client=s3_client) for hit in result.hits],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


@router.post(
    "",
    response_model=AccommodationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create accommodation",
    dependencies=[deps.DEFAULT_RATE_DEP],
)
async def create_accommodation(
    payload: AccommodationCreate,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
    s3_client: Annotated[S3Client, Depends(deps.get_s3_client)],
    caller: Annotated[CallerIdentity, Depends(deps.get_caller_identity)],
) -> AccommodationRead:
    require_roles(caller, _HOST_ROLES)
    try:
        accommodation = await accommodation_service.create_accommodation(
            repos, payload=payload, caller=caller
        )
    except AccommodationServiceError as exc:
        raise deps.http_error(exc) from exc
    return _accommodation_to_read(accommodation, s3_client=s3_client)


@router.get(
    "/{accommodation_id}",
    response_model=AccommodationRead,
    summary="Get accommodation",
)
async def get_accommodation(
    accommodation_id: uuid.UUID,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
    s3_client: Annotated[S3Client, Depends(deps.get_s3_client)],
) -> AccommodationRead:
    try:
        accommodation = await accommodation_service.get_accommodation(
            repos, accommodation_id=accommodation_id
        )
    except AccommodationServiceError as exc:
        raise deps.http_error(exc) from exc
    return _accommodation_to_read(accommodation, s3_client=s3_client)


@router.put(
    "/{accommodation_id}",
    response_model=AccommodationRead,
    summary="Update accommodation",
    dependencies=[deps.DEFAULT_RATE_DEP],
)
async def update_accommodation(
    accommodation_id: uuid.UUID,
    payload: AccommodationUpdate,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
    s3_client: Annotated[S3Client, Depends(deps.get_s3_client)],
    caller: Annotated[CallerIdentity, Depends(deps.get_caller_identity)],
) -> AccommodationRead:
    require_roles(caller, _HOST_ROLES)
    try:
        accommodation = await accommodation_service.update_accommodation(
            repos, accommodation_id=accommodation_id, payload=payload, caller=caller
        )
    except AccommodationServiceError as exc:
        raise deps.http_error(exc) from exc
    return _accommodation_to_read(accommodation, s3_client=s3_client)


@router.delete(
    "/{accommodation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete accommodation",
    dependencies=[deps.DEFAULT_RATE_DEP],
)
async def delete_accommodation(
    accommodation_id: uuid.UUID,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
    s3_client: Annotated[S3Client, Depends(deps.get_s3_client)],
    caller: Annotated[CallerIdentity, Depends(deps.get_caller_identity)],
) -> Response:
    require_roles(caller, _HOST_ROLES)
    try:
        await accommodation_service.delete_accommodation(
            repos, s3_client, accommodation_id=accommodation_id, caller=caller
        )
    except (AccommodationServiceError, PhotoStorageError) as exc:
        raise deps.http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{accommodation_id}/photos",
    response_model=AccommodationRead,
    summary="Upload accommodation photos",
    dependencies=[deps.DEFAULT_RATE_DEP],
)
async def upload_photos(
    accommodation_id: uuid.UUID,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
    s3_client: Annotated[S3Client, Depends(deps.get_s3_client)],
    caller: Annotated[CallerIdentity, Depends(deps.get_caller_identity)],
    files: list[UploadFile] = File(...),
) -> AccommodationRead:
    require_roles(caller, _HOST_ROLES)
    uploads = [
        PhotoUpload(
            filename=upload.filename or "",
            content_type=upload.content_type,
            data=await upload.read(),
        )
        for upload in files
    ]
    try:
        accommodation = await accommodation_service.upload_photos(
            repos,
            s3_client,
            accommodation_id=accommodation_id,
            files=uploads,
            caller=caller,
            settings=settings,
        )
    except (AccommodationServiceError, PhotoStorageError) as exc:
        raise deps.http_error(exc) from exc
    return _accommodation_to_read(accommodation, s3_client=s3_client)
