"""Accommodation lifecycle, photos and search."""

from __future__ import annotations

import datetime
import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from accommodation_api.core.config import Settings
from accommodation_api.core.errors import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    PhotoStorageError,
)
from accommodation_api.integrations import S3Client
from accommodation_api.models import Accommodation
from accommodation_api.repositories import AccommodationSearch, Repositories
from accommodation_api.schemas.accommodation import AccommodationCreate, AccommodationUpdate
from accommodation_api.security.identity import CallerIdentity
from accommodation_api.services import photo_service, pricing_service
from accommodation_api.services.photo_service import PhotoUpload
from accommodation_api.services.pricing_service import StayPrice

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchFilters:
    """Query parameters accepted by the accommodation search."""

    location: str | None = None
    guests: int | None = None
    check_in: datetime.date | None = None
    check_out: datetime.date | None = None
    page: int = 1
    page_size: int = 20


@dataclass(slots=True)
class SearchHit:
    """An accommodation and, when dates were requested, its stay price."""

    accommodation: Accommodation
    price: StayPrice | None = None


@dataclass(slots=True)
class SearchPage:
    hits: list[SearchHit]
    total: int
    page: int
    page_size: int


def _validate_guest_bounds(min_guests: int, max_guests: int) -> None:
    if min_guests > max_guests:
        raise InvalidInputError("minGuests cannot be greater than maxGuests")


async def get_accommodation(
    repos: Repositories, *, accommodation_id: uuid.UUID, lock: bool = False
) -> Accommodation:
    """Return the accommodation or raise NotFoundError; ``lock`` holds the row."""

    accommodation = await repos.accommodations.get(accommodation_id, for_update=lock)
    if accommodation is None:
        raise NotFoundError(f"Accommodation with ID {accommodation_id} not found")
    return accommodation


async def get_owned_accommodation(
    repos: Repositories,
    *,
    accommodation_id: uuid.UUID,
    caller: CallerIdentity,
    lock: bool = False,
) -> Accommodation:
    """Return the accommodation when the caller is its host."""

    accommodation = await get_accommodation(
        repos, accommodation_id=accommodation_id, lock=lock
    )
    if not caller.is_host_of(accommodation.host_id):
        raise ForbiddenError("You do not own this accommodation")
    return accommodation


async def create_accommodation(
    repos: Repositories,
    *,
    payload: AccommodationCreate,
    caller: CallerIdentity,
) -> Accommodation:
    """List a new accommodation owned by the caller."""

    _validate_guest_bounds(payload.min_guests, payload.max_guests)
    accommodation = Accommodation(
        name=payload.name,
        location=payload.location,
        amenities=list(payload.amenities),
        photo_keys=[],
        min_guests=payload.min_guests,
        max_guests=payload.max_guests,
        host_id=caller.id,
        auto_approve=payload.auto_approve,
        is_per_unit=payload.is_per_unit,
        base_price=payload.base_price,
    )
    saved = await repos.accommodations.add(accommodation)
    logger.info("Host %s created accommodation %s", caller.id, saved.id)
    return saved


async def update_accommodation(
    repos: Repositories,
    *,
    accommodation_id: uuid.UUID,
    payload: AccommodationUpdate,
    caller: CallerIdentity,
) -> Accommodation:
    """Apply the provided fields to an accommodation owned by the caller."""

    accommodation = await get_owned_accommodation(
        repos, accommodation_id=accommodation_id, caller=caller
    )
    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }
    _validate_guest_bounds(
        changes.get("min_guests", accommodation.min_guests),
        changes.get("max_guests", accommodation.max_guests),
    )
    for field_name, value in changes.items():
        setattr(accommodation, field_name, value)
    return await repos.accommodations.save(accommodation)


async def delete_accommodation(
    repos: Repositories,
    s3_client: S3Client,
    *,
    accommodation_id: uuid.UUID,
    caller: CallerIdentity,
) -> None:
    """Delete an accommodation, its photos, rules and blocks."""

    accommodation = await get_owned_accommodation(
        repos, accommodation_id=accommodation_id, caller=caller
    )
    await _remove(repos, s3_client, accommodation)
    logger.info("Host %s deleted accommodation %s", caller.id, accommodation_id)


async def upload_photos(
    repos: Repositories,
    s3_client: S3Client,
    *,
    accommodation_id: uuid.UUID,
    files: Sequence[PhotoUpload],
    caller: CallerIdentity,
    settings: Settings,
) -> Accommodation:
    """Store photos and append their keys; nothing is kept if any step fails."""

    accommodation = await get_owned_accommodation(
        repos, accommodation_id=accommodation_id, caller=caller
    )
    new_keys = photo_service.store_photos(
        s3_client,
        accommodation_id=accommodation.id,
        files=files,
        settings=settings,
    )
    accommodation.photo_keys = [*accommodation.photo_keys, *new_keys]
    try:
        return await repos.accommodations.save(accommodation)
    except Exception:
        photo_service.delete_photos(s3_client, new_keys)
        raise


async def remove_all_by_host_id(
    repos: Repositories, s3_client: S3Client, *, host_id: str
) -> int:
    """Delete every accommodation of a host; returns how many were removed."""

    accommodations = await repos.accommodations.list_by_host(host_id)
    for accommodation in accommodations:
        await _remove(repos, s3_client, accommodation)
    return len(accommodations)


async def find_all(repos: Repositories, *, filters: SearchFilters) -> SearchPage:
    """Search accommodations, pricing the stay when dates are supplied."""

    if (filters.check_in is None) != (filters.check_out is None):
        raise InvalidInputError("checkIn and checkOut must be provided together")
    if (
        filters.check_in is not None
        and filters.check_out is not None
        and filters.check_in >= filters.check_out
    ):
        raise InvalidInputError("checkIn must be before checkOut")

    page = max(filters.page, 1)
    page_size = max(filters.page_size, 1)
    accommodations, total = await repos.accommodations.search(
        AccommodationSearch(
            location=filters.location,
            guests=filters.guests,
            available_from=filters.check_in,
            available_to=filters.check_out,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
    )

    hits = [SearchHit(accommodation=item) for item in accommodations]
    if filters.check_in is not None and filters.check_out is not None and hits:
        nights = pricing_service.nights_between(filters.check_in, filters.check_out)
        rules_by_accommodation = await repos.rules.list_for_accommodations(
            item.id for item in accommodations
        )
        for hit in hits:
            accommodation = hit.accommodation
            hit.price = pricing_service.price_for_stay(
                accommodation,
                rules_by_accommodation.get(accommodation.id, []),
                check_in=filters.check_in,
                nights=nights,
                guest_count=filters.guests or accommodation.min_guests,
            )
    return SearchPage(hits=hits, total=total, page=page, page_size=page_size)


async def _remove(
    repos: Repositories, s3_client: S3Client, accommodation: Accommodation
) -> None:
    photo_keys = list(accommodation.photo_keys)
    accommodation_id = accommodation.id
    await repos.accommodations.delete(accommodation)
    if not photo_keys:
        return
    try:
        photo_service.delete_photos(s3_client, photo_keys)
    except PhotoStorageError:
        logger.exception(
            "Accommodation %s deleted but %s photos could not be removed",
            accommodation_id,
            len(photo_keys),
        )
