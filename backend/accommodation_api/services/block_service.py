"""Availability blocking for accommodations."""

from __future__ import annotations

import datetime
import logging
import uuid
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError

from accommodation_api.core.errors import ConflictError, InvalidInputError, NotFoundError
from accommodation_api.models import BlockedPeriod, BlockReason
from accommodation_api.repositories import Repositories
from accommodation_api.schemas.blocked_period import ManualBlockCreate
from accommodation_api.schemas.events import ReservationCreatedEvent
from accommodation_api.security.identity import CallerIdentity
from accommodation_api.services.accommodation_service import get_owned_accommodation

logger = logging.getLogger(__name__)

ACTIVE_RESERVATION_MESSAGE = (
    "Cannot modify this period because it contains active reservations"
)


async def has_active_reservation_overlap(
    repos: Repositories,
    *,
    accommodation_id: uuid.UUID,
    start: datetime.date,
    end: datetime.date,
) -> bool:
    """Return True when a reservation block intersects ``[start, end]``."""

    overlapping = await repos.blocks.count_overlapping(
        accommodation_id, start, end, reason=BlockReason.RESERVATION
    )
    return overlapping > 0


async def ensure_no_active_reservations(
    repos: Repositories,
    *,
    accommodation_id: uuid.UUID,
    start: datetime.date,
    end: datetime.date,
) -> None:
    """Raise ConflictError when the period holds a confirmed reservation."""

    if await has_active_reservation_overlap(
        repos, accommodation_id=accommodation_id, start=start, end=end
    ):
        raise ConflictError(ACTIVE_RESERVATION_MESSAGE)


async def list_blocks(
    repos: Repositories, *, accommodation_id: uuid.UUID
) -> Sequence[BlockedPeriod]:
    """Return every block of the accommodation ordered by start date."""

    if await repos.accommodations.get(accommodation_id) is None:
        raise NotFoundError(f"Accommodation with ID {accommodation_id} not found")
    return await repos.blocks.list_for_accommodation(accommodation_id)


async def create_manual_block(
    repos: Repositories,
    *,
    accommodation_id: uuid.UUID,
    payload: ManualBlockCreate,
    caller: CallerIdentity,
) -> BlockedPeriod:
    """Block dates on behalf of the host.

    Manual blocks may overlap each other; only reservation blocks conflict.
    """

    if payload.start_date >= payload.end_date:
        raise InvalidInputError("startDate must be before endDate")
    await get_owned_accommodation(
        repos, accommodation_id=accommodation_id, caller=caller, lock=True
    )
    await ensure_no_active_reservations(
        repos,
        accommodation_id=accommodation_id,
        start=payload.start_date,
        end=payload.end_date,
    )
    block = BlockedPeriod(
        accommodation_id=accommodation_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=BlockReason.MANUAL,
        notes=payload.notes,
    )
    saved = await repos.blocks.add(block)
    logger.info(
        "Created manual block %s for accommodation %s", saved.id, accommodation_id
    )
    return saved


async def delete_manual_block(
    repos: Repositories,
    *,
    accommodation_id: uuid.UUID,
    block_id: uuid.UUID,
    caller: CallerIdentity,
) -> None:
    """Remove a host-authored block; reservation blocks are not deletable."""

    block = await repos.blocks.get(
        accommodation_id, block_id, reason=BlockReason.MANUAL
    )
    if block is None:
        raise NotFoundError(
            f"Manual block with ID {block_id} not found or not deletable"
        )
    await get_owned_accommodation(
        repos, accommodation_id=accommodation_id, caller=caller
    )
    await repos.blocks.delete(block)


async def create_reservation_block(
    repos: Repositories, *, event: ReservationCreatedEvent
) -> BlockedPeriod | None:
    """Block the reserved dates once per reservation id.

    Returns the stored block (existing or new), or None when the listing no
    longer exists.
    """

    if event.start_date > event.end_date:
        raise InvalidInputError("Reservation startDate must not be after endDate")

    existing = await repos.blocks.get_by_reservation_id(event.reservation_id)
    if existing is not None:
        logger.debug(
            "Reservation %s already blocked; ignoring duplicate event",
            event.reservation_id,
        )
        return existing

    accommodation = await repos.accommodations.get(
        event.accommodation_id, for_update=True
    )
    if accommodation is None:
        logger.warning(
            "Reservation %s references unknown accommodation %s; skipping",
            event.reservation_id,
            event.accommodation_id,
        )
        return None

    block = BlockedPeriod(
        accommodation_id=event.accommodation_id,
        start_date=event.start_date,
        end_date=event.end_date,
        reason=BlockReason.RESERVATION,
        reservation_id=event.reservation_id,
    )
    try:
        saved = await repos.blocks.add(block)
    except IntegrityError:
        # Lost a race with a concurrent delivery of the same event.
        return await repos.blocks.get_by_reservation_id(event.reservation_id)
    logger.info(
        "Blocked %s..%s on accommodation %s for reservation %s",
        saved.start_date,
        saved.end_date,
        saved.accommodation_id,
        saved.reservation_id,
    )
    return saved


async def remove_reservation_block(
    repos: Repositories, *, reservation_id: str
) -> bool:
    """Release the dates held for a reservation; absent ids are a no-op."""

    removed = await repos.blocks.delete_by_reservation_id(reservation_id)
    if not removed:
        logger.debug("No block found for reservation %s", reservation_id)
        return False
    logger.info("Released block for reservation %s", reservation_id)
    return True
