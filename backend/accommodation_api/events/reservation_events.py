"""Reservation lifecycle events: keep blocked periods in sync."""

from __future__ import annotations

import logging

from accommodation_api.integrations import S3Client
from accommodation_api.repositories import Repositories
from accommodation_api.schemas.events import ReservationCreatedEvent, ReservationRemovedEvent
from accommodation_api.services import block_service

logger = logging.getLogger(__name__)


async def handle_reservation_created(
    event: ReservationCreatedEvent, repos: Repositories, s3_client: S3Client
) -> str:
    logger.info("Received reservation.created for %s", event.reservation_id)
    try:
        block = await block_service.create_reservation_block(repos, event=event)
    except Exception:
        logger.exception(
            "Failed to block dates for reservation %s", event.reservation_id
        )
        raise
    return "processed" if block is not None else "skipped"


async def handle_reservation_removed(
    event: ReservationRemovedEvent, repos: Repositories, s3_client: S3Client
) -> str:
    logger.info("Received reservation.removed for %s", event.reservation_id)
    try:
        await block_service.remove_reservation_block(
            repos, reservation_id=event.reservation_id
        )
    except Exception:
        logger.exception(
            "Failed to release dates for reservation %s", event.reservation_id
        )
        raise
    return "processed"
