"""Route bus deliveries to their handlers by routing key."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ValidationError

from accommodation_api.core.errors import InvalidInputError
from accommodation_api.events.reservation_events import (
    handle_reservation_created,
    handle_reservation_removed,
)
from accommodation_api.events.user_events import handle_user_deleted
from accommodation_api.integrations import S3Client
from accommodation_api.repositories import Repositories
from accommodation_api.schemas.events import (
    ReservationCreatedEvent,
    ReservationRemovedEvent,
    UserDeletedEvent,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Any, Repositories, S3Client], Awaitable[str]]

EVENT_HANDLERS: dict[str, tuple[type[BaseModel], Handler]] = {
    "reservation.created": (ReservationCreatedEvent, handle_reservation_created),
    "reservation.removed": (ReservationRemovedEvent, handle_reservation_removed),
    "user.deleted": (UserDeletedEvent, handle_user_deleted),
}


async def dispatch_event(
    routing_key: str,
    payload: dict[str, Any],
    repos: Repositories,
    s3_client: S3Client,
) -> dict[str, str]:
    """Validate the payload for ``routing_key`` and run its handler."""

    entry = EVENT_HANDLERS.get(routing_key)
    if entry is None:
        logger.debug("No handler for routing key %s", routing_key)
        return {"status": "ignored"}

    model, handler = entry
    try:
        event = model.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInputError(
            f"Invalid payload for {routing_key}: {exc.error_count()} error(s)"
        ) from exc
    return {"status": await handler(event, repos, s3_client)}
