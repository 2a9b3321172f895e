"""User lifecycle events."""

from __future__ import annotations

import logging

from accommodation_api.core.config import get_settings
from accommodation_api.integrations import S3Client
from accommodation_api.repositories import Repositories
from accommodation_api.schemas.events import UserDeletedEvent
from accommodation_api.services import accommodation_service

logger = logging.getLogger(__name__)


async def handle_user_deleted(
    event: UserDeletedEvent, repos: Repositories, s3_client: S3Client
) -> str:
    """Remove every listing of a deleted host.

    Events without a role are treated as hosts; other roles own nothing here.
    """

    logger.info("Received user.deleted, cleaning up for user %s", event.user_id)
    host_role = get_settings().events_host_role
    if event.user_role and event.user_role.lower() != host_role.lower():
        logger.debug("User %s is not a host; nothing to delete", event.user_id)
        return "skipped"

    try:
        deleted = await accommodation_service.remove_all_by_host_id(
            repos, s3_client, host_id=event.user_id
        )
    except Exception:
        logger.exception(
            "Failed to clean up accommodations for deleted user %s", event.user_id
        )
        raise
    logger.info("Deleted %s accommodations for user %s", deleted, event.user_id)
    return "processed"
