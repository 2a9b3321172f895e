"""Delivery endpoint for the event bus bridge."""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from accommodation_api.api import deps
from accommodation_api.core.errors import AccommodationServiceError, PhotoStorageError
from accommodation_api.events import dispatch_event
from accommodation_api.integrations import S3Client
from accommodation_api.repositories import Repositories
from accommodation_api.schemas.events import EventAck

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events")


@router.post("/{routing_key}", response_model=EventAck, status_code=status.HTTP_200_OK)
async def receive_event(
    routing_key: str,
    request: Request,
    repos: Annotated[Repositories, Depends(deps.get_repositories)],
    s3_client: Annotated[S3Client, Depends(deps.get_s3_client)],
) -> EventAck:
    try:
        payload: Any = await request.json()
    except json.JSONDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payload"
        ) from exc
    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payload"
        )

    try:
        result = await dispatch_event(routing_key, payload, repos, s3_client)
    except (AccommodationServiceError, PhotoStorageError) as exc:
        raise deps.http_error(exc) from exc
    return EventAck(status=result["status"])
