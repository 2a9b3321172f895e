"""Service routes."""

from fastapi import APIRouter

from . import accommodations, blocks, events, health, internal, rules

router = APIRouter()
# Health must be matched before /accommodations/{accommodation_id}.
router.include_router(health.router, tags=["health"])
router.include_router(accommodations.router, tags=["accommodations"])
router.include_router(rules.router, tags=["pricing-rules"])
router.include_router(blocks.router, tags=["blocks"])
router.include_router(internal.router, tags=["internal"])
router.include_router(events.router, tags=["events"])

__all__ = ["router"]
