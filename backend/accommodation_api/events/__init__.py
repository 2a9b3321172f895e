"""Handlers for events published by peer services."""

from accommodation_api.events.dispatcher import EVENT_HANDLERS, dispatch_event

__all__ = ["EVENT_HANDLERS", "dispatch_event"]
