"""Domain errors raised by service operations."""

from __future__ import annotations


class AccommodationServiceError(ValueError):
    """Base class for validation and authorization failures."""


class NotFoundError(AccommodationServiceError):
    """The requested entity, or the target of a mutation, does not exist."""


class ForbiddenError(AccommodationServiceError):
    """The caller is not the host of the resource."""


class InvalidInputError(AccommodationServiceError):
    """Malformed dates, inverted ranges, or out-of-bounds values."""


class ConflictError(AccommodationServiceError):
    """Overlapping periods or a change under an active reservation."""


class PhotoStorageError(RuntimeError):
    """The object store rejected or failed a photo operation."""


__all__ = [
    "AccommodationServiceError",
    "ConflictError",
    "ForbiddenError",
    "InvalidInputError",
    "NotFoundError",
    "PhotoStorageError",
]
