"""Caller identity injected by the upstream gateway."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class UserRole(str, enum.Enum):
    """Roles asserted by the gateway in the ``X-User-Role`` header."""

    GUEST = "guest"
    HOST = "host"
    ADMIN = "admin"

    @classmethod
    def parse(cls, raw: str | None) -> "UserRole | None":
        """Return the role for a header value, ignoring case; None if unknown."""

        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class CallerIdentity:
    """Who is making a request; authentication happened upstream."""

    id: str
    email: str | None = None
    role: UserRole | None = None

    def is_host_of(self, host_id: str) -> bool:
        return self.id == host_id


__all__ = ["CallerIdentity", "UserRole"]
