"""Role helper for explicit authorization checks."""

from __future__ import annotations

from fastapi import HTTPException, status

from accommodation_api.security.identity import CallerIdentity, UserRole


def require_roles(caller: CallerIdentity, allowed: set[UserRole]) -> None:
    """Raise HTTP 403 if the caller's role is not in the allowed set."""

    if caller.role is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User role not found",
        )
    if caller.role not in allowed:
        required = ", ".join(sorted(role.value for role in allowed))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"User role '{caller.role.value}' does not have access. Required roles: {required}",
        )


__all__ = ["require_roles"]
