"""Common API dependencies."""

from __future__ import annotations

from typing import Annotated
from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, Request, Response, status
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from sqlalchemy.ext.asyncio import AsyncSession

from accommodation_api.core.config import get_settings
from accommodation_api.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    PhotoStorageError,
)
from accommodation_api.db.session import get_session
from accommodation_api.integrations import S3Client, S3ClientError, build_s3_client
from accommodation_api.repositories import Repositories, build_repositories
from accommodation_api.security.identity import CallerIdentity, UserRole

settings = get_settings()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


async def get_repositories(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> Repositories:
    return build_repositories(session)


def get_s3_client() -> S3Client:
    """Return the configured object store or fail with HTTP 503."""
    try:
        return build_s3_client()
    except S3ClientError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Photo storage is not configured",
        ) from exc


async def get_caller_identity(
    user_id: Annotated[str | None, Header(alias="X-User-Id")] = None,
    user_email: Annotated[str | None, Header(alias="X-User-Email")] = None,
    user_role: Annotated[str | None, Header(alias="X-User-Role")] = None,
) -> CallerIdentity:
    """Read the identity the gateway injected after authenticating the request."""
    if not user_id or not user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User is not authenticated",
        )
    return CallerIdentity(
        id=user_id.strip(),
        email=user_email,
        role=UserRole.parse(user_role),
    )


_ERROR_STATUS: tuple[tuple[type[Exception], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
    (PhotoStorageError, status.HTTP_502_BAD_GATEWAY),
)


def http_error(exc: Exception) -> HTTPException:
    """Translate a service error into the matching HTTP error."""
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _parse_rate(value: str, *, fallback: tuple[int, int]) -> tuple[int, int]:
    try:
        count_str, window_str = value.split("/", 1)
        count = int(count_str.strip())
    except ValueError:
        return fallback
    window = window_str.strip().lower()
    seconds_map = {
        "second": 1,
        "seconds": 1,
        "minute": 60,
        "minutes": 60,
        "hour": 3600,
        "hours": 3600,
        "day": 86400,
        "days": 86400,
    }
    return count, seconds_map.get(window, fallback[1])


_DEFAULT_LIMIT = _parse_rate(settings.rate_limit_default, fallback=(100, 60))


def _rate_dependency(limit: tuple[int, int]):
    async def _dependency(request: Request, response: Response) -> None:
        if FastAPILimiter.redis is None:
            return None
        limiter = RateLimiter(times=limit[0], seconds=limit[1])
        await limiter(request, response)

    return Depends(_dependency)


DEFAULT_RATE_DEP = _rate_dependency(_DEFAULT_LIMIT)
