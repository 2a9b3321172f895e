"""Minimal S3-style object store suitable for local and test environments."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


class S3ClientError(RuntimeError):
    """Raised when storage operations fail."""


@dataclass
class StoredObject:
    """Metadata for an object stored via the helper."""

    key: str
    path: Path
    size: int
    content_type: str
    cache_control: str | None = None


class S3Client:
    """File-system backed bucket facade with public URL derivation."""

    def __init__(
        self,
        bucket: str,
        *,
        endpoint_url: str | None = None,
        public_url: str | None = None,
        root: Path | None = None,
        default_cache_seconds: int = 0,
    ) -> None:
        if not bucket:
            raise S3ClientError("S3 bucket is not configured")
        self.bucket = bucket
        self._endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        self._public_url = public_url.rstrip("/") if public_url else None
        self._root = (root or Path.cwd() / ".storage") / bucket
        self._root.mkdir(parents=True, exist_ok=True)
        self._default_cache_seconds = default_cache_seconds

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _normalise_key(self, key: str) -> str:
        normalised = key.lstrip("/")
        if not normalised:
            raise S3ClientError("Storage object key cannot be empty")
        if ".." in Path(normalised).parts:
            raise S3ClientError(f"Invalid storage object key {key!r}")
        return normalised

    def _path_for(self, key: str) -> Path:
        return self._root / self._normalise_key(key)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def put_object(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str,
        cache_seconds: int | None = None,
    ) -> StoredObject:
        """Write an object, applying cache headers when configured."""

        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise S3ClientError(f"Failed to store object {key}") from exc
        seconds = cache_seconds if cache_seconds is not None else self._default_cache_seconds
        return StoredObject(
            key=self._normalise_key(key),
            path=path,
            size=len(data),
            content_type=content_type,
            cache_control=f"public, max-age={seconds}, immutable" if seconds > 0 else None,
        )

    def delete_object(self, key: str) -> None:
        """Remove an object; deleting a missing key is not an error."""

        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise S3ClientError(f"Failed to delete object {key}") from exc

    def delete_objects(self, keys: list[str]) -> None:
        for key in keys:
            self.delete_object(key)

    def build_object_url(self, key: str) -> str:
        normalised = self._normalise_key(key)
        if self._public_url:
            return f"{self._public_url}/{normalised}"
        if self._endpoint_url:
            return f"{self._endpoint_url}/{self.bucket}/{normalised}"
        return f"/{self.bucket}/{normalised}"

    def build_object_urls(self, keys: list[str]) -> list[str]:
        return [self.build_object_url(key) for key in keys]


def build_s3_client(**overrides: Any) -> S3Client:
    """Factory that honours application settings."""

    from accommodation_api.core.config import get_settings

    settings = get_settings()
    bucket = overrides.get("bucket") or settings.s3_bucket
    if not bucket:
        raise S3ClientError("S3 bucket is not configured")
    return S3Client(
        bucket,
        endpoint_url=overrides.get("endpoint_url") or settings.s3_endpoint_url,
        public_url=overrides.get("public_url") or settings.storage_public_url,
        root=overrides.get("root") or settings.storage_root,
        default_cache_seconds=settings.s3_cache_seconds,
    )
