"""Application configuration via pydantic settings."""

from functools import lru_cache
from pathlib import Path

from typing import Any

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "accommodation-service"
    api_prefix: str = Field("/api", alias="API_PREFIX")

    database_url: str = Field(..., alias="DATABASE_URL")
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")

    redis_url: str | None = Field(default=None, alias="REDIS_URL")
    rate_limit_default: str = Field("100/minute", alias="RATE_LIMIT_DEFAULT")

    s3_endpoint_url: str | None = Field(default=None, alias="S3_ENDPOINT_URL")
    s3_bucket: str = Field("accommodations", alias="S3_BUCKET")
    s3_cache_seconds: int = Field(31536000, alias="S3_CACHE_SECONDS")
    storage_root: Path | None = Field(default=None, alias="STORAGE_ROOT")
    storage_public_url: str | None = Field(default=None, alias="STORAGE_PUBLIC_URL")

    photo_max_files: int = Field(10, alias="PHOTO_MAX_FILES")
    photo_max_bytes: int = Field(5 * 1024 * 1024, alias="PHOTO_MAX_BYTES")
    photo_allowed_types: list[str] = Field(
        default_factory=lambda: ["image/jpeg", "image/png", "image/webp"],
        alias="PHOTO_ALLOWED_TYPES",
    )

    page_size_default: int = Field(20, alias="PAGE_SIZE_DEFAULT")
    page_size_max: int = Field(100, alias="PAGE_SIZE_MAX")

    events_host_role: str = Field("host", alias="EVENTS_HOST_ROLE")

    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")
    cors_allowlist: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"], alias="CORS_ALLOWLIST"
    )

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("cors_allowlist", "photo_allowed_types", mode="before")
    @classmethod
    def _split_csv(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
