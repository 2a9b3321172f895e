"""Validation and storage of accommodation photos."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from accommodation_api.core.config import Settings
from accommodation_api.core.errors import InvalidInputError, PhotoStorageError
from accommodation_api.integrations import S3Client, S3ClientError

logger = logging.getLogger(__name__)

_FORMAT_EXTENSIONS = {"JPEG": "jpg", "PNG": "png", "WEBP": "webp"}
_VALID_EXTENSIONS = {"jpg", "jpeg", "png", "webp"}


@dataclass(slots=True)
class PhotoUpload:
    """An uploaded file read into memory."""

    filename: str
    content_type: str | None
    data: bytes

    @property
    def extension(self) -> str:
        _, dot, ext = self.filename.rpartition(".")
        return ext.lower() if dot else ""


def detect_image_format(data: bytes) -> str | None:
    """Return the Pillow format name for image bytes, or None."""

    try:
        with Image.open(BytesIO(data)) as image:
            image.verify()
            return image.format
    except (UnidentifiedImageError, OSError, SyntaxError):
        return None


def _has_allowed_type(upload: PhotoUpload, allowed_types: Sequence[str]) -> bool:
    if upload.content_type and upload.content_type != "application/octet-stream":
        return upload.content_type.lower() in allowed_types
    return upload.extension in _VALID_EXTENSIONS


def validate_photos(files: Sequence[PhotoUpload], settings: Settings) -> list[str]:
    """Check count, size and type of every file before anything is stored.

    Returns the storage extension for each file, in order.
    """

    if not files:
        raise InvalidInputError("At least one photo is required")
    if len(files) > settings.photo_max_files:
        raise InvalidInputError(
            f"At most {settings.photo_max_files} photos can be uploaded at once"
        )

    extensions: list[str] = []
    allowed = [item.lower() for item in settings.photo_allowed_types]
    for upload in files:
        if len(upload.data) > settings.photo_max_bytes:
            raise InvalidInputError(
                f"Photo {upload.filename} exceeds {settings.photo_max_bytes} bytes"
            )
        if not _has_allowed_type(upload, allowed):
            raise InvalidInputError("File must be an image (jpeg, png, or webp)")
        image_format = detect_image_format(upload.data)
        if image_format not in _FORMAT_EXTENSIONS:
            raise InvalidInputError(f"File {upload.filename} is not a valid image")
        ext = upload.extension if upload.extension in _VALID_EXTENSIONS else ""
        extensions.append(ext or _FORMAT_EXTENSIONS[image_format])
    return extensions


def build_photo_key(accommodation_id: uuid.UUID, extension: str) -> str:
    return f"{accommodation_id}/{uuid.uuid4()}.{extension}"


def store_photos(
    s3_client: S3Client,
    *,
    accommodation_id: uuid.UUID,
    files: Sequence[PhotoUpload],
    settings: Settings,
) -> list[str]:
    """Validate and upload photos; either every file is stored or none is."""

    extensions = validate_photos(files, settings)
    stored_keys: list[str] = []
    try:
        for upload, extension in zip(files, extensions):
            key = build_photo_key(accommodation_id, extension)
            stored = s3_client.put_object(
                key,
                upload.data,
                content_type=upload.content_type or f"image/{extension}",
                cache_seconds=settings.s3_cache_seconds,
            )
            logger.debug(
                "Stored photo %s (%s bytes, %s)",
                stored.key,
                stored.size,
                stored.content_type,
            )
            stored_keys.append(stored.key)
    except S3ClientError as exc:
        logger.exception(
            "Photo upload failed for accommodation %s; rolling back %s objects",
            accommodation_id,
            len(stored_keys),
        )
        _discard(s3_client, stored_keys)
        raise PhotoStorageError("Photo storage is unavailable") from exc
    return stored_keys


def delete_photos(s3_client: S3Client, keys: Sequence[str]) -> None:
    """Remove stored photos."""

    try:
        s3_client.delete_objects(list(keys))
    except S3ClientError as exc:
        raise PhotoStorageError("Failed to delete photos") from exc


def _discard(s3_client: S3Client, keys: Sequence[str]) -> None:
    for key in keys:
        try:
            s3_client.delete_object(key)
        except S3ClientError:
            logger.warning("Could not remove orphaned photo %s", key)
