"""Integration shortcuts."""

from .s3_client import S3Client, S3ClientError, StoredObject, build_s3_client

__all__ = [
    "S3Client",
    "S3ClientError",
    "StoredObject",
    "build_s3_client",
]
