"""
Object storage for user uploads (Cloudflare R2 / any S3-compatible bucket).

Keys are always ``{user_id}/{uuid}.{extension}``; the public URL of an object
is the configured public prefix joined with its key.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the object store rejects or fails a request."""


class StorageClient(Protocol):
    def presign_put(self, key: str, content_type: str, content_length: int, expires_in: int) -> str:
        ...

    def delete_object(self, key: str) -> None:
        ...

    def list_keys(self, prefix: str) -> list[str]:
        ...


def build_object_key(user_id: str, content_type: str) -> str:
    extension = content_type.split("/")[1]
    return f"{user_id}/{uuid.uuid4()}.{extension}"


def build_public_url(key: str) -> str:
    return f"{get_settings().public_url_prefix}/{key}"


def key_from_public_url(image_url: str) -> str | None:
    """Return the object key behind a public URL, or None if it is not one of ours."""
    prefix = get_settings().public_url_prefix
    if not prefix or not image_url.startswith(f"{prefix}/"):
        return None
    return image_url[len(prefix) + 1 :]


@dataclass
class InMemoryStorageClient:
    """Stand-in bucket used in development and tests."""

    base_url: str = "https://storage.example.test/bucket"
    objects: dict[str, bytes] = field(default_factory=dict)

    def presign_put(self, key: str, content_type: str, content_length: int, expires_in: int) -> str:
        return f"{self.base_url}/{key}?op=put&type={content_type}&length={content_length}&expires={expires_in}"

    def put_object(self, key: str, data: bytes) -> None:
        self.objects[key] = data

    def key_from_presigned_url(self, url: str) -> str:
        return url.split("?", 1)[0][len(self.base_url) + 1 :]

    def delete_object(self, key: str) -> None:
        self.objects.pop(key, None)

    def list_keys(self, prefix: str) -> list[str]:
        return sorted(key for key in self.objects if key.startswith(prefix))


@dataclass
class R2StorageClient:
    bucket: str
    endpoint: str
    access_key_id: str
    secret_access_key: str

    def __post_init__(self) -> None:
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint,
            region_name="auto",
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=Config(signature_version="s3v4"),
        )

    def presign_put(self, key: str, content_type: str, content_length: int, expires_in: int) -> str:
        try:
            return self._client.generate_presigned_url(
                ClientMethod="put_object",
                Params={
                    "Bucket": self.bucket,
                    "Key": key,
                    "ContentType": content_type,
                    "ContentLength": content_length,
                },
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"presign failed for {key}") from exc

    def delete_object(self, key: str) -> None:
        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"delete failed for {key}") from exc

    def list_keys(self, prefix: str) -> list[str]:
        keys: list[str] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                keys.extend(item["Key"] for item in page.get("Contents", []))
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"list failed for {prefix}") from exc
        return sorted(keys)


@lru_cache
def get_storage_client() -> StorageClient:
    settings = get_settings()
    if settings.use_in_memory_storage or not settings.r2_bucket:
        logger.info("Using in-memory object storage")
        return InMemoryStorageClient()
    return R2StorageClient(
        bucket=settings.r2_bucket,
        endpoint=settings.storage_endpoint,
        access_key_id=settings.r2_access_key_id,
        secret_access_key=settings.r2_secret_access_key,
    )


def delete_image_quietly(storage: StorageClient, image_url: str | None) -> bool:
    """Best-effort removal of an image we own; failures are logged, never raised."""
    if not image_url:
        return False
    key = key_from_public_url(image_url)
    if key is None:
        logger.warning("Skipping delete of foreign image url %s", image_url)
        return False
    try:
        storage.delete_object(key)
    except StorageError:
        logger.exception("Failed to delete orphaned image %s", key)
        return False
    return True
