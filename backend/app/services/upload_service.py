from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException, status

from app.core.config import get_settings
from app.core.content_rules import UploadRuleError, check_upload
from app.services.storage_service import (
    StorageClient,
    StorageError,
    build_object_key,
    build_public_url,
    key_from_public_url,
)

logger = logging.getLogger(__name__)
settings = get_settings()


class UploadValidationError(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UploadForbiddenError(HTTPException):
    def __init__(self, detail: str = "Not authorized to delete this file") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


@dataclass(frozen=True, slots=True)
class PresignedUpload:
    presigned_url: str
    public_url: str
    expires_in: int


def validate_upload(file_type: object, file_size: object) -> None:
    """Raise UploadValidationError unless the declared file may be uploaded."""
    try:
        check_upload(file_type, file_size, max_bytes=settings.upload_max_bytes)
    except UploadRuleError as exc:
        raise UploadValidationError(str(exc)) from exc


def create_presigned_upload(
    storage: StorageClient,
    user_id: str,
    file_type: object,
    file_size: object,
) -> PresignedUpload:
    validate_upload(file_type, file_size)

    key = build_object_key(user_id, file_type)
    expires_in = settings.upload_presign_expires_seconds
    try:
        presigned_url = storage.presign_put(key, file_type, int(file_size), expires_in)
    except StorageError:
        logger.exception("Presign error for %s", key)
        raise
    logger.info("Issued presigned upload for %s", key)
    return PresignedUpload(
        presigned_url=presigned_url,
        public_url=build_public_url(key),
        expires_in=expires_in,
    )


def owned_key_for_url(user_id: str, image_url: str | None) -> str:
    """Map a public URL to its object key, enforcing the caller's namespace."""
    if not image_url:
        raise UploadValidationError("imageUrl is required")

    key = key_from_public_url(image_url)
    if key is None:
        raise UploadValidationError("Invalid image URL")
    if not key.startswith(f"{user_id}/"):
        raise UploadForbiddenError()
    return key


def delete_upload(storage: StorageClient, user_id: str, image_url: str | None) -> None:
    key = owned_key_for_url(user_id, image_url)
    try:
        storage.delete_object(key)
    except StorageError:
        logger.exception("Delete error for %s", key)
        raise
    logger.info("Deleted upload %s", key)
