"""S3-compatible object storage for recordings and beats.

Audio bytes never pass through the database; rows only keep the object key.
Deletions that fail inline are queued as ``StorageDeletion`` rows and retried
by ``StorageCleanupWorker``.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.orm import Session

from rap_arena.core.errors import StorageError, ValidationError
from rap_arena.core.settings import settings
from rap_arena.db.ids import new_id
from rap_arena.models import StorageDeletion

logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS = {
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/mp4": "m4a",
}


def decode_audio(audio_base64: str, content_type: str) -> bytes:
    """Decode a base64 audio payload and check its type and size.

    Raises:
        ValidationError: If the content type is not audio we accept, the payload
            is not valid base64, or it is empty or too large.
    """
    if content_type not in AUDIO_EXTENSIONS:
        raise ValidationError(f"Unsupported audio type '{content_type}'")
    try:
        data = base64.b64decode(audio_base64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("Audio payload is not valid base64") from exc
    if not data:
        raise ValidationError("Audio payload is empty")
    if len(data) > settings.max_audio_bytes:
        raise ValidationError(
            f"Audio file is too large (max {settings.max_audio_bytes} bytes)"
        )
    return data


class StorageService:
    """Thin wrapper around a boto3 S3 client."""

    def __init__(self, client: Any | None = None) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        """Return the S3 client, creating it on first use.

        Raises:
            StorageError: If the client cannot be built from the configured
                endpoint or credentials.
        """
        if self._client is None:
            try:
                self._client = boto3.client(
                    "s3",
                    endpoint_url=settings.storage_endpoint_url,
                    aws_access_key_id=settings.storage_access_key,
                    aws_secret_access_key=settings.storage_secret_key,
                    config=Config(signature_version="s3v4"),
                    region_name=settings.storage_region,
                )
            except (BotoCoreError, ValueError) as exc:
                raise StorageError(f"Cannot create storage client: {exc}") from exc
        return self._client

    def upload(self, bucket: str, owner_id: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under a fresh key in the owner's folder and return the key."""
        extension = AUDIO_EXTENSIONS.get(content_type, "bin")
        key = f"{owner_id}/{new_id()}.{extension}"
        try:
            self.client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Failed to upload {key} to {bucket}: {exc}") from exc
        logger.debug("Uploaded %d bytes to %s/%s", len(data), bucket, key)
        return key

    def delete(self, bucket: str, key: str) -> None:
        """Remove an object, raising StorageError on failure."""
        try:
            self.client.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Failed to delete {key} from {bucket}: {exc}") from exc
        logger.debug("Deleted %s/%s", bucket, key)

    def presigned_url(self, bucket: str, key: str | None, expires_in: int = 3600) -> str | None:
        """Return a temporary download URL, or None when it cannot be generated."""
        if not key:
            return None
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError, StorageError) as exc:
            logger.warning("Failed to generate presigned URL for %s: %s", key, exc)
            return None

    def remove_or_enqueue(self, db: Session, bucket: str, key: str) -> bool:
        """Delete an object now, or queue it for the cleanup worker.

        The queued row is added to ``db`` but not committed, so it lands in the
        same transaction as the caller's own delete.

        Returns:
            True if the object was deleted inline.
        """
        try:
            self.delete(bucket, key)
        except StorageError as exc:
            logger.warning("Queueing %s/%s for deletion retry: %s", bucket, key, exc)
            db.add(StorageDeletion(bucket=bucket, path=key, last_error=str(exc)))
            return False
        return True


_storage_service: StorageService | None = None


def get_storage_service() -> StorageService:
    """Return the process-wide storage service."""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
