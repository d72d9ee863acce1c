"""
S3 storage for resumes, profile pictures and client logos.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from config import Settings
from utils.errors import InvalidUpload, UploadFailed


logger = logging.getLogger(__name__)

DOCUMENT_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}


def check_upload(*, data: bytes, content_type: str, allowed: set, max_bytes: int, label: str) -> None:
    content_type = (content_type or "").lower().strip()
    if content_type not in allowed:
        raise InvalidUpload(f"Invalid file type for {label}.")
    if len(data) > max_bytes:
        raise InvalidUpload(f"File too large for {label} (max {max_bytes} bytes).")


class S3Storage:
    """Thin wrapper over the boto3 S3 client."""

    def __init__(self, settings: Settings, client=None) -> None:
        self._bucket = settings.s3_bucket
        self._expires = settings.presigned_url_expires
        self._client = client or boto3.client("s3", region_name=settings.aws_region)

    def upload(
        self,
        *,
        folder: str,
        owner_id: int,
        kind: str,
        filename: str,
        data: bytes,
        content_type: str,
    ) -> str:
        """Upload bytes and return the object key."""
        if not self._bucket:
            raise UploadFailed("AWS_S3_BUCKET is not set")
        key = f"{folder}/{owner_id}/{kind}/{kind}_{int(time.time() * 1000)}_{filename}"
        try:
            self._client.put_object(Bucket=self._bucket, Key=key, Body=data, ContentType=content_type)
        except (BotoCoreError, ClientError) as exc:
            logger.error("Error uploading %s to S3: %s", key, exc)
            raise UploadFailed() from exc
        return key

    def public_url(self, key: str) -> str:
        return f"https://{self._bucket}.s3.amazonaws.com/{key}"

    def presigned_url(self, key: Optional[str]) -> Optional[str]:
        if not key:
            return None
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=self._expires,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Error generating presigned URL for %s: %s", key, exc)
            return None
