"""Presigned GET URLs for objects in an S3-compatible store.

The browser downloads straight from the store; this service only hands out a
short-lived URL after a redemption succeeds.
"""
import logging
from typing import Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from linkgate.core.config import Settings
from linkgate.core.errors import SignerError

logger = logging.getLogger(__name__)


class Signer(Protocol):
    def sign(self, bucket: str | None, object_key: str, ttl: int, filename: str | None = None) -> str:
        ...


def content_disposition(filename: str) -> str:
    sanitized = filename.replace('"', "").replace("\r", "").replace("\n", "")
    return f'attachment; filename="{sanitized}"'


def build_s3_client(settings: Settings):
    return boto3.client(
        "s3",
        endpoint_url=settings.storage_endpoint_url,
        region_name=settings.storage_region,
        aws_access_key_id=settings.storage_access_key_id,
        aws_secret_access_key=settings.storage_secret_access_key,
        config=Config(
            signature_version="s3v4",
            s3={"addressing_style": settings.storage_addressing_style},
        ),
    )


class S3Signer:
    def __init__(self, client, default_bucket: str | None = None):
        self._client = client
        self.default_bucket = default_bucket

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3Signer":
        return cls(build_s3_client(settings), default_bucket=settings.default_bucket)

    @property
    def client(self):
        return self._client

    def sign(self, bucket: str | None, object_key: str, ttl: int, filename: str | None = None) -> str:
        bucket = bucket or self.default_bucket
        if not bucket:
            raise SignerError("Bucket name is required when no default bucket is configured")

        params = {"Bucket": bucket, "Key": object_key}
        if filename and filename.strip():
            params["ResponseContentDisposition"] = content_disposition(filename.strip())
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params=params,
                ExpiresIn=ttl,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error(f"Presigning {bucket}/{object_key} failed: {exc}")
            raise SignerError() from exc
