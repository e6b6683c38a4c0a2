"""Bucket and object listings so an admin can pick the object to share."""
import logging

from botocore.exceptions import BotoCoreError, ClientError

from linkgate.core.errors import SignerError

logger = logging.getLogger(__name__)


def list_buckets(client) -> list[dict]:
    try:
        response = client.list_buckets()
    except (BotoCoreError, ClientError) as exc:
        logger.error(f"Listing buckets failed: {exc}")
        raise SignerError("Failed to list buckets") from exc
    return [
        {
            "name": bucket["Name"],
            "creation_date": bucket.get("CreationDate"),
        }
        for bucket in response.get("Buckets", [])
    ]


def list_objects(
    client,
    bucket: str,
    prefix: str | None = None,
    continuation_token: str | None = None,
    max_keys: int = 1000,
) -> dict:
    """One page of objects and common prefixes ("folders") under *prefix*."""
    kwargs = {"Bucket": bucket, "Delimiter": "/", "MaxKeys": max_keys}
    if prefix:
        kwargs["Prefix"] = prefix
    if continuation_token:
        kwargs["ContinuationToken"] = continuation_token
    try:
        response = client.list_objects_v2(**kwargs)
    except (BotoCoreError, ClientError) as exc:
        logger.error(f"Listing objects in {bucket} failed: {exc}")
        raise SignerError("Failed to list objects") from exc

    return {
        "bucket": bucket,
        "prefix": prefix or "",
        "objects": [
            {
                "key": item["Key"],
                "size": item.get("Size", 0),
                "last_modified": item.get("LastModified"),
                "etag": (item.get("ETag") or "").strip('"') or None,
            }
            for item in response.get("Contents", [])
        ],
        "common_prefixes": [p["Prefix"] for p in response.get("CommonPrefixes", [])],
        "is_truncated": bool(response.get("IsTruncated")),
        "next_continuation_token": response.get("NextContinuationToken"),
    }
