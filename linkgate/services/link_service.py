"""Creating and retiring download links.

Links are signed lazily: creation stores an indirection token and returns
``<public_base_url>/<download_prefix>/<id>``. The store URL is only presigned
when the token is redeemed, so the provider-side signature lifetime never
competes with the link's own expiry and usage policy.
"""
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from linkgate.core.config import Settings
from linkgate.core.errors import DuplicateId, InvalidInput
from linkgate.core.time import utcnow
from linkgate.models import DownloadLink
from . import link_store
from .audit_service import log_audit

logger = logging.getLogger(__name__)

ID_BYTES = 16
MAX_ID_ATTEMPTS = 5


@dataclass(frozen=True)
class CreatedLink:
    link: DownloadLink
    url: str


def generate_link_id() -> str:
    return secrets.token_urlsafe(ID_BYTES)


def _positive_int(value, field: str) -> int:
    # bool is an int subclass; True must not become "1 download"
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{field} must be a positive integer")
    if value <= 0:
        raise InvalidInput(f"{field} must be a positive integer")
    return value


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def create_link(
    db: Session,
    settings: Settings,
    object_key: str,
    bucket: str | None = None,
    expires_in_seconds: int | None = None,
    max_downloads: int | None = None,
    download_filename: str | None = None,
    actor: str | None = None,
    now: datetime | None = None,
) -> CreatedLink:
    object_key = (object_key or "").strip()
    if not object_key:
        raise InvalidInput("object_key cannot be empty")

    if expires_in_seconds is None:
        expires_in_seconds = settings.default_expiry_seconds
    expires_in_seconds = _positive_int(expires_in_seconds, "expires_in_seconds")
    if expires_in_seconds > settings.max_expiry_seconds:
        raise InvalidInput(f"expires_in_seconds may not exceed {settings.max_expiry_seconds}")

    if max_downloads is not None:
        max_downloads = _positive_int(max_downloads, "max_downloads")

    bucket = _optional_text(bucket)
    if bucket is None and not settings.default_bucket:
        raise InvalidInput("bucket is required when no default bucket is configured")
    download_filename = _optional_text(download_filename)

    now = (now or utcnow()).astimezone(timezone.utc)
    expires_at = now + timedelta(seconds=expires_in_seconds)

    for attempt in range(1, MAX_ID_ATTEMPTS + 1):
        link = DownloadLink(
            id=generate_link_id(),
            object_key=object_key,
            bucket=bucket,
            expires_at=expires_at,
            max_downloads=max_downloads,
            downloads_served=0,
            created_at=now,
            download_filename=download_filename,
        )
        try:
            link = link_store.create(db, link)
            break
        except DuplicateId:
            logger.warning(f"Link id collision on attempt {attempt}, regenerating")
    else:
        raise RuntimeError(f"Could not allocate a unique link id after {MAX_ID_ATTEMPTS} attempts")

    log_audit(
        db,
        action="LINK_CREATED",
        actor=actor,
        link_id=link.id,
        details={
            "object_key": object_key,
            "bucket": bucket,
            "expires_at": expires_at.isoformat(),
            "max_downloads": max_downloads,
        },
    )
    logger.info(f"Created link {link.id} for {bucket or settings.default_bucket}/{object_key}")
    return CreatedLink(link=link, url=settings.download_url(link.id))


def delete_link(db: Session, link_id: str, actor: str | None = None) -> None:
    link_store.delete(db, link_id)
    log_audit(db, action="LINK_DELETED", actor=actor, link_id=link_id)
    logger.info(f"Deleted link {link_id}")


def purge_inactive(db: Session, actor: str | None = None, now: datetime | None = None) -> int:
    now = (now or utcnow()).astimezone(timezone.utc)
    deleted = link_store.purge_inactive(db, now)
    log_audit(db, action="LINKS_PURGED", actor=actor, details={"deleted_count": deleted})
    return deleted
