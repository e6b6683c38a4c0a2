"""Durable storage for download links.

``try_redeem`` is the only path that increments ``downloads_served``. It is a
single conditional UPDATE, so the database's row write lock serialises
concurrent redeemers of the same link while different links never contend.
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete as sa_delete
from sqlalchemy import and_, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from linkgate.core.errors import DuplicateId, LinkExhausted, LinkExpired, LinkNotFound
from linkgate.core.time import ensure_aware
from linkgate.models import DownloadLink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RedeemTarget:
    link_id: str
    object_key: str
    bucket: str | None
    download_filename: str | None
    expires_at: datetime
    downloads_served: int


def _redeemable(now: datetime):
    return (
        DownloadLink.expires_at > now,
        or_(
            DownloadLink.max_downloads.is_(None),
            DownloadLink.downloads_served < DownloadLink.max_downloads,
        ),
    )


def create(db: Session, link: DownloadLink) -> DownloadLink:
    db.add(link)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if db.get(DownloadLink, link.id) is not None:
            raise DuplicateId(link_id=link.id) from exc
        raise
    db.refresh(link)
    return link


def get(db: Session, link_id: str) -> DownloadLink:
    link = db.get(DownloadLink, link_id, populate_existing=True)
    if link is None:
        raise LinkNotFound(link_id=link_id)
    return link


def list_links(db: Session, limit: int | None = None, offset: int = 0) -> list[DownloadLink]:
    stmt = (
        select(DownloadLink)
        .order_by(DownloadLink.created_at.desc(), DownloadLink.id)
        .execution_options(populate_existing=True)
    )
    if offset:
        stmt = stmt.offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    return list(db.scalars(stmt))


def count_links(db: Session) -> int:
    return db.query(DownloadLink).count()


def delete(db: Session, link_id: str) -> None:
    result = db.execute(sa_delete(DownloadLink).where(DownloadLink.id == link_id))
    if result.rowcount == 0:
        db.rollback()
        raise LinkNotFound(link_id=link_id)
    db.commit()


def try_redeem(db: Session, link_id: str, now: datetime) -> RedeemTarget:
    """Consume one download slot, or explain why none is available."""
    result = db.execute(
        update(DownloadLink)
        .where(DownloadLink.id == link_id, *_redeemable(now))
        .values(downloads_served=DownloadLink.downloads_served + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 1:
        # still inside the UPDATE's transaction, so the row cannot change under us
        row = db.execute(
            select(
                DownloadLink.object_key,
                DownloadLink.bucket,
                DownloadLink.download_filename,
                DownloadLink.expires_at,
                DownloadLink.downloads_served,
            ).where(DownloadLink.id == link_id)
        ).one()
        db.commit()
        return RedeemTarget(
            link_id=link_id,
            object_key=row.object_key,
            bucket=row.bucket,
            download_filename=row.download_filename,
            expires_at=ensure_aware(row.expires_at),
            downloads_served=row.downloads_served,
        )

    db.rollback()
    link = db.get(DownloadLink, link_id, populate_existing=True)
    if link is None:
        raise LinkNotFound(link_id=link_id)
    if link.is_expired_at(now):
        raise LinkExpired(link_id=link_id)
    raise LinkExhausted(link_id=link_id)


def release(db: Session, link_id: str) -> bool:
    """Give back one download slot taken by ``try_redeem``."""
    result = db.execute(
        update(DownloadLink)
        .where(DownloadLink.id == link_id, DownloadLink.downloads_served > 0)
        .values(downloads_served=DownloadLink.downloads_served - 1)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount == 1


def purge_inactive(db: Session, now: datetime) -> int:
    """Delete every link that is expired or has no downloads left."""
    result = db.execute(
        sa_delete(DownloadLink)
        .where(
            or_(
                DownloadLink.expires_at <= now,
                and_(
                    DownloadLink.max_downloads.is_not(None),
                    DownloadLink.downloads_served >= DownloadLink.max_downloads,
                ),
            )
        )
        .execution_options(synchronize_session=False)
    )
    db.commit()
    logger.info(f"Purged {result.rowcount} inactive download links")
    return result.rowcount
