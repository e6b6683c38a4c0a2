from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from linkgate.core.config import Settings
from linkgate.core.time import utcnow
from linkgate.models import DownloadLink
from . import link_store


@dataclass(frozen=True)
class LinkStatus:
    link: DownloadLink
    url: str
    is_expired: bool
    remaining: int | None
    usable: bool


def project(link: DownloadLink, now: datetime, url: str = "") -> LinkStatus:
    """Point-in-time view of *link*; uses the same rules as redemption."""
    return LinkStatus(
        link=link,
        url=url,
        is_expired=link.is_expired_at(now),
        remaining=link.remaining_downloads(),
        usable=link.is_redeemable_at(now),
    )


def get_status(db: Session, settings: Settings, link_id: str, now: datetime | None = None) -> LinkStatus:
    now = (now or utcnow()).astimezone(timezone.utc)
    link = link_store.get(db, link_id)
    return project(link, now, settings.download_url(link.id))


def list_statuses(
    db: Session,
    settings: Settings,
    now: datetime | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[LinkStatus]:
    now = (now or utcnow()).astimezone(timezone.utc)
    return [
        project(link, now, settings.download_url(link.id))
        for link in link_store.list_links(db, limit=limit, offset=offset)
    ]
