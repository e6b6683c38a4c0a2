"""Public redemption of download tokens.

A redemption first takes a download slot through ``link_store.try_redeem`` and
only then asks the signer for a short-lived URL. If the signer fails the slot
stays consumed unless ``release_on_signer_failure`` is enabled, in which case
it is handed back. Signer calls are never retried here.
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from linkgate.core.config import Settings
from linkgate.core.errors import LinkError, SignerError
from linkgate.core.time import utcnow
from . import link_store
from .signer import Signer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignedDownload:
    url: str
    expires_in: int
    downloads_served: int


def signed_url_ttl(settings: Settings, expires_at: datetime, now: datetime) -> int:
    """Signed URLs never outlive the link they were issued for."""
    remaining = math.ceil((expires_at - now).total_seconds())
    return max(1, min(settings.signed_url_ttl_seconds, remaining))


def redeem(
    db: Session,
    signer: Signer,
    settings: Settings,
    link_id: str,
    now: datetime | None = None,
) -> SignedDownload:
    now = (now or utcnow()).astimezone(timezone.utc)
    try:
        target = link_store.try_redeem(db, link_id, now)
    except LinkError as exc:
        logger.warning(f"Redemption of {link_id} refused: {exc.kind}")
        raise

    ttl = signed_url_ttl(settings, target.expires_at, now)
    try:
        url = signer.sign(
            target.bucket or settings.default_bucket,
            target.object_key,
            ttl,
            target.download_filename,
        )
    except SignerError:
        if settings.release_on_signer_failure:
            link_store.release(db, link_id)
            logger.warning(f"Signer failed for {link_id}; download slot released")
        else:
            logger.warning(f"Signer failed for {link_id}; download slot kept")
        raise
    except Exception as exc:
        # any other signer failure is still a provider failure to the caller
        if settings.release_on_signer_failure:
            link_store.release(db, link_id)
        logger.exception(f"Unexpected signer failure for {link_id}")
        raise SignerError(link_id=link_id) from exc

    logger.info(f"Link {link_id} redeemed ({target.downloads_served} served)")
    return SignedDownload(url=url, expires_in=ttl, downloads_served=target.downloads_served)
