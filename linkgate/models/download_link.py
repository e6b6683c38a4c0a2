from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String

from linkgate.core.time import ensure_aware, utcnow
from linkgate.db.base import Base


class DownloadLink(Base):
    """A public download token pointing at one object in the store."""
    __tablename__ = "download_links"
    __table_args__ = (
        CheckConstraint("downloads_served >= 0", name="ck_download_links_served_non_negative"),
        CheckConstraint("max_downloads IS NULL OR max_downloads > 0", name="ck_download_links_max_downloads_positive"),
    )

    id = Column(String(64), primary_key=True)
    object_key = Column(String(1024), nullable=False)
    bucket = Column(String(255), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    max_downloads = Column(Integer, nullable=True)
    downloads_served = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    download_filename = Column(String(255), nullable=True)

    # The store's conditional UPDATE enforces the same rules in SQL.

    def is_expired_at(self, now: datetime) -> bool:
        return now >= ensure_aware(self.expires_at)

    def remaining_downloads(self) -> int | None:
        if self.max_downloads is None:
            return None
        return max(self.max_downloads - (self.downloads_served or 0), 0)

    def is_exhausted(self) -> bool:
        remaining = self.remaining_downloads()
        return remaining is not None and remaining <= 0

    def is_redeemable_at(self, now: datetime) -> bool:
        return not self.is_expired_at(now) and not self.is_exhausted()
