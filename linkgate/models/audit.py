import uuid

from sqlalchemy import Column, DateTime, String, Text

from linkgate.core.time import utcnow
from linkgate.db.base import Base


class AuditLog(Base):
    __tablename__ = "audit_log"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    at_utc = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    action = Column(String(64), nullable=False)
    actor = Column(String(255), nullable=True)
    link_id = Column(String(64), nullable=True, index=True)
    details = Column(Text, nullable=True)
