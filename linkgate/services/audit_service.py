import json
from typing import Any

from sqlalchemy.orm import Session

from linkgate.core.time import utcnow
from linkgate.models import AuditLog


def _normalize_details(details: Any) -> str | None:
    if details is None:
        return None
    if isinstance(details, str):
        return json.dumps({"message": details})
    try:
        return json.dumps(details, default=str)
    except TypeError:
        return json.dumps({"repr": repr(details)})


def log_audit(
    db: Session,
    action: str,
    actor: str | None = None,
    link_id: str | None = None,
    details: Any = None,
):
    entry = AuditLog(
        at_utc=utcnow(),
        action=action,
        actor=actor,
        link_id=link_id,
        details=_normalize_details(details),
    )
    db.add(entry)
    db.commit()


def list_audit(db: Session, link_id: str | None = None, limit: int = 100) -> list[AuditLog]:
    query = db.query(AuditLog)
    if link_id:
        query = query.filter(AuditLog.link_id == link_id)
    return query.order_by(AuditLog.at_utc.desc()).limit(limit).all()
