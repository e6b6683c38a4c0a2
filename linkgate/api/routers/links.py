"""Admin endpoints for managing download links."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from linkgate.api.deps import get_db, get_settings_dep, require_admin
from linkgate.core.config import Settings
from linkgate.schemas.links import (
    AuditEntry,
    CleanupResponse,
    CreateLinkRequest,
    CreateLinkResponse,
    LinkStatusOut,
    ListLinksResponse,
)
from linkgate.services import audit_service, link_service, link_store, status_service
from linkgate.services.status_service import LinkStatus


router = APIRouter(prefix="/api/links", tags=["links"])


def _status_out(item: LinkStatus) -> LinkStatusOut:
    link = item.link
    return LinkStatusOut(
        id=link.id,
        object_key=link.object_key,
        bucket=link.bucket,
        expires_at=link.expires_at,
        max_downloads=link.max_downloads,
        downloads_served=link.downloads_served,
        created_at=link.created_at,
        download_filename=link.download_filename,
        download_url=item.url,
        is_expired=item.is_expired,
        remaining=item.remaining,
        usable=item.usable,
    )


@router.post("", response_model=CreateLinkResponse, status_code=status.HTTP_201_CREATED)
def create_link(
    body: CreateLinkRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
    admin: str = Depends(require_admin),
):
    created = link_service.create_link(
        db,
        settings,
        object_key=body.object_key,
        bucket=body.bucket,
        expires_in_seconds=body.expires_in_seconds,
        max_downloads=body.max_downloads,
        download_filename=body.download_filename,
        actor=admin,
    )
    link = created.link
    return CreateLinkResponse(
        id=link.id,
        url=created.url,
        object_key=link.object_key,
        bucket=link.bucket,
        expires_at=link.expires_at,
        max_downloads=link.max_downloads,
        download_filename=link.download_filename,
        created_at=link.created_at,
    )


@router.get("", response_model=ListLinksResponse)
def list_links(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
    _: str = Depends(require_admin),
):
    statuses = status_service.list_statuses(db, settings, limit=limit, offset=offset)
    return ListLinksResponse(
        links=[_status_out(item) for item in statuses],
        total=link_store.count_links(db),
    )


@router.post("/cleanup", response_model=CleanupResponse)
def cleanup_links(db: Session = Depends(get_db), admin: str = Depends(require_admin)):
    return CleanupResponse(deleted_count=link_service.purge_inactive(db, actor=admin))


@router.get("/audit", response_model=List[AuditEntry])
def list_audit(
    link_id: Optional[str] = None,
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    _: str = Depends(require_admin),
):
    return audit_service.list_audit(db, link_id=link_id, limit=limit)


@router.get("/{link_id}", response_model=LinkStatusOut)
def get_link(
    link_id: str,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
    _: str = Depends(require_admin),
):
    return _status_out(status_service.get_status(db, settings, link_id))


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_link(link_id: str, db: Session = Depends(get_db), admin: str = Depends(require_admin)):
    link_service.delete_link(db, link_id, actor=admin)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
