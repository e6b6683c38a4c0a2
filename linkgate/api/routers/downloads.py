"""Public download entry point: no credentials, the token is the capability."""
from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from linkgate.api.deps import get_db, get_settings_dep, get_signer
from linkgate.core.config import Settings
from linkgate.services import redemption_service
from linkgate.services.signer import Signer

router = APIRouter(tags=["downloads"])


@router.get("/{link_id}")
def resolve_download(
    link_id: str,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
    signer: Signer = Depends(get_signer),
):
    download = redemption_service.redeem(db, signer, settings, link_id)
    response = RedirectResponse(download.url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    response.headers["Cache-Control"] = "no-store"
    return response
