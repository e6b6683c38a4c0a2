from fastapi import APIRouter, Depends

from linkgate.api.deps import get_settings_dep
from linkgate.core.config import Settings
from linkgate.schemas.auth import LoginRequest, TokenResponse
from linkgate.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, settings: Settings = Depends(get_settings_dep)):
    return TokenResponse(**auth_service.login(settings, body.username, body.password))
