import logging
import secrets
from datetime import timedelta

from fastapi import HTTPException, status

from linkgate.core import security
from linkgate.core.config import Settings
from linkgate.core.time import utcnow

logger = logging.getLogger(__name__)


def login(settings: Settings, username: str, password: str) -> dict:
    if not settings.jwt_secret or not settings.admin_password_hash:
        logger.error("Admin login attempted but jwt_secret/admin_password_hash are not configured")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Admin login is not configured")

    username_ok = secrets.compare_digest(username.encode(), settings.admin_username.encode())
    password_ok = security.verify_password(password, settings.admin_password_hash)
    if not (username_ok and password_ok):
        logger.warning(f"Failed admin login for {username!r}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    token = security.create_access_token(username, settings)
    logger.info(f"Admin {username} logged in")
    return {
        "access_token": token,
        "expires_in": settings.access_token_exp_minutes * 60,
        "expires_at": utcnow() + timedelta(minutes=settings.access_token_exp_minutes),
    }
