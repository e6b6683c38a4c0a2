from datetime import timedelta
from typing import Any, Dict

import jwt
from passlib.context import CryptContext

from .config import Settings, get_settings
from .time import utcnow


pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # malformed hash in configuration
        return False


def create_token(payload: Dict[str, Any], expires_minutes: int, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    now = utcnow()
    expire = now + timedelta(minutes=expires_minutes)
    claims = {
        **payload,
        "iss": settings.jwt_issuer,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=ALGORITHM)


def decode_token(token: str, settings: Settings | None = None) -> Dict[str, Any]:
    settings = settings or get_settings()
    return jwt.decode(
        token,
        settings.jwt_secret,
        issuer=settings.jwt_issuer,
        algorithms=[ALGORITHM],
        options={"require": ["iss", "iat", "exp", "sub"]},
    )


def create_access_token(username: str, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    return create_token({"sub": username, "type": "access"}, settings.access_token_exp_minutes, settings)
