from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str | List[str]) -> List[str]:
    if isinstance(value, list):
        return value
    return [v.strip() for v in str(value).split(",") if v and v.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LINKGATE_",
        extra="ignore",
    )

    app_name: str = "linkgate"
    debug: bool = False
    log_level: str = "INFO"
    log_dir: str | None = None
    host: str = "0.0.0.0"
    port: int = 8080

    database_url: str = "sqlite:///./data/linkgate.db"
    db_echo: bool = False

    # values must come from environment/.env to avoid hardcoding secrets
    jwt_secret: str = ""
    jwt_issuer: str = "linkgate"
    access_token_exp_minutes: int = 60
    admin_username: str = "admin"
    admin_password_hash: str = ""

    public_base_url: str = "http://localhost:8080"
    download_prefix: str = "download"
    default_expiry_seconds: int = 3600
    max_expiry_seconds: int = 365 * 24 * 3600
    signed_url_ttl_seconds: int = 300
    # when true, a signer failure gives the consumed download slot back
    release_on_signer_failure: bool = False

    storage_endpoint_url: str | None = None
    storage_region: str | None = None
    storage_access_key_id: str | None = None
    storage_secret_access_key: str | None = None
    storage_addressing_style: str = "virtual"
    default_bucket: str | None = None

    cors_origins_raw: str = "*"
    enable_docs: bool = True

    @field_validator("public_base_url")
    @classmethod
    def _normalize_base_url(cls, value: str) -> str:
        trimmed = value.strip().rstrip("/")
        return trimmed or "http://localhost:8080"

    @field_validator("download_prefix")
    @classmethod
    def _trim_prefix(cls, value: str) -> str:
        return value.strip().strip("/") or "download"

    @field_validator("default_bucket", "storage_endpoint_url", "storage_region", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def cors_origins(self) -> List[str]:
        parsed = _split_csv(self.cors_origins_raw)
        return parsed or ["*"]

    def download_url(self, link_id: str) -> str:
        return f"{self.public_base_url}/{self.download_prefix}/{link_id}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
