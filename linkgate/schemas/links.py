from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer

from linkgate.core.time import ensure_aware


class CreateLinkRequest(BaseModel):
    object_key: str
    bucket: Optional[str] = None
    expires_in_seconds: Optional[int] = Field(None, description="Lifetime in seconds; server default when omitted")
    max_downloads: Optional[int] = Field(None, description="Omit for unlimited downloads")
    download_filename: Optional[str] = None


class CreateLinkResponse(BaseModel):
    id: str
    url: str
    object_key: str
    bucket: Optional[str]
    expires_at: datetime
    max_downloads: Optional[int]
    download_filename: Optional[str]
    created_at: datetime

    @field_serializer("expires_at", "created_at")
    def _utc(self, value: datetime) -> str:
        return ensure_aware(value).isoformat()


class LinkStatusOut(BaseModel):
    id: str
    object_key: str
    bucket: Optional[str]
    expires_at: datetime
    max_downloads: Optional[int]
    downloads_served: int
    created_at: datetime
    download_filename: Optional[str]
    download_url: str
    is_expired: bool
    remaining: Optional[int] = Field(None, description="null means unlimited")
    usable: bool

    @field_serializer("expires_at", "created_at")
    def _utc(self, value: datetime) -> str:
        return ensure_aware(value).isoformat()


class ListLinksResponse(BaseModel):
    links: List[LinkStatusOut]
    total: int


class CleanupResponse(BaseModel):
    deleted_count: int


class AuditEntry(BaseModel):
    id: str
    at_utc: datetime
    action: str
    actor: Optional[str]
    link_id: Optional[str]
    details: Optional[str]

    model_config = {"from_attributes": True}

    @field_serializer("at_utc")
    def _utc(self, value: datetime) -> str:
        return ensure_aware(value).isoformat()
