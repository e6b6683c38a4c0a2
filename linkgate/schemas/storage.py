from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class BucketOut(BaseModel):
    name: str
    creation_date: Optional[datetime] = None


class ListBucketsResponse(BaseModel):
    buckets: List[BucketOut]


class ObjectOut(BaseModel):
    key: str
    size: int
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None


class ListObjectsResponse(BaseModel):
    bucket: str
    prefix: str
    objects: List[ObjectOut]
    common_prefixes: List[str]
    is_truncated: bool
    next_continuation_token: Optional[str] = None
