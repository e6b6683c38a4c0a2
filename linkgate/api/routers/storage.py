from typing import Optional

from fastapi import APIRouter, Depends, Query

from linkgate.api.deps import get_storage_client, require_admin
from linkgate.schemas.storage import ListBucketsResponse, ListObjectsResponse
from linkgate.services import storage_browser

router = APIRouter(prefix="/api/storage", tags=["storage"])


@router.get("/buckets", response_model=ListBucketsResponse)
def list_buckets(client=Depends(get_storage_client), _: str = Depends(require_admin)):
    return ListBucketsResponse(buckets=storage_browser.list_buckets(client))


@router.get("/objects", response_model=ListObjectsResponse)
def list_objects(
    bucket: str = Query(..., min_length=1),
    prefix: Optional[str] = None,
    continuation_token: Optional[str] = Query(None, alias="continuation-token"),
    max_keys: int = Query(1000, ge=1, le=1000),
    client=Depends(get_storage_client),
    _: str = Depends(require_admin),
):
    return ListObjectsResponse(
        **storage_browser.list_objects(
            client, bucket, prefix=prefix, continuation_token=continuation_token, max_keys=max_keys
        )
    )
