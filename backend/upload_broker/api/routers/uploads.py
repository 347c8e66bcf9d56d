from fastapi import APIRouter, Depends, Query

from upload_broker.api.deps import get_listing_service, get_upload_service
from upload_broker.schemas import (
    ErrorResponse,
    ListingItem,
    ListingResponse,
    UploadUrlRequest,
    UploadUrlResponse,
)
from upload_broker.services.listing import ListingService
from upload_broker.services.uploads import UploadRequest, UploadService

router = APIRouter(tags=["uploads"])

_ERRORS = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@router.post("/api/upload-url", response_model=UploadUrlResponse, responses=_ERRORS)
async def create_upload_url(
    payload: UploadUrlRequest,
    uploads: UploadService = Depends(get_upload_service),
) -> UploadUrlResponse:
    grant = uploads.request_upload(
        UploadRequest(
            file_name=payload.file_name,
            content_type=payload.content_type,
            namespace_id=payload.game_id,
            size=payload.size,
        )
    )
    return UploadUrlResponse(
        upload_url=grant.upload_url.url,
        key=grant.key,
        expires_at=grant.upload_url.expires_at,
    )


@router.get("/uploads", response_model=ListingResponse, responses={500: {"model": ErrorResponse}})
async def list_uploads(
    limit: int | None = Query(default=None, ge=1),
    listing: ListingService = Depends(get_listing_service),
) -> ListingResponse:
    items = await listing.list_objects(max_items=limit)
    return ListingResponse(
        items=[
            ListingItem(
                key=item.key,
                size=item.size,
                last_modified=item.last_modified,
                direct_url=item.direct_url,
                signed_preview_url=item.preview.url,
            )
            for item in items
        ]
    )
