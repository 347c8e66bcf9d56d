from upload_broker.schemas.uploads import (
    ErrorResponse,
    ListingItem,
    ListingResponse,
    UploadUrlRequest,
    UploadUrlResponse,
)

__all__ = [
    "UploadUrlRequest",
    "UploadUrlResponse",
    "ListingItem",
    "ListingResponse",
    "ErrorResponse",
]
