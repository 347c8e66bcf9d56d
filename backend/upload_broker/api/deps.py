from upload_broker.services.listing import ListingService
from upload_broker.services.storage import get_storage_service
from upload_broker.services.uploads import UploadService


def get_upload_service() -> UploadService:
    return UploadService(get_storage_service())


def get_listing_service() -> ListingService:
    return ListingService(get_storage_service())
