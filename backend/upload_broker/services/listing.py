import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from botocore.exceptions import BotoCoreError, ClientError

from upload_broker.core.config import Settings
from upload_broker.core.errors import ConfigurationError, StoreUnavailableError
from upload_broker.services.signer import SignedUrlGrant
from upload_broker.services.storage import StorageService, StoredObject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectListingItem:
    key: str
    size: int
    last_modified: datetime | None
    direct_url: str
    preview: SignedUrlGrant


def _recency(obj: StoredObject) -> float:
    return obj.last_modified.timestamp() if obj.last_modified else 0.0


def sort_newest_first(objects: list[StoredObject]) -> list[StoredObject]:
    return sorted(objects, key=_recency, reverse=True)


class ListingService:
    def __init__(self, storage: StorageService, settings: Settings | None = None) -> None:
        self.storage = storage
        self.settings = settings or storage.settings

    async def list_objects(
        self,
        bucket: str | None = None,
        max_items: int | None = None,
    ) -> list[ObjectListingItem]:
        """Snapshot of up to ``max_items`` objects, newest first.

        Listing is capped rather than paginated. Any store or signing failure
        aborts the whole listing.
        """
        limit = min(max_items or self.settings.listing_max_items, self.settings.listing_max_items)
        target = bucket or self.storage.bucket
        if not target:
            raise ConfigurationError("Object store bucket not configured")
        try:
            objects = await asyncio.to_thread(self.storage.list_objects, limit, target)
        except (BotoCoreError, ClientError) as exc:
            raise StoreUnavailableError("Failed to list objects") from exc

        ordered = sort_newest_first(objects)
        semaphore = asyncio.Semaphore(self.settings.signing_concurrency)

        async def build(obj: StoredObject) -> ObjectListingItem:
            async with semaphore:
                preview = await asyncio.to_thread(
                    self.storage.public_signer.sign_get, target, obj.key
                )
            return ObjectListingItem(
                key=obj.key,
                size=obj.size,
                last_modified=obj.last_modified,
                direct_url=self.storage.direct_url(obj.key, target),
                preview=preview,
            )

        try:
            items = await asyncio.gather(*(build(obj) for obj in ordered))
        except (BotoCoreError, ClientError) as exc:
            raise StoreUnavailableError("Failed to sign preview URLs") from exc

        logger.info("Listed %d objects from %s", len(items), target)
        return list(items)
