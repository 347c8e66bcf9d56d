from dataclasses import dataclass
from datetime import datetime
from urllib.parse import quote

from upload_broker.core.config import Settings, get_settings
from upload_broker.services.signer import UrlSigner


@dataclass(frozen=True)
class StoredObject:
    key: str
    size: int
    last_modified: datetime | None


# Same escaping as encodeURIComponent, with "/" left literal between segments.
_URL_SAFE = "/!~*'()"


def make_direct_url(public_endpoint: str, bucket: str, key: str) -> str:
    return f"{public_endpoint.rstrip('/')}/{bucket}/{quote(key, safe=_URL_SAFE)}"


class StorageService:
    """S3-compatible store reached over two endpoints.

    ``internal_signer`` talks to the store from the server's network (listing);
    ``public_signer`` mints URLs a browser can resolve.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.bucket = self.settings.s3_bucket
        self.public_bucket = self.settings.s3_public_bucket
        self.public_endpoint = self.settings.s3_public_endpoint
        self.internal_signer = UrlSigner.from_settings(self.settings, self.settings.s3_endpoint)
        if self.public_endpoint == self.settings.s3_endpoint:
            self.public_signer = self.internal_signer
        else:
            self.public_signer = UrlSigner.from_settings(self.settings, self.public_endpoint)
        self.client = self.internal_signer.client

    def list_objects(self, max_items: int, bucket: str | None = None) -> list[StoredObject]:
        response = self.client.list_objects_v2(Bucket=bucket or self.bucket, MaxKeys=max_items)
        return [
            StoredObject(
                key=entry["Key"],
                size=entry.get("Size") or 0,
                last_modified=entry.get("LastModified"),
            )
            for entry in response.get("Contents", [])
            if entry.get("Key")
        ]

    def direct_url(self, key: str, bucket: str | None = None) -> str:
        # The default bucket may be exposed publicly under a different name.
        if bucket is None or bucket == self.bucket:
            bucket = self.public_bucket
        return make_direct_url(self.public_endpoint, bucket, key)


_storage_service: StorageService | None = None


def get_storage_service() -> StorageService:
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service


def reset_storage_service() -> None:
    global _storage_service
    _storage_service = None
