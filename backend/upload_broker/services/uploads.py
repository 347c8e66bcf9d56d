import logging
from dataclasses import dataclass

from botocore.exceptions import BotoCoreError, ClientError

from upload_broker.core.config import Settings
from upload_broker.core.errors import StoreUnavailableError, ValidationError
from upload_broker.services.keys import NamespaceValidator, derive_key, namespace_validator
from upload_broker.services.signer import SignedUrlGrant
from upload_broker.services.storage import StorageService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadRequest:
    file_name: str
    content_type: str
    namespace_id: str
    size: int | None = None


@dataclass(frozen=True)
class UploadGrant:
    upload_url: SignedUrlGrant
    key: str


class UploadService:
    def __init__(
        self,
        storage: StorageService,
        settings: Settings | None = None,
        validator: NamespaceValidator | None = None,
    ) -> None:
        self.storage = storage
        self.settings = settings or storage.settings
        self.validator = validator or namespace_validator(self.settings.namespace_id_pattern)

    def request_upload(self, request: UploadRequest) -> UploadGrant:
        file_name = request.file_name.strip()
        content_type = request.content_type.strip()
        if not file_name or not content_type:
            raise ValidationError("fileName and contentType are required", field="fileName")

        key = derive_key(
            request.namespace_id,
            file_name,
            prefix=self.settings.storage_key_prefix,
            validator=self.validator,
        )
        try:
            grant = self.storage.public_signer.sign_put(
                self.storage.bucket,
                key,
                content_type,
                content_length=request.size,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StoreUnavailableError("Failed to sign upload URL") from exc

        logger.info("Issued upload URL for %s (expires %s)", key, grant.expires_at.isoformat())
        return UploadGrant(upload_url=grant, key=key)
