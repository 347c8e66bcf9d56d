import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from upload_broker.core.config import Settings, get_settings
from upload_broker.services import storage as storage_service
from upload_broker.services.signer import SignedUrlGrant

TEST_ENV = {
    "ENV": "test",
    "S3_ACCESS_KEY": "test-access",
    "S3_SECRET_KEY": "test-secret",
    "S3_BUCKET": "test-bucket",
    "S3_REGION": "us-east-1",
    "S3_ENDPOINT_URL": "http://localhost:9000",
}


class FakeSigner:
    def __init__(self, endpoint: str, default_ttl: int = 300) -> None:
        self.endpoint = endpoint
        self.default_ttl = default_ttl
        self.calls: list[tuple] = []
        self.error: Exception | None = None

    def _grant(self, method, bucket, key, ttl):
        if self.error is not None:
            raise self.error
        issued_at = datetime.now(timezone.utc)
        return SignedUrlGrant(
            url=f"{self.endpoint}/{bucket}/{key}?X-Amz-Signature=fake",
            method=method,
            issued_at=issued_at,
            expires_at=issued_at + timedelta(seconds=ttl or self.default_ttl),
        )

    def sign_put(self, bucket, key, content_type, ttl=None, content_length=None):
        self.calls.append(("PUT", bucket, key, content_type, content_length))
        return self._grant("PUT", bucket, key, ttl)

    def sign_get(self, bucket, key, ttl=None):
        self.calls.append(("GET", bucket, key))
        return self._grant("GET", bucket, key, ttl)


class DummyStorage(storage_service.StorageService):
    def __init__(self, settings: Settings) -> None:  # type: ignore[super-init-not-called]
        self.settings = settings
        self.bucket = settings.s3_bucket
        self.public_bucket = settings.s3_public_bucket
        self.public_endpoint = settings.s3_public_endpoint
        self.internal_signer = FakeSigner(settings.s3_endpoint)  # type: ignore[assignment]
        self.public_signer = FakeSigner(self.public_endpoint)  # type: ignore[assignment]
        self.objects: list[storage_service.StoredObject] = []
        self.list_calls: list[tuple[int, str | None]] = []
        self.error: Exception | None = None

    def list_objects(self, max_items, bucket=None):  # type: ignore[override]
        self.list_calls.append((max_items, bucket))
        if self.error is not None:
            raise self.error
        return list(self.objects)[:max_items]


@pytest.fixture(scope="session", autouse=True)
def configure_environment():
    os.environ.update(TEST_ENV)
    get_settings.cache_clear()
    storage_service.reset_storage_service()
    yield
    storage_service.reset_storage_service()


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        values = {**TEST_ENV, **overrides}
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings(S3_PUBLIC_ENDPOINT_URL="https://files.example.com")


@pytest.fixture
def dummy_storage(settings):
    storage = DummyStorage(settings)
    storage_service._storage_service = storage
    yield storage
    storage_service.reset_storage_service()


@pytest.fixture
def app_instance(dummy_storage):
    from upload_broker.main import create_app

    return create_app()


@pytest_asyncio.fixture
async def client(app_instance):
    transport = ASGITransport(app=app_instance)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
