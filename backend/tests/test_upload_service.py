import re

import pytest
from botocore.exceptions import EndpointConnectionError

from upload_broker.core.errors import StoreUnavailableError, ValidationError
from upload_broker.services.keys import pattern_validator
from upload_broker.services.uploads import UploadRequest, UploadService


@pytest.fixture
def uploads(dummy_storage):
    return UploadService(dummy_storage)


def test_request_upload_signs_put_for_derived_key(uploads, dummy_storage):
    grant = uploads.request_upload(
        UploadRequest(file_name="My Photo.PNG", content_type="image/png", namespace_id="7")
    )

    assert re.match(r"^games/7/\d+-[0-9a-f]{6,}-My_Photo\.PNG$", grant.key)
    assert grant.upload_url.method == "PUT"
    assert grant.upload_url.url.startswith(f"https://files.example.com/test-bucket/{grant.key}")
    assert dummy_storage.public_signer.calls == [
        ("PUT", "test-bucket", grant.key, "image/png", None)
    ]
    assert dummy_storage.internal_signer.calls == []


def test_request_upload_passes_declared_size(uploads, dummy_storage):
    uploads.request_upload(
        UploadRequest(
            file_name="a.bin",
            content_type="application/octet-stream",
            namespace_id="3",
            size=2048,
        )
    )
    assert dummy_storage.public_signer.calls[0][-1] == 2048


def test_request_upload_is_not_idempotent(uploads):
    request = UploadRequest(file_name="a.txt", content_type="text/plain", namespace_id="7")
    first = uploads.request_upload(request)
    second = uploads.request_upload(request)
    assert first.key != second.key
    assert first.upload_url.url != second.upload_url.url


def test_missing_game_id(uploads, dummy_storage):
    with pytest.raises(ValidationError) as excinfo:
        uploads.request_upload(
            UploadRequest(file_name="a.txt", content_type="text/plain", namespace_id="")
        )
    assert str(excinfo.value) == "gameId is required"
    assert dummy_storage.public_signer.calls == []


@pytest.mark.parametrize(
    "file_name, content_type",
    [("", "text/plain"), ("a.txt", ""), ("   ", "text/plain"), ("a.txt", "  ")],
)
def test_missing_file_fields(uploads, dummy_storage, file_name, content_type):
    with pytest.raises(ValidationError, match="fileName and contentType are required"):
        uploads.request_upload(
            UploadRequest(file_name=file_name, content_type=content_type, namespace_id="7")
        )
    assert dummy_storage.public_signer.calls == []


@pytest.mark.parametrize("namespace_id", ["abc", "7 8", "../7", "  "])
def test_invalid_game_id_issues_no_signing_call(uploads, dummy_storage, namespace_id):
    with pytest.raises(ValidationError):
        uploads.request_upload(
            UploadRequest(file_name="a.txt", content_type="text/plain", namespace_id=namespace_id)
        )
    assert dummy_storage.public_signer.calls == []


def test_validator_is_pluggable(dummy_storage):
    uploads = UploadService(dummy_storage, validator=pattern_validator(r"[a-z]+"))
    grant = uploads.request_upload(
        UploadRequest(file_name="a.txt", content_type="text/plain", namespace_id="abc")
    )
    assert grant.key.startswith("games/abc/")


def test_validator_comes_from_settings(make_settings, dummy_storage):
    settings = make_settings(NAMESPACE_ID_PATTERN=r"^[a-z0-9-]+$", STORAGE_KEY_PREFIX="levels")
    uploads = UploadService(dummy_storage, settings=settings)
    grant = uploads.request_upload(
        UploadRequest(file_name="map.json", content_type="application/json", namespace_id="world-1")
    )
    assert grant.key.startswith("levels/world-1/")


def test_signing_failure_is_wrapped(uploads, dummy_storage):
    dummy_storage.public_signer.error = EndpointConnectionError(endpoint_url="http://minio:9000")
    with pytest.raises(StoreUnavailableError) as excinfo:
        uploads.request_upload(
            UploadRequest(file_name="a.txt", content_type="text/plain", namespace_id="7")
        )
    assert isinstance(excinfo.value.__cause__, EndpointConnectionError)
