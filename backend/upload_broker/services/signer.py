import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Literal

import boto3
from botocore.client import BaseClient, Config

from upload_broker.core.config import Settings
from upload_broker.core.errors import ConfigurationError

Clock = Callable[[], float]


@dataclass(frozen=True)
class SignedUrlGrant:
    url: str
    method: Literal["PUT", "GET"]
    issued_at: datetime
    expires_at: datetime

    @property
    def ttl(self) -> timedelta:
        return self.expires_at - self.issued_at

    def is_valid(self, at: datetime | None = None) -> bool:
        moment = at or datetime.now(timezone.utc)
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment < self.expires_at


def build_s3_client(
    endpoint: str,
    access_key: str | None,
    secret_key: str | None,
    region: str | None = None,
    force_path_style: bool = True,
) -> BaseClient:
    missing = [
        name
        for name, value in (
            ("endpoint", endpoint),
            ("access key", access_key),
            ("secret key", secret_key),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(f"Object store {', '.join(missing)} not configured")

    session = boto3.session.Session()
    return session.client(
        "s3",
        endpoint_url=endpoint,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
        region_name=region,
        config=Config(
            signature_version="s3v4",
            s3={"addressing_style": "path" if force_path_style else "auto"},
        ),
    )


class UrlSigner:
    """Mints pre-signed PUT/GET URLs against one base endpoint.

    Signing is a local SigV4 computation; the endpoint only has to be
    resolvable by whoever eventually presents the URL.
    """

    def __init__(
        self,
        client: BaseClient,
        endpoint: str,
        default_ttl: int = 300,
        clock: Clock = time.time,
    ) -> None:
        self.client = client
        self.endpoint = endpoint
        self.default_ttl = default_ttl
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, endpoint: str) -> "UrlSigner":
        client = build_s3_client(
            endpoint,
            settings.s3_access_key,
            settings.s3_secret_key,
            region=settings.s3_region,
            force_path_style=settings.s3_force_path_style,
        )
        return cls(client, endpoint, default_ttl=settings.presigned_url_ttl)

    def _expiry(self, ttl: int | None) -> tuple[int, datetime, datetime]:
        seconds = self.default_ttl if ttl is None else ttl
        if seconds <= 0:
            raise ValueError("ttl must be positive")
        issued_at = datetime.fromtimestamp(self._clock(), tz=timezone.utc)
        return seconds, issued_at, issued_at + timedelta(seconds=seconds)

    @staticmethod
    def _check_target(bucket: str, key: str) -> None:
        if not bucket:
            raise ConfigurationError("Object store bucket not configured")
        if not key:
            raise ValueError("key must not be empty")

    def sign_put(
        self,
        bucket: str,
        key: str,
        content_type: str,
        ttl: int | None = None,
        content_length: int | None = None,
    ) -> SignedUrlGrant:
        self._check_target(bucket, key)
        seconds, issued_at, expires_at = self._expiry(ttl)
        params = {"Bucket": bucket, "Key": key, "ContentType": content_type}
        if content_length:
            params["ContentLength"] = content_length
        url = self.client.generate_presigned_url(
            "put_object",
            Params=params,
            ExpiresIn=seconds,
        )
        return SignedUrlGrant(url=url, method="PUT", issued_at=issued_at, expires_at=expires_at)

    def sign_get(self, bucket: str, key: str, ttl: int | None = None) -> SignedUrlGrant:
        self._check_target(bucket, key)
        seconds, issued_at, expires_at = self._expiry(ttl)
        url = self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": bucket, "Key": key},
            ExpiresIn=seconds,
        )
        return SignedUrlGrant(url=url, method="GET", issued_at=issued_at, expires_at=expires_at)
