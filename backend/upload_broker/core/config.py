from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        protected_namespaces=(),
    )

    env: Literal["local", "prod", "test"] = Field(default="local", alias="ENV")
    debug: bool = Field(default=True, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    s3_region: str = Field(default="us-east-1", alias="S3_REGION")
    s3_endpoint: str = Field(default="http://localhost:9000", alias="S3_ENDPOINT_URL")
    s3_public_endpoint_override: str | None = Field(default=None, alias="S3_PUBLIC_ENDPOINT_URL")
    s3_bucket: str = Field(default="uploads", alias="S3_BUCKET")
    s3_public_bucket_override: str | None = Field(default=None, alias="S3_PUBLIC_BUCKET")
    s3_access_key: str | None = Field(default=None, alias="S3_ACCESS_KEY")
    s3_secret_key: str | None = Field(default=None, alias="S3_SECRET_KEY")
    s3_force_path_style: bool = Field(default=True, alias="S3_FORCE_PATH_STYLE")

    storage_key_prefix: str = Field(default="games", alias="STORAGE_KEY_PREFIX")
    namespace_id_pattern: str = Field(default=r"^[0-9]+$", alias="NAMESPACE_ID_PATTERN")

    presigned_url_ttl: int = Field(default=300, gt=0, alias="PRESIGNED_URL_TTL")
    listing_max_items: int = Field(default=200, gt=0, alias="LISTING_MAX_ITEMS")
    signing_concurrency: int = Field(default=8, gt=0, alias="SIGNING_CONCURRENCY")

    @property
    def s3_public_endpoint(self) -> str:
        return self.s3_public_endpoint_override or self.s3_endpoint

    @property
    def s3_public_bucket(self) -> str:
        return self.s3_public_bucket_override or self.s3_bucket


@lru_cache
def get_settings() -> Settings:
    return Settings()
