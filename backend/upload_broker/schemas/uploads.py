from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadUrlRequest(CamelModel):
    file_name: str = ""
    content_type: str = ""
    game_id: str = ""
    size: int | None = Field(default=None, ge=0)

    @field_validator("file_name", "content_type", "game_id", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> object:
        # Browsers may send the game id as a JSON number.
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class UploadUrlResponse(CamelModel):
    upload_url: str
    key: str
    expires_at: datetime


class ListingItem(CamelModel):
    key: str
    size: int
    last_modified: datetime | None
    direct_url: str
    signed_preview_url: str


class ListingResponse(CamelModel):
    items: list[ListingItem]


class ErrorResponse(BaseModel):
    error: str
