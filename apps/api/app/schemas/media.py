"""Media library API schemas."""

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from app.schemas.common import Record, reject_null

MEDIA_FOLDER_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")
FOLDER_NAME_MESSAGE = "Folder name must be lowercase and URL-safe (letters, numbers, dash, underscore)"


def normalize_folder_name(value: str) -> str:
    return value.strip().lower()


class CreateFolderRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def _normalize(cls, value: str) -> str:
        normalized = normalize_folder_name(value)
        if not MEDIA_FOLDER_PATTERN.match(normalized):
            raise ValueError(FOLDER_NAME_MESSAGE)
        return normalized


class UpdateMediaRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    alt_text: str | None = Field(default=None, max_length=500)
    type: str | None = None

    @field_validator("title")
    @classmethod
    def _not_null(cls, value: str | None) -> str | None:
        return reject_null(value)

    @field_validator("type")
    @classmethod
    def _reject_type(cls, value: str | None) -> str | None:
        if value is not None:
            raise ValueError("Use the move endpoint to change the media folder type")
        return value

    @model_validator(mode="after")
    def _require_one_field(self) -> "UpdateMediaRequest":
        if not self.model_fields_set - {"type"}:
            raise ValueError("At least one field must be provided for update")
        return self

    def changes(self) -> dict[str, str | None]:
        return self.model_dump(exclude_unset=True, exclude={"type"})


class MoveMediaRequest(BaseModel):
    type: str = Field(min_length=1, max_length=100)

    @field_validator("type")
    @classmethod
    def _normalize(cls, value: str) -> str:
        normalized = normalize_folder_name(value)
        if not MEDIA_FOLDER_PATTERN.match(normalized):
            raise ValueError("Invalid destination type")
        return normalized


class BulkDeleteMediaRequest(BaseModel):
    ids: list[str] = Field(min_length=1, max_length=500)


class MediaListQuery(BaseModel):
    type: str | None = None
    author: str | None = Field(default=None, max_length=200)
    date_from: str | None = None
    date_to: str | None = None
    mode: Literal["single", "multi"] = "multi"


class MediaFolderRecord(Record):
    name: str
    created_at: datetime | None = None


class MediaRecord(Record):
    id: str
    title: str
    description: str | None = None
    alt_text: str | None = None
    type: str
    author_name: str
    upload_date: datetime | None = None
    path: str
    url: str
    size: int | None = None
    mime_type: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class FolderListResponse(BaseModel):
    folders: list[MediaFolderRecord]
    total: int


class FolderResponse(BaseModel):
    message: str
    folder: MediaFolderRecord


class DeletedFolderResponse(BaseModel):
    message: str
    deleted_folder: str
    deleted_items: int


class MediaResponse(BaseModel):
    message: str | None = None
    media: MediaRecord


class MediaListResponse(BaseModel):
    media: list[MediaRecord]
    total: int


class FolderMediaResponse(MediaListResponse):
    folder: str


class DeletedMediaResponse(BaseModel):
    message: str
    deleted_id: str


class BulkDeletedMediaResponse(BaseModel):
    message: str
    deleted_count: int
