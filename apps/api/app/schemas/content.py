"""Page and common content API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import Record


class PageMetaData(BaseModel):
    model_config = ConfigDict(extra="allow")

    metaTitle: str | None = Field(default=None, max_length=100)
    metaDescription: str | None = Field(default=None, max_length=200)


class UpsertPageRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    data: dict[str, Any]
    meta_data: PageMetaData | None = None
    published: bool = False


class UpsertCommonContentRequest(BaseModel):
    data: dict[str, Any]


class PageRecord(Record):
    id: str
    slug: str
    title: str
    data: dict[str, Any]
    meta_data: dict[str, Any] | None = None
    published: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CommonContentRecord(Record):
    id: str
    key: str
    data: dict[str, Any]
    created_at: datetime | None = None
    updated_at: datetime | None = None
