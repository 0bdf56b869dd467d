"""Blog category and tag API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import PartialUpdateRequest, Record, Slug, reject_null


class CreateCategoryRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: Slug
    description: str | None = Field(default=None, max_length=1000)


class UpdateCategoryRequest(PartialUpdateRequest):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: Slug | None = None
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("name", "slug")
    @classmethod
    def _not_null(cls, value: str | None) -> str | None:
        return reject_null(value)


class CreateTagRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: Slug


class UpdateTagRequest(PartialUpdateRequest):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: Slug | None = None

    @field_validator("name", "slug")
    @classmethod
    def _not_null(cls, value: str | None) -> str | None:
        return reject_null(value)


class CategoryRecord(Record):
    id: str
    name: str
    slug: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TagRecord(Record):
    id: str
    name: str
    slug: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryResponse(BaseModel):
    message: str | None = None
    category: CategoryRecord


class CategoryListResponse(BaseModel):
    categories: list[CategoryRecord]
    total: int


class TagResponse(BaseModel):
    message: str | None = None
    tag: TagRecord


class TagListResponse(BaseModel):
    tags: list[TagRecord]
    total: int
