"""Blog post API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, HttpUrl, field_validator

from app.schemas.common import PartialUpdateRequest, Pagination, Record, Slug, reject_null


class CreateBlogPostRequest(BaseModel):
    slug: Slug
    title: str = Field(min_length=1, max_length=500)
    excerpt: str | None = Field(default=None, max_length=1000)
    content: dict[str, Any]
    featured_image: HttpUrl | None = None
    tags: list[str] = Field(default_factory=list)
    meta_data: dict[str, Any] | None = None
    published: bool = False


class UpdateBlogPostRequest(PartialUpdateRequest):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    excerpt: str | None = Field(default=None, max_length=1000)
    content: dict[str, Any] | None = None
    featured_image: HttpUrl | None = None
    tags: list[str] | None = None
    meta_data: dict[str, Any] | None = None
    published: bool | None = None

    @field_validator("title", "content", "published")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        return reject_null(value)


class BlogPostRecord(Record):
    id: str
    slug: str
    title: str
    excerpt: str | None = None
    content: dict[str, Any]
    featured_image: str | None = None
    author_id: str | None = None
    tags: list[str] | None = None
    meta_data: dict[str, Any] | None = None
    published: bool = False
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BlogPostListResponse(BaseModel):
    success: bool = True
    data: list[BlogPostRecord]
    pagination: Pagination
