"""Shared request constraints and response envelopes."""

from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

SLUG_PATTERN = r"^[a-z0-9-]+$"
CONTENT_KEY_PATTERN = r"^[a-zA-Z0-9_-]+$"

Slug = Annotated[str, StringConstraints(pattern=SLUG_PATTERN, min_length=1, max_length=200)]

T = TypeVar("T")


class Record(BaseModel):
    """Stored row; columns beyond the declared ones pass through untouched."""

    model_config = ConfigDict(extra="allow")


def reject_null(value: T) -> T:
    """Field validator body for optional update fields backed by NOT NULL columns."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value


class PartialUpdateRequest(BaseModel):
    """Update body where every field is optional but at least one must be sent."""

    @model_validator(mode="after")
    def _require_one_field(self) -> "PartialUpdateRequest":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class DataResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class Pagination(BaseModel):
    total: int = Field(ge=0)
    limit: int = Field(ge=1)
    offset: int = Field(ge=0)
