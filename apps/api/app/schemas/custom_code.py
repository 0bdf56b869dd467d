"""Custom code snippet API schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import PartialUpdateRequest, Record, reject_null

CodeType = Literal["analytics", "meta", "tracking", "verification", "custom"]
CodePosition = Literal["head", "body_start", "body_end"]


class CreateCustomCodeRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    code: str = Field(min_length=1)
    type: CodeType
    position: CodePosition
    author_name: str | None = Field(default=None, max_length=200)
    status: bool = True


class UpdateCustomCodeRequest(PartialUpdateRequest):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    code: str | None = Field(default=None, min_length=1)
    type: CodeType | None = None
    position: CodePosition | None = None
    author_name: str | None = Field(default=None, max_length=200)
    status: bool | None = None

    @field_validator("name", "code", "type", "position", "status")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        return reject_null(value)


class CustomCodeRecord(Record):
    id: str
    name: str
    code: str
    type: str
    position: str
    author_name: str | None = None
    status: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CustomCodeResponse(BaseModel):
    message: str | None = None
    code: CustomCodeRecord


class CustomCodeListResponse(BaseModel):
    codes: list[CustomCodeRecord]
    total: int


class CodesByPosition(BaseModel):
    head: list[CustomCodeRecord] = Field(default_factory=list)
    body_start: list[CustomCodeRecord] = Field(default_factory=list)
    body_end: list[CustomCodeRecord] = Field(default_factory=list)


class ActiveCustomCodesResponse(BaseModel):
    codes: CodesByPosition
    total: int


class DeletedCustomCode(BaseModel):
    id: str
    name: str


class DeletedCustomCodeResponse(BaseModel):
    message: str
    deleted_code: DeletedCustomCode
