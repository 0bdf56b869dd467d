"""User and account API schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from app.schemas.auth import IdentitySession, IdentityUser
from app.schemas.common import PartialUpdateRequest, Record, reject_null

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

UserRole = Literal["user", "moderator", "admin"]


class RegisterRequest(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN, max_length=320)
    password: str = Field(min_length=6, max_length=72)
    full_name: str | None = Field(default=None, max_length=200)


class LoginRequest(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN, max_length=320)
    password: str = Field(min_length=1)


class UpdateProfileRequest(PartialUpdateRequest):
    full_name: str | None = Field(default=None, max_length=200)
    bio: str | None = Field(default=None, max_length=2000)
    avatar_url: str | None = None
    metadata: dict[str, Any] | None = None


class UpdateUserRequest(UpdateProfileRequest):
    role: UserRole | None = None

    @field_validator("role")
    @classmethod
    def _not_null(cls, value: str | None) -> str | None:
        return reject_null(value)


class UserRecord(Record):
    id: str
    email: str
    full_name: str | None = None
    avatar_url: str | None = None
    role: str = "user"
    bio: str | None = None
    metadata: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PublicUser(BaseModel):
    id: str
    full_name: str | None = None
    avatar_url: str | None = None


class AuthResponse(BaseModel):
    message: str
    user: IdentityUser | None = None
    token: str | None = None
    session: IdentitySession | None = None
    requires_email_confirmation: bool = False


class UserResponse(BaseModel):
    message: str | None = None
    user: UserRecord


class UserListResponse(BaseModel):
    users: list[UserRecord]
    total: int


class PublicUserListResponse(BaseModel):
    users: list[PublicUser]
    total: int


class SessionInfo(BaseModel):
    user_id: str
    email: str | None = None


class SessionResponse(BaseModel):
    active: bool
    user: UserRecord | None = None
    session: SessionInfo | None = None


class DeletedUser(BaseModel):
    id: str
    email: str | None = None
    full_name: str | None = None


class DeletedUserResponse(BaseModel):
    message: str
    deleted_user: DeletedUser
