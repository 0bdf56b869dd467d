"""Authentication schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class IdentityUser(BaseModel):
    """Identity record as returned by the identity service."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    email: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    email_confirmed_at: datetime | None = None
    identities: list[dict[str, Any]] | None = None


class IdentitySession(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None
    expires_at: int | None = None


class UserProfile(BaseModel):
    """Subset of the ``users`` row loaded by the auth gate."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str | None = None
    full_name: str | None = None
    role: str | None = "user"
    avatar_url: str | None = None


class AuthPrincipal(BaseModel):
    """Normalized authenticated principal used by business services."""

    user_id: str = Field(min_length=1)
    email: str | None = None
    identity: IdentityUser | None = None
    profile: UserProfile | None = None
    access_token: str | None = Field(default=None, repr=False, exclude=True)

    @property
    def role(self) -> str:
        if self.profile is None:
            return "user"
        return self.profile.role or "user"

    @property
    def display_name(self) -> str:
        if self.profile is not None and self.profile.full_name:
            return self.profile.full_name
        return self.email or self.user_id
