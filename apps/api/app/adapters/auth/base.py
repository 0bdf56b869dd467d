"""Identity provider interfaces."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from app.schemas.auth import IdentitySession, IdentityUser


class AuthVerificationError(Exception):
    """Raised when a token cannot be verified or resolves to no user."""


class InvalidCredentialsError(Exception):
    """Raised when an email/password pair is rejected."""


class IdentityConflictError(Exception):
    """Raised when registering an email that already has an identity."""


class IdentityRejectedError(Exception):
    """Raised when the identity service refuses a sign-up payload (weak password, bad email)."""


class IdentityServiceError(Exception):
    """Raised when the identity service fails for a reason other than the caller's input."""


@dataclass(slots=True)
class AuthResult:
    user: IdentityUser | None
    session: IdentitySession | None

    @property
    def token(self) -> str | None:
        return self.session.access_token if self.session is not None else None


class IdentityProvider(ABC):
    """Provider-neutral identity operations."""

    @abstractmethod
    def get_user(self, token: str) -> IdentityUser:
        """Verify a bearer token and return the identity it belongs to."""

    @abstractmethod
    def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> AuthResult:
        """Create an identity; the session is ``None`` when email confirmation is pending."""

    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthResult:
        """Exchange credentials for a session."""

    @abstractmethod
    def sign_out(self, token: str) -> None:
        """Revoke the session behind ``token``."""

    @abstractmethod
    def delete_user(self, user_id: str) -> None:
        """Delete an identity; the profile row cascades."""

    @abstractmethod
    def ping(self) -> dict[str, Any]:
        """Return a readiness report; raise ``IdentityServiceError`` when unreachable."""


__all__ = [
    "AuthResult",
    "AuthVerificationError",
    "IdentityConflictError",
    "IdentityProvider",
    "IdentityRejectedError",
    "IdentityServiceError",
    "InvalidCredentialsError",
]
