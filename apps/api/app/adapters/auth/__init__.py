"""Identity provider adapters."""

from .base import (
    AuthResult,
    AuthVerificationError,
    IdentityConflictError,
    IdentityProvider,
    IdentityRejectedError,
    IdentityServiceError,
    InvalidCredentialsError,
)
from .mock_auth import InMemoryIdentityProvider
from .supabase_auth import SupabaseIdentityProvider

__all__ = [
    "AuthResult",
    "AuthVerificationError",
    "IdentityConflictError",
    "IdentityProvider",
    "IdentityRejectedError",
    "IdentityServiceError",
    "InMemoryIdentityProvider",
    "InvalidCredentialsError",
    "SupabaseIdentityProvider",
]
