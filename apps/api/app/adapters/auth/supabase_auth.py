"""Supabase Auth identity provider adapter."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from supabase import AuthApiError, AuthError, Client

from app.adapters.auth.base import (
    AuthResult,
    AuthVerificationError,
    IdentityConflictError,
    IdentityProvider,
    IdentityRejectedError,
    IdentityServiceError,
    InvalidCredentialsError,
)
from app.schemas.auth import IdentitySession, IdentityUser

logger = logging.getLogger(__name__)

_DUPLICATE_MARKERS = ("already registered", "already exists")


def _as_dict(model: Any) -> dict[str, Any]:
    if isinstance(model, dict):
        return model
    return model.model_dump()


def _to_user(model: Any) -> IdentityUser | None:
    if model is None:
        return None
    return IdentityUser.model_validate(_as_dict(model))


def _to_session(model: Any) -> IdentitySession | None:
    if model is None:
        return None
    return IdentitySession.model_validate(_as_dict(model))


class SupabaseIdentityProvider(IdentityProvider):
    """Delegates identity operations to Supabase Auth (GoTrue).

    ``client`` verifies tokens. Sign-in and sign-up run on a fresh client from
    ``session_client_factory`` so the shared client never holds a user session.
    Admin operations need ``admin_client`` built with the service-role key.
    """

    def __init__(
        self,
        client: Client,
        session_client_factory: Callable[[], Client],
        admin_client: Client | None = None,
    ) -> None:
        self._client = client
        self._session_client_factory = session_client_factory
        self._admin_client = admin_client

    def _admin(self) -> Client:
        if self._admin_client is None:
            raise IdentityServiceError("Supabase service role key is not configured")
        return self._admin_client

    def get_user(self, token: str) -> IdentityUser:
        try:
            response = self._client.auth.get_user(token)
        except AuthApiError as exc:
            raise AuthVerificationError(exc.message) from exc

        user = _to_user(getattr(response, "user", None))
        if user is None:
            raise AuthVerificationError("Token resolved to no user")
        return user

    def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> AuthResult:
        client = self._session_client_factory()
        try:
            response = client.auth.sign_up({"email": email, "password": password, "options": {"data": metadata}})
        except AuthApiError as exc:
            lowered = exc.message.lower()
            if any(marker in lowered for marker in _DUPLICATE_MARKERS):
                raise IdentityConflictError(exc.message) from exc
            raise IdentityRejectedError(exc.message) from exc
        except AuthError as exc:
            raise IdentityServiceError(exc.message) from exc

        user = _to_user(response.user)
        # An existing confirmed email comes back as a user without identities.
        if user is not None and user.identities is not None and len(user.identities) == 0:
            raise IdentityConflictError("Email already registered")
        return AuthResult(user=user, session=_to_session(response.session))

    def sign_in(self, email: str, password: str) -> AuthResult:
        client = self._session_client_factory()
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthApiError as exc:
            raise InvalidCredentialsError(exc.message) from exc
        except AuthError as exc:
            raise IdentityServiceError(exc.message) from exc
        return AuthResult(user=_to_user(response.user), session=_to_session(response.session))

    def sign_out(self, token: str) -> None:
        try:
            self._admin().auth.admin.sign_out(token)
        except AuthError as exc:
            raise IdentityServiceError(exc.message) from exc

    def delete_user(self, user_id: str) -> None:
        try:
            self._admin().auth.admin.delete_user(user_id)
        except AuthError as exc:
            raise IdentityServiceError(exc.message) from exc

    def ping(self) -> dict[str, Any]:
        try:
            session = self._client.auth.get_session()
        except AuthError as exc:
            raise IdentityServiceError(exc.message) from exc
        return {"ok": True, "session_active": session is not None}


__all__ = ["SupabaseIdentityProvider"]
