"""In-memory identity provider for local development and tests."""

from __future__ import annotations

import secrets
import threading
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from app.adapters.auth.base import (
    AuthResult,
    AuthVerificationError,
    IdentityConflictError,
    IdentityProvider,
    IdentityRejectedError,
    InvalidCredentialsError,
)
from app.repositories.base import Query, TableGateway
from app.schemas.auth import IdentitySession, IdentityUser

_TOKEN_TTL_SECONDS = 3600


class InMemoryIdentityProvider(IdentityProvider):
    """Keeps identities in process memory and mirrors them into the ``users`` table.

    Besides tokens issued by ``sign_in``/``sign_up``, deterministic test tokens are accepted:
    ``test:<user_id>`` for any identity that exists.
    """

    def __init__(self, tables: TableGateway) -> None:
        self._tables = tables
        self._accounts: dict[str, dict[str, Any]] = {}
        self._ids_by_email: dict[str, str] = {}
        self._tokens: dict[str, str] = {}
        self._lock = threading.RLock()

    def create_identity(
        self,
        email: str,
        password: str = "password",
        *,
        full_name: str | None = None,
        role: str | None = None,
        user_id: str | None = None,
    ) -> IdentityUser:
        """Seed helper: register an identity and optionally promote its profile role."""
        metadata: dict[str, Any] = {"full_name": full_name} if full_name else {}
        with self._lock:
            user = self._register(email, password, metadata, user_id=user_id)
            if role is not None:
                self._tables.update("users", {"id": user.id}, {"role": role})
        return user

    def _register(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any],
        *,
        user_id: str | None = None,
    ) -> IdentityUser:
        normalized = email.strip().lower()
        if normalized in self._ids_by_email:
            raise IdentityConflictError("User already registered")
        if len(password) < 6:
            raise IdentityRejectedError("Password should be at least 6 characters")

        identity_id = user_id or str(uuid4())
        now = datetime.now(UTC)
        account = {
            "id": identity_id,
            "email": normalized,
            "password": password,
            "user_metadata": dict(metadata),
            "created_at": now,
            "email_confirmed_at": now,
        }
        # Mirrors the handle_new_user trigger: the profile row exists before the identity is visible.
        self._tables.insert(
            "users",
            {
                "id": identity_id,
                "email": normalized,
                "full_name": metadata.get("full_name") or metadata.get("name"),
                "avatar_url": metadata.get("avatar_url"),
            },
        )
        self._accounts[identity_id] = account
        self._ids_by_email[normalized] = identity_id
        return self._to_user(account)

    def _to_user(self, account: dict[str, Any]) -> IdentityUser:
        return IdentityUser(
            id=account["id"],
            email=account["email"],
            user_metadata=account["user_metadata"],
            created_at=account["created_at"],
            email_confirmed_at=account["email_confirmed_at"],
            identities=[{"provider": "email", "identity_id": account["id"]}],
        )

    def _issue_session(self, user_id: str) -> IdentitySession:
        token = secrets.token_urlsafe(24)
        self._tokens[token] = user_id
        return IdentitySession(
            access_token=token,
            refresh_token=secrets.token_urlsafe(24),
            expires_in=_TOKEN_TTL_SECONDS,
            expires_at=int(datetime.now(UTC).timestamp()) + _TOKEN_TTL_SECONDS,
        )

    def _resolve_user_id(self, token: str) -> str:
        if token in self._tokens:
            return self._tokens[token]
        parts = token.split(":")
        if len(parts) == 2 and parts[0] == "test" and parts[1].strip():
            return parts[1].strip()
        raise AuthVerificationError("Invalid bearer token")

    def get_user(self, token: str) -> IdentityUser:
        with self._lock:
            account = self._accounts.get(self._resolve_user_id(token))
        if account is None:
            raise AuthVerificationError("Token resolved to no user")
        return self._to_user(account)

    def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> AuthResult:
        with self._lock:
            user = self._register(email, password, metadata)
            return AuthResult(user=user, session=self._issue_session(user.id))

    def sign_in(self, email: str, password: str) -> AuthResult:
        with self._lock:
            account_id = self._ids_by_email.get(email.strip().lower())
            account = self._accounts.get(account_id) if account_id else None
            if account is None or not secrets.compare_digest(account["password"], password):
                raise InvalidCredentialsError("Invalid login credentials")
            return AuthResult(user=self._to_user(account), session=self._issue_session(account["id"]))

    def sign_out(self, token: str) -> None:
        with self._lock:
            user_id = self._tokens.pop(token, None)
            if user_id is None:
                return
            for issued, owner in list(self._tokens.items()):
                if owner == user_id:
                    del self._tokens[issued]

    def delete_user(self, user_id: str) -> None:
        with self._lock:
            account = self._accounts.pop(user_id, None)
            if account is None:
                return
            self._ids_by_email.pop(account["email"], None)
            self._tokens = {token: owner for token, owner in self._tokens.items() if owner != user_id}
            self._tables.delete("users", Query(eq={"id": user_id}))

    def ping(self) -> dict[str, Any]:
        return {"ok": True, "session_active": False}


__all__ = ["InMemoryIdentityProvider"]
