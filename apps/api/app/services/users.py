"""User account service layer."""

from __future__ import annotations

import logging

from app.adapters.auth import (
    IdentityConflictError,
    IdentityProvider,
    IdentityRejectedError,
    IdentityServiceError,
    InvalidCredentialsError,
)
from app.core.logging import safe_log_identifier
from app.core.permissions import (
    Action,
    Resource,
    Role,
    capability_for,
    ensure_can_modify,
    has_minimum_role,
    insufficient_role,
)
from app.errors import ApiError, bad_request, conflict, service_unavailable, unauthorized
from app.repositories.base import Query, TableGateway
from app.schemas.auth import AuthPrincipal
from app.schemas.user import (
    AuthResponse,
    DeletedUser,
    DeletedUserResponse,
    LoginRequest,
    PublicUser,
    PublicUserListResponse,
    RegisterRequest,
    SessionInfo,
    SessionResponse,
    UpdateProfileRequest,
    UpdateUserRequest,
    UserListResponse,
    UserRecord,
    UserResponse,
)
from app.services.common import fetch_one, update_one

logger = logging.getLogger(__name__)

_USERS = "users"
_PUBLIC_COLUMNS = "id, full_name, avatar_url"


def _identity_unavailable(exc: IdentityServiceError) -> ApiError:
    logger.error("identity.unavailable error=%s", exc)
    return service_unavailable("Authentication service unavailable", code="AUTH_SERVICE_UNAVAILABLE")


class UserService:
    def __init__(self, tables: TableGateway, identity: IdentityProvider) -> None:
        self._tables = tables
        self._identity = identity

    def register(self, payload: RegisterRequest) -> AuthResponse:
        metadata = {"full_name": payload.full_name} if payload.full_name else {}
        safe_email = safe_log_identifier(payload.email.lower(), prefix="email")
        try:
            result = self._identity.sign_up(payload.email, payload.password, metadata)
        except IdentityConflictError as exc:
            logger.warning("user.register_rejected email=%s reason=duplicate", safe_email)
            raise conflict("A user with this email already exists", code="EMAIL_ALREADY_EXISTS") from exc
        except IdentityRejectedError as exc:
            raise bad_request(str(exc) or "Registration rejected", code="REGISTRATION_REJECTED") from exc
        except IdentityServiceError as exc:
            raise _identity_unavailable(exc) from exc

        if result.session is None:
            logger.info("user.registered email=%s confirmation_required=true", safe_email)
            return AuthResponse(
                message="Registration successful. Please check your email to confirm your account.",
                user=result.user,
                requires_email_confirmation=True,
            )

        logger.info("user.registered email=%s confirmation_required=false", safe_email)
        return AuthResponse(
            message="User registered successfully",
            user=result.user,
            token=result.token,
            session=result.session,
        )

    def login(self, payload: LoginRequest) -> AuthResponse:
        try:
            result = self._identity.sign_in(payload.email, payload.password)
        except InvalidCredentialsError as exc:
            logger.warning(
                "user.login_rejected email=%s",
                safe_log_identifier(payload.email.lower(), prefix="email"),
            )
            raise unauthorized("Invalid email or password", code="INVALID_CREDENTIALS") from exc
        except IdentityServiceError as exc:
            raise _identity_unavailable(exc) from exc

        return AuthResponse(message="Login successful", user=result.user, token=result.token, session=result.session)

    def logout(self, principal: AuthPrincipal) -> str:
        if principal.access_token:
            try:
                self._identity.sign_out(principal.access_token)
            except IdentityServiceError as exc:
                raise _identity_unavailable(exc) from exc
        return "Logout successful"

    def session(self, principal: AuthPrincipal) -> SessionResponse:
        user = None
        if principal.profile is not None:
            user = UserRecord.model_validate(
                fetch_one(self._tables, _USERS, {"id": principal.user_id}, not_found_message="User profile not found")
            )
        return SessionResponse(
            active=True,
            user=user,
            session=SessionInfo(user_id=principal.user_id, email=principal.email),
        )

    def get_profile(self, principal: AuthPrincipal) -> UserResponse:
        row = fetch_one(self._tables, _USERS, {"id": principal.user_id}, not_found_message="User profile not found")
        return UserResponse(user=UserRecord.model_validate(row))

    def update_profile(self, principal: AuthPrincipal, payload: UpdateProfileRequest) -> UserResponse:
        row = update_one(
            self._tables,
            _USERS,
            {"id": principal.user_id},
            payload.changes(),
            not_found_message="User profile not found",
        )
        logger.info("user.profile_updated user_id=%s", safe_log_identifier(principal.user_id, prefix="uid"))
        return UserResponse(message="Profile updated successfully", user=UserRecord.model_validate(row))

    def delete_profile(self, principal: AuthPrincipal) -> DeletedUserResponse:
        row = fetch_one(self._tables, _USERS, {"id": principal.user_id}, not_found_message="User profile not found")
        self._delete_identity(principal.user_id)
        logger.warning("user.account_deleted user_id=%s", safe_log_identifier(principal.user_id, prefix="uid"))
        return DeletedUserResponse(message="Account deleted successfully", deleted_user=DeletedUser.model_validate(row))

    def list_public(self) -> PublicUserListResponse:
        result = self._tables.select(_USERS, Query(order=[("created_at", True)], columns=_PUBLIC_COLUMNS))
        return PublicUserListResponse(
            users=[PublicUser.model_validate(row) for row in result.rows],
            total=result.count,
        )

    def list_users(self) -> UserListResponse:
        result = self._tables.select(_USERS, Query(order=[("created_at", True)]))
        return UserListResponse(users=[UserRecord.model_validate(row) for row in result.rows], total=result.count)

    def get_user(self, user_id: str) -> UserResponse:
        row = fetch_one(self._tables, _USERS, {"id": user_id}, not_found_message="User not found")
        return UserResponse(user=UserRecord.model_validate(row))

    def update_user(self, principal: AuthPrincipal, user_id: str, payload: UpdateUserRequest) -> UserResponse:
        ensure_can_modify(principal, {"id": user_id}, capability_for(Resource.USERS, Action.UPDATE))
        changes = payload.changes()
        if "role" in changes and not has_minimum_role(principal.role, Role.ADMIN):
            raise insufficient_role(Role.ADMIN)

        row = update_one(self._tables, _USERS, {"id": user_id}, changes, not_found_message="User not found")
        logger.info(
            "user.updated user_id=%s updated_by=%s role_changed=%s",
            safe_log_identifier(user_id, prefix="uid"),
            safe_log_identifier(principal.user_id, prefix="uid"),
            "role" in changes,
        )
        return UserResponse(message="User updated successfully", user=UserRecord.model_validate(row))

    def delete_user(self, principal: AuthPrincipal, user_id: str) -> DeletedUserResponse:
        row = fetch_one(self._tables, _USERS, {"id": user_id}, not_found_message="User not found")
        self._delete_identity(user_id)
        logger.warning(
            "user.deleted user_id=%s deleted_by=%s",
            safe_log_identifier(user_id, prefix="uid"),
            safe_log_identifier(principal.user_id, prefix="uid"),
        )
        return DeletedUserResponse(message="User deleted successfully", deleted_user=DeletedUser.model_validate(row))

    def _delete_identity(self, user_id: str) -> None:
        try:
            self._identity.delete_user(user_id)
        except IdentityServiceError as exc:
            raise _identity_unavailable(exc) from exc


__all__ = ["UserService"]
