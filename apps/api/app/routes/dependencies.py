"""Dependency wiring for routes."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.adapters.auth import AuthVerificationError, IdentityProvider
from app.backend import Backend
from app.core.config import Settings
from app.core.logging import safe_log_identifier
from app.core.permissions import Action, Resource, Role, capability_for, has_minimum_role, insufficient_role
from app.errors import ApiError, bad_request, unauthorized
from app.repositories.base import StorageError, TableGateway
from app.schemas.auth import AuthPrincipal, UserProfile
from app.services.blog import BlogService
from app.services.common import IncomingFile
from app.services.content import ContentService
from app.services.custom_codes import CustomCodeService
from app.services.health import HealthService
from app.services.media import MediaService
from app.services.taxonomy import CATEGORIES, TAGS, TaxonomyService
from app.services.uploads import UploadService
from app.services.users import UserService

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
logger = logging.getLogger(__name__)

_PROFILE_COLUMNS = "id, email, full_name, role, avatar_url"


class _TokenRejected(Exception):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_request_correlation_id(request: Request) -> str:
    return _request_correlation_id(request)


def get_backend(request: Request) -> Backend:
    return request.app.state.backend


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_tables(backend: Annotated[Backend, Depends(get_backend)]) -> TableGateway:
    return backend.tables


def get_identity_provider(backend: Annotated[Backend, Depends(get_backend)]) -> IdentityProvider:
    return backend.identity


def _load_profile(tables: TableGateway, user_id: str) -> UserProfile | None:
    try:
        row = tables.select_one("users", {"id": user_id}, _PROFILE_COLUMNS)
    except StorageError as exc:
        logger.warning(
            "auth.profile_unavailable principal_id=%s code=%s",
            safe_log_identifier(user_id, prefix="pid"),
            exc.code,
        )
        return None
    return UserProfile.model_validate(row)


def _resolve_principal(
    credentials: HTTPAuthorizationCredentials | None,
    identity: IdentityProvider,
    tables: TableGateway,
) -> AuthPrincipal:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise _TokenRejected("missing_bearer")

    token = credentials.credentials
    try:
        user = identity.get_user(token)
    except AuthVerificationError as exc:
        raise _TokenRejected("token_verification_failed") from exc

    return AuthPrincipal(
        user_id=user.id,
        email=user.email,
        identity=user,
        profile=_load_profile(tables, user.id),
        access_token=token,
    )


def get_authenticated_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    identity: Annotated[IdentityProvider, Depends(get_identity_provider)],
    tables: Annotated[TableGateway, Depends(get_tables)],
) -> AuthPrincipal:
    """Validate bearer token, load the caller's profile and attach the principal to the request."""
    correlation_id = _request_correlation_id(request)
    safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")
    try:
        principal = _resolve_principal(credentials, identity, tables)
    except _TokenRejected as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=%s",
            safe_correlation_id,
            request.method,
            request.url.path,
            exc.reason,
        )
        if exc.reason == "missing_bearer":
            raise unauthorized("Authorization token required", code="TOKEN_REQUIRED") from exc
        raise unauthorized("Invalid or expired token", code="INVALID_TOKEN") from exc
    except Exception as exc:
        logger.exception(
            "auth.failed correlation_id=%s method=%s path=%s",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise ApiError(500, "AUTH_FAILED", "Authentication failed") from exc

    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s role=%s profile=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        safe_log_identifier(principal.user_id, prefix="pid"),
        principal.role,
        "loaded" if principal.profile is not None else "missing",
    )
    request.state.auth_principal = principal
    return principal


def get_optional_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    identity: Annotated[IdentityProvider, Depends(get_identity_provider)],
    tables: Annotated[TableGateway, Depends(get_tables)],
) -> AuthPrincipal | None:
    """Same verification as the auth gate, but any failure continues anonymously."""
    if credentials is None:
        return None
    try:
        principal = _resolve_principal(credentials, identity, tables)
    except Exception as exc:  # noqa: BLE001
        logger.info(
            "auth.optional_skipped correlation_id=%s path=%s reason=%s",
            safe_log_identifier(_request_correlation_id(request), prefix="cid"),
            request.url.path,
            getattr(exc, "reason", exc.__class__.__name__),
        )
        return None
    request.state.auth_principal = principal
    return principal


def require_role(minimum: Role) -> Callable[..., AuthPrincipal]:
    """Dependency factory: authenticated caller whose role ranks at least ``minimum``."""

    def dependency(
        request: Request,
        principal: Annotated[AuthPrincipal | None, Depends(get_authenticated_principal)],
    ) -> AuthPrincipal:
        if principal is None:
            raise unauthorized()
        if not has_minimum_role(principal.role, minimum):
            logger.warning(
                "auth.forbidden path=%s principal_id=%s role=%s required=%s",
                request.url.path,
                safe_log_identifier(principal.user_id, prefix="pid"),
                principal.role,
                minimum.value,
            )
            raise insufficient_role(minimum)
        return principal

    return dependency


def require_capability(resource: Resource, action: Action) -> Callable[..., AuthPrincipal]:
    """Role gate for ``(resource, action)``; ownership rules are checked by the service."""
    return require_role(capability_for(resource, action).min_role)


def read_upload_file(upload: UploadFile | None, *, max_bytes: int) -> IncomingFile:
    """Buffer a multipart file, refusing anything larger than ``max_bytes``."""
    if upload is None:
        raise bad_request("No file uploaded", code="NO_FILE")
    content = upload.file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise ApiError(413, "FILE_TOO_LARGE", f"File exceeds the {max_bytes // (1024 * 1024)}MB limit")
    return IncomingFile(
        filename=upload.filename or "",
        content_type=upload.content_type or "application/octet-stream",
        content=content,
    )


def get_user_service(backend: Annotated[Backend, Depends(get_backend)]) -> UserService:
    return UserService(backend.tables, backend.identity)


def get_content_service(tables: Annotated[TableGateway, Depends(get_tables)]) -> ContentService:
    return ContentService(tables)


def get_blog_service(tables: Annotated[TableGateway, Depends(get_tables)]) -> BlogService:
    return BlogService(tables)


def get_category_service(tables: Annotated[TableGateway, Depends(get_tables)]) -> TaxonomyService:
    return TaxonomyService(tables, CATEGORIES)


def get_tag_service(tables: Annotated[TableGateway, Depends(get_tables)]) -> TaxonomyService:
    return TaxonomyService(tables, TAGS)


def get_custom_code_service(tables: Annotated[TableGateway, Depends(get_tables)]) -> CustomCodeService:
    return CustomCodeService(tables)


def get_media_service(backend: Annotated[Backend, Depends(get_backend)]) -> MediaService:
    return MediaService(backend.tables, backend.storage)


def get_upload_service(backend: Annotated[Backend, Depends(get_backend)]) -> UploadService:
    return UploadService(backend.storage, backend.tables)


def get_health_service(
    backend: Annotated[Backend, Depends(get_backend)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HealthService:
    return HealthService(backend, settings)
