"""Application exception types."""

from __future__ import annotations

from enum import Enum
from typing import Any

from app.schemas.error import ErrorResponse


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNPROCESSABLE = "unprocessable"
    INTERNAL = "internal"
    DATABASE = "database"
    SERVICE_UNAVAILABLE = "service_unavailable"


_DEFAULT_STATUS: dict[ErrorKind, int] = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNPROCESSABLE: 422,
    ErrorKind.INTERNAL: 500,
    ErrorKind.DATABASE: 500,
    ErrorKind.SERVICE_UNAVAILABLE: 503,
}

GENERIC_INTERNAL_MESSAGE = "Internal server error"


class ApiError(Exception):
    """Structured API error that maps directly to the JSON error envelope.

    A single tagged type: ``kind`` selects the family, ``status_code``/``code`` what the
    client sees. ``is_operational`` is False only for unexpected faults, whose message is
    masked by the global handler.
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        *,
        kind: ErrorKind | None = None,
        is_operational: bool = True,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details
        self.kind = kind or _kind_for_status(status_code)
        self.is_operational = is_operational
        super().__init__(message)

    @property
    def errors(self) -> dict[str, list[str]] | None:
        if self.kind is ErrorKind.UNPROCESSABLE and isinstance(self.details, dict):
            return self.details
        return None

    @property
    def payload(self) -> ErrorResponse:
        message = self.message if self.is_operational else GENERIC_INTERNAL_MESSAGE
        return ErrorResponse(
            error=message,
            code=self.code,
            details=self.details if self.is_operational else None,
            errors=self.errors,
        )

    def __repr__(self) -> str:
        return f"ApiError(kind={self.kind.value}, status_code={self.status_code}, code={self.code!r})"


def _kind_for_status(status_code: int) -> ErrorKind:
    for kind, status in _DEFAULT_STATUS.items():
        if status == status_code and kind is not ErrorKind.DATABASE:
            return kind
    return ErrorKind.INTERNAL if status_code >= 500 else ErrorKind.BAD_REQUEST


def bad_request(message: str, code: str = "BAD_REQUEST", details: Any | None = None) -> ApiError:
    return ApiError(400, code, message, details, kind=ErrorKind.BAD_REQUEST)


def unauthorized(
    message: str = "User not authenticated",
    code: str = "NOT_AUTHENTICATED",
    details: Any | None = None,
) -> ApiError:
    return ApiError(401, code, message, details, kind=ErrorKind.UNAUTHORIZED)


def forbidden(message: str = "Access forbidden", code: str = "FORBIDDEN", details: Any | None = None) -> ApiError:
    return ApiError(403, code, message, details, kind=ErrorKind.FORBIDDEN)


def not_found(message: str = "Resource not found", code: str = "NOT_FOUND", details: Any | None = None) -> ApiError:
    return ApiError(404, code, message, details, kind=ErrorKind.NOT_FOUND)


def conflict(message: str = "Resource already exists", code: str = "CONFLICT", details: Any | None = None) -> ApiError:
    return ApiError(409, code, message, details, kind=ErrorKind.CONFLICT)


def unprocessable(errors: dict[str, list[str]], message: str = "Validation failed") -> ApiError:
    return ApiError(422, "VALIDATION_ERROR", message, errors, kind=ErrorKind.UNPROCESSABLE)


def internal_error(
    message: str = GENERIC_INTERNAL_MESSAGE,
    code: str = "INTERNAL_ERROR",
    details: Any | None = None,
) -> ApiError:
    return ApiError(500, code, message, details, kind=ErrorKind.INTERNAL, is_operational=False)


def service_unavailable(
    message: str = "Service temporarily unavailable",
    code: str = "SERVICE_UNAVAILABLE",
) -> ApiError:
    return ApiError(503, code, message, kind=ErrorKind.SERVICE_UNAVAILABLE)


__all__ = [
    "ApiError",
    "ErrorKind",
    "GENERIC_INTERNAL_MESSAGE",
    "bad_request",
    "conflict",
    "forbidden",
    "internal_error",
    "not_found",
    "service_unavailable",
    "unauthorized",
    "unprocessable",
]
