"""Translation of storage-layer failures into API errors."""

from __future__ import annotations

from dataclasses import dataclass

from app.errors import ApiError, ErrorKind
from app.repositories.base import ROW_NOT_FOUND, StorageError

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
CHECK_VIOLATION = "23514"
INVALID_TEXT_REPRESENTATION = "22P02"
NOT_NULL_VIOLATION = "23502"
INVALID_QUERY_PARAMS = "PGRST301"
INSUFFICIENT_PRIVILEGE = "42501"


@dataclass(frozen=True, slots=True)
class _Translation:
    status_code: int
    message: str
    kind: ErrorKind


_TRANSLATIONS: dict[str, _Translation] = {
    UNIQUE_VIOLATION: _Translation(409, "A record with this value already exists", ErrorKind.CONFLICT),
    FOREIGN_KEY_VIOLATION: _Translation(400, "Referenced record does not exist", ErrorKind.BAD_REQUEST),
    CHECK_VIOLATION: _Translation(400, "Invalid data: constraint violation", ErrorKind.BAD_REQUEST),
    INVALID_TEXT_REPRESENTATION: _Translation(400, "Invalid input format", ErrorKind.BAD_REQUEST),
    NOT_NULL_VIOLATION: _Translation(400, "Required field is missing", ErrorKind.BAD_REQUEST),
    ROW_NOT_FOUND: _Translation(404, "Record not found", ErrorKind.NOT_FOUND),
    INVALID_QUERY_PARAMS: _Translation(400, "Invalid query parameters", ErrorKind.BAD_REQUEST),
    INSUFFICIENT_PRIVILEGE: _Translation(
        403,
        "Permission denied: Row level security policy violation",
        ErrorKind.FORBIDDEN,
    ),
}


def _unique_violation_message(raw_message: str) -> str:
    # Best-effort wording only; callers must rely on status/code.
    lowered = raw_message.lower()
    if "slug" in lowered:
        return "A page with this slug already exists"
    if "email" in lowered:
        return "This email is already registered"
    return _TRANSLATIONS[UNIQUE_VIOLATION].message


def translate_storage_error(error: StorageError, *, context: str | None = None) -> ApiError:
    """Map a storage error code to the API error the client should see."""
    code = error.code or "DB_ERROR"
    raw_message = error.message or "Database operation failed"
    details = {key: value for key, value in (("details", error.details), ("hint", error.hint)) if value} or None

    translation = _TRANSLATIONS.get(code)
    if translation is None:
        message = f"Database error: {raw_message}"
        if context:
            message = f"{context}: {message}"
        return ApiError(500, code, message, details, kind=ErrorKind.DATABASE, is_operational=False)

    message = translation.message
    if code == UNIQUE_VIOLATION:
        message = _unique_violation_message(raw_message)
    if context:
        message = f"{context}: {message}"
    return ApiError(translation.status_code, code, message, details, kind=translation.kind)


__all__ = [
    "CHECK_VIOLATION",
    "FOREIGN_KEY_VIOLATION",
    "INSUFFICIENT_PRIVILEGE",
    "INVALID_QUERY_PARAMS",
    "INVALID_TEXT_REPRESENTATION",
    "NOT_NULL_VIOLATION",
    "ROW_NOT_FOUND",
    "UNIQUE_VIOLATION",
    "translate_storage_error",
]
