"""Helpers shared by the resource services."""

from __future__ import annotations

import logging
import posixpath
import secrets
import time
from dataclasses import dataclass
from typing import Any

from app.adapters.storage import ObjectStorageError
from app.core.db_errors import UNIQUE_VIOLATION
from app.errors import ApiError, ErrorKind, bad_request, conflict, not_found
from app.repositories.base import Row, StorageError, TableGateway

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/svg+xml",
    }
)
INVALID_IMAGE_MESSAGE = "Invalid file type. Only images are allowed."


@dataclass(slots=True)
class IncomingFile:
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def fetch_one(
    tables: TableGateway,
    table: str,
    eq: dict[str, Any],
    *,
    not_found_message: str,
    columns: str = "*",
) -> Row:
    """Return the single matching row or raise 404 with a resource-specific message."""
    try:
        return tables.select_one(table, eq, columns)
    except StorageError as exc:
        if exc.is_row_not_found:
            raise not_found(not_found_message) from exc
        raise


def update_one(tables: TableGateway, table: str, eq: dict[str, Any], payload: Row, *, not_found_message: str) -> Row:
    try:
        return tables.update(table, eq, payload)
    except StorageError as exc:
        if exc.is_row_not_found:
            raise not_found(not_found_message) from exc
        raise


def duplicate_as_conflict(exc: StorageError, message: str) -> ApiError | None:
    """Return a 409 with ``message`` for unique violations; ``None`` for anything else."""
    if exc.code != UNIQUE_VIOLATION:
        return None
    return conflict(message, code=UNIQUE_VIOLATION)


def object_storage_failure(exc: ObjectStorageError, action: str) -> ApiError:
    logger.error("storage.failed action=%s error=%s", action, exc)
    return ApiError(500, "STORAGE_ERROR", f"Failed to {action}", kind=ErrorKind.DATABASE)


def ensure_image(upload: IncomingFile) -> None:
    if upload.content_type not in ALLOWED_IMAGE_TYPES:
        raise bad_request(INVALID_IMAGE_MESSAGE, code="INVALID_FILE_TYPE")
    if upload.size == 0:
        raise bad_request("No file uploaded", code="EMPTY_FILE")


def build_object_key(folder: str, filename: str) -> str:
    """``<folder>/<epoch-ms>-<6 hex><ext>``; the original name never reaches the key."""
    _, extension = posixpath.splitext(posixpath.basename(filename or ""))
    timestamp = int(time.time() * 1000)
    return f"{folder}/{timestamp}-{secrets.token_hex(3)}{extension.lower()}"


__all__ = [
    "ALLOWED_IMAGE_TYPES",
    "INVALID_IMAGE_MESSAGE",
    "IncomingFile",
    "build_object_key",
    "duplicate_as_conflict",
    "ensure_image",
    "fetch_one",
    "object_storage_failure",
    "update_one",
]
