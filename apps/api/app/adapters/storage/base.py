"""Object storage interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class ObjectStorageError(Exception):
    """Raised when the storage bucket rejects or fails an operation."""


class ObjectConflictError(ObjectStorageError):
    """Raised when uploading to a key that already holds an object."""


@dataclass(slots=True)
class StoredObject:
    name: str
    path: str
    size: int | None = None
    content_type: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ObjectStorage(ABC):
    """Provider-neutral access to a single public bucket."""

    @abstractmethod
    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store ``content`` at ``path`` without overwriting; return the stored path."""

    @abstractmethod
    def remove(self, paths: list[str]) -> list[str]:
        """Delete objects; return the paths that existed."""

    @abstractmethod
    def move(self, source: str, destination: str) -> None:
        """Rename an object inside the bucket."""

    @abstractmethod
    def list(self, folder: str = "") -> list[StoredObject]:
        """List objects directly under ``folder``, newest first."""

    @abstractmethod
    def public_url(self, path: str) -> str:
        """Return the public URL of ``path``."""

    @abstractmethod
    def ping(self) -> dict[str, Any]:
        """Return a readiness report; raise ``ObjectStorageError`` when unreachable."""


__all__ = ["ObjectConflictError", "ObjectStorage", "ObjectStorageError", "StoredObject"]
