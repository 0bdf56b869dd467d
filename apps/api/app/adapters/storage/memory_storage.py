"""In-memory object storage for local development and tests."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from app.adapters.storage.base import ObjectConflictError, ObjectStorage, ObjectStorageError, StoredObject


@dataclass(slots=True)
class _Blob:
    content: bytes
    content_type: str
    created_at: str


class InMemoryObjectStorage(ObjectStorage):
    """Dict-backed bucket; public URLs follow the Supabase layout."""

    def __init__(self, base_url: str, bucket: str) -> None:
        self._base_url = base_url.rstrip("/")
        self._bucket = bucket
        self._objects: dict[str, _Blob] = {}
        self._lock = threading.RLock()

    def exists(self, path: str) -> bool:
        return path in self._objects

    def read(self, path: str) -> bytes:
        return self._objects[path].content

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        blob = _Blob(content=content, content_type=content_type, created_at=datetime.now(UTC).isoformat())
        with self._lock:
            if path in self._objects:
                raise ObjectConflictError("The resource already exists")
            self._objects[path] = blob
        return path

    def remove(self, paths: list[str]) -> list[str]:
        with self._lock:
            removed = [path for path in paths if path in self._objects]
            for path in removed:
                del self._objects[path]
        return removed

    def move(self, source: str, destination: str) -> None:
        with self._lock:
            if source not in self._objects:
                raise ObjectStorageError("Object not found")
            if destination in self._objects:
                raise ObjectConflictError("The resource already exists")
            self._objects[destination] = self._objects.pop(source)

    def list(self, folder: str = "") -> list[StoredObject]:
        prefix = f"{folder.strip('/')}/" if folder.strip("/") else ""
        objects = []
        with self._lock:
            snapshot = list(self._objects.items())
        for path, blob in snapshot:
            if not path.startswith(prefix):
                continue
            name = path[len(prefix):]
            # Only direct children, like the storage list API.
            if "/" in name:
                continue
            objects.append(
                StoredObject(
                    name=name,
                    path=path,
                    size=len(blob.content),
                    content_type=blob.content_type,
                    created_at=blob.created_at,
                    updated_at=blob.created_at,
                )
            )
        objects.sort(key=lambda item: item.created_at or "", reverse=True)
        return objects

    def public_url(self, path: str) -> str:
        return f"{self._base_url}/storage/v1/object/public/{self._bucket}/{path}"

    def ping(self) -> dict[str, Any]:
        return {"ok": True, "buckets_count": 1}


__all__ = ["InMemoryObjectStorage"]
