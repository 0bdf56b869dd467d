"""Supabase Storage adapter."""

from __future__ import annotations

from typing import Any

from supabase import Client, StorageException

from app.adapters.storage.base import ObjectConflictError, ObjectStorage, ObjectStorageError, StoredObject

_CACHE_CONTROL_SECONDS = "3600"
_LIST_LIMIT = 100


def _error_payload(exc: StorageException) -> dict[str, Any]:
    if exc.args and isinstance(exc.args[0], dict):
        return exc.args[0]
    return {"message": str(exc)}


def _storage_error(exc: StorageException) -> ObjectStorageError:
    payload = _error_payload(exc)
    message = str(payload.get("message") or payload.get("error") or "Storage operation failed")
    status = str(payload.get("statusCode") or payload.get("status") or "")
    if status == "409" or "already exists" in message.lower():
        return ObjectConflictError(message)
    return ObjectStorageError(message)


class SupabaseObjectStorage(ObjectStorage):
    def __init__(self, client: Client, bucket: str) -> None:
        self._client = client
        self._bucket_name = bucket

    def _bucket(self) -> Any:
        return self._client.storage.from_(self._bucket_name)

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        try:
            self._bucket().upload(
                path=path,
                file=content,
                file_options={
                    "content-type": content_type,
                    "cache-control": _CACHE_CONTROL_SECONDS,
                    "upsert": "false",
                },
            )
        except StorageException as exc:
            raise _storage_error(exc) from exc
        return path

    def remove(self, paths: list[str]) -> list[str]:
        if not paths:
            return []
        try:
            removed = self._bucket().remove(paths)
        except StorageException as exc:
            raise _storage_error(exc) from exc
        return [str(item.get("name")) for item in removed or [] if isinstance(item, dict) and item.get("name")]

    def move(self, source: str, destination: str) -> None:
        try:
            self._bucket().move(source, destination)
        except StorageException as exc:
            raise _storage_error(exc) from exc

    def list(self, folder: str = "") -> list[StoredObject]:
        options = {"limit": _LIST_LIMIT, "offset": 0, "sortBy": {"column": "created_at", "order": "desc"}}
        try:
            entries = self._bucket().list(folder, options)
        except StorageException as exc:
            raise _storage_error(exc) from exc

        prefix = f"{folder}/" if folder else ""
        objects: list[StoredObject] = []
        for entry in entries or []:
            metadata = entry.get("metadata") or {}
            objects.append(
                StoredObject(
                    name=entry["name"],
                    path=f"{prefix}{entry['name']}",
                    size=metadata.get("size"),
                    content_type=metadata.get("mimetype"),
                    created_at=entry.get("created_at"),
                    updated_at=entry.get("updated_at"),
                )
            )
        return objects

    def public_url(self, path: str) -> str:
        return str(self._bucket().get_public_url(path)).rstrip("?")

    def ping(self) -> dict[str, Any]:
        try:
            buckets = self._client.storage.list_buckets()
        except StorageException as exc:
            raise _storage_error(exc) from exc
        return {"ok": True, "buckets_count": len(buckets or [])}


__all__ = ["SupabaseObjectStorage"]
