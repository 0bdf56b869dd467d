"""Media library service layer.

Binary objects live in the storage bucket under ``<folder>/``; the ``media`` table keeps
their metadata and the ``media_folders`` table the set of valid folders.
"""

from __future__ import annotations

import logging
import posixpath
from datetime import UTC, datetime

from app.adapters.storage import ObjectStorage, ObjectStorageError
from app.core.logging import safe_log_identifier
from app.errors import bad_request, not_found
from app.repositories.base import Query, StorageError, TableGateway
from app.schemas.auth import AuthPrincipal
from app.schemas.media import (
    BulkDeletedMediaResponse,
    DeletedFolderResponse,
    DeletedMediaResponse,
    FolderListResponse,
    FolderMediaResponse,
    FolderResponse,
    MediaFolderRecord,
    MediaListQuery,
    MediaListResponse,
    MediaRecord,
    MediaResponse,
    UpdateMediaRequest,
    normalize_folder_name,
)
from app.services.common import (
    IncomingFile,
    build_object_key,
    duplicate_as_conflict,
    ensure_image,
    fetch_one,
    object_storage_failure,
    update_one,
)

logger = logging.getLogger(__name__)

_FOLDERS = "media_folders"
_MEDIA = "media"
_NOT_FOUND = "Media item not found"
_NEWEST_FIRST = [("upload_date", True)]
PLACEHOLDER_NAME = ".keep"


class MediaService:
    def __init__(self, tables: TableGateway, storage: ObjectStorage) -> None:
        self._tables = tables
        self._storage = storage

    def _folder_exists(self, name: str) -> bool:
        try:
            self._tables.select_one(_FOLDERS, {"name": name}, "name")
        except StorageError as exc:
            if exc.is_row_not_found:
                return False
            raise
        return True

    def list_folders(self) -> FolderListResponse:
        result = self._tables.select(_FOLDERS, Query(order=[("name", False)]))
        return FolderListResponse(
            folders=[MediaFolderRecord.model_validate(row) for row in result.rows],
            total=result.count,
        )

    def create_folder(self, name: str) -> FolderResponse:
        try:
            row = self._tables.insert(_FOLDERS, {"name": name})
        except StorageError as exc:
            raise duplicate_as_conflict(exc, "Folder already exists") or exc

        try:
            self._storage.upload(f"{name}/{PLACEHOLDER_NAME}", b"", "text/plain")
        except ObjectStorageError as exc:
            # The folder row is authoritative; the placeholder only makes it visible in the bucket UI.
            logger.warning("media.folder_placeholder_failed folder=%s error=%s", name, exc)

        logger.info("media.folder_created folder=%s", name)
        return FolderResponse(message="Folder created successfully", folder=MediaFolderRecord.model_validate(row))

    def delete_folder(self, name: str) -> DeletedFolderResponse:
        folder = normalize_folder_name(name)
        if not self._folder_exists(folder):
            raise not_found("Folder not found")

        items = self._tables.select(_MEDIA, Query(eq={"type": folder}, columns="id, path")).rows
        paths = [item["path"] for item in items if item.get("path")]
        try:
            self._storage.remove([*paths, f"{folder}/{PLACEHOLDER_NAME}"])
        except ObjectStorageError as exc:
            raise object_storage_failure(exc, "delete folder files") from exc

        self._tables.delete(_MEDIA, Query(eq={"type": folder}))
        self._tables.delete(_FOLDERS, Query(eq={"name": folder}))
        logger.warning("media.folder_deleted folder=%s items=%s", folder, len(items))
        return DeletedFolderResponse(
            message="Folder deleted successfully",
            deleted_folder=folder,
            deleted_items=len(items),
        )

    def folder_media(self, name: str) -> FolderMediaResponse:
        folder = normalize_folder_name(name)
        result = self._tables.select(_MEDIA, Query(eq={"type": folder}, order=list(_NEWEST_FIRST)))
        return FolderMediaResponse(
            folder=folder,
            media=[MediaRecord.model_validate(row) for row in result.rows],
            total=result.count,
        )

    def upload(
        self,
        principal: AuthPrincipal,
        upload: IncomingFile,
        *,
        title: str,
        folder: str,
        description: str | None = None,
        alt_text: str | None = None,
    ) -> MediaResponse:
        ensure_image(upload)
        folder = normalize_folder_name(folder)
        if not self._folder_exists(folder):
            raise bad_request("Invalid type. Folder does not exist.", code="INVALID_MEDIA_TYPE")

        key = build_object_key(folder, upload.filename)
        try:
            stored_path = self._storage.upload(key, upload.content, upload.content_type)
        except ObjectStorageError as exc:
            raise object_storage_failure(exc, "upload media") from exc

        row = self._tables.insert(
            _MEDIA,
            {
                "title": title,
                "description": description or None,
                "alt_text": alt_text or None,
                "type": folder,
                "author_name": principal.display_name,
                "upload_date": datetime.now(UTC).isoformat(),
                "path": stored_path,
                "url": self._storage.public_url(stored_path),
                "size": upload.size,
                "mime_type": upload.content_type,
            },
        )
        logger.info(
            "media.uploaded media_id=%s folder=%s size=%s user_id=%s",
            row["id"],
            folder,
            upload.size,
            safe_log_identifier(principal.user_id, prefix="uid"),
        )
        return MediaResponse(message="Media uploaded successfully", media=MediaRecord.model_validate(row))

    def list_media(self, filters: MediaListQuery) -> MediaListResponse:
        folder = normalize_folder_name(filters.type) if filters.type else None
        has_date_filter = bool(filters.date_from or filters.date_to)
        active_filters = sum(1 for active in (folder, filters.author, has_date_filter) if active)
        if filters.mode == "single" and active_filters > 1:
            raise bad_request("Only one filter is allowed when mode=single", code="TOO_MANY_FILTERS")

        query = Query(order=list(_NEWEST_FIRST))
        if folder:
            query.eq["type"] = folder
        if filters.author:
            query.ilike["author_name"] = f"%{filters.author}%"
        if filters.date_from:
            query.gte["upload_date"] = filters.date_from
        if filters.date_to:
            query.lte["upload_date"] = filters.date_to

        result = self._tables.select(_MEDIA, query)
        return MediaListResponse(media=[MediaRecord.model_validate(row) for row in result.rows], total=result.count)

    def get_media(self, media_id: str) -> MediaResponse:
        row = fetch_one(self._tables, _MEDIA, {"id": media_id}, not_found_message=_NOT_FOUND)
        return MediaResponse(media=MediaRecord.model_validate(row))

    def update_media(self, media_id: str, payload: UpdateMediaRequest) -> MediaResponse:
        row = update_one(self._tables, _MEDIA, {"id": media_id}, payload.changes(), not_found_message=_NOT_FOUND)
        logger.info("media.updated media_id=%s", media_id)
        return MediaResponse(message="Media updated successfully", media=MediaRecord.model_validate(row))

    def move_media(self, media_id: str, destination: str) -> MediaResponse:
        item = fetch_one(self._tables, _MEDIA, {"id": media_id}, not_found_message=_NOT_FOUND)
        if not self._folder_exists(destination):
            raise bad_request("Invalid destination type", code="INVALID_MEDIA_TYPE")
        if item["type"] == destination:
            return MediaResponse(message="Media moved successfully", media=MediaRecord.model_validate(item))

        new_path = f"{destination}/{posixpath.basename(item['path'])}"
        try:
            self._storage.move(item["path"], new_path)
        except ObjectStorageError as exc:
            raise object_storage_failure(exc, "move media") from exc

        row = update_one(
            self._tables,
            _MEDIA,
            {"id": media_id},
            {"type": destination, "path": new_path, "url": self._storage.public_url(new_path)},
            not_found_message=_NOT_FOUND,
        )
        logger.info("media.moved media_id=%s from=%s to=%s", media_id, item["type"], destination)
        return MediaResponse(message="Media moved successfully", media=MediaRecord.model_validate(row))

    def delete_media(self, media_id: str) -> DeletedMediaResponse:
        item = fetch_one(self._tables, _MEDIA, {"id": media_id}, not_found_message=_NOT_FOUND)
        try:
            self._storage.remove([item["path"]])
        except ObjectStorageError as exc:
            raise object_storage_failure(exc, "delete media") from exc
        self._tables.delete(_MEDIA, Query(eq={"id": media_id}))
        logger.info("media.deleted media_id=%s", media_id)
        return DeletedMediaResponse(message="Media deleted successfully", deleted_id=media_id)

    def delete_media_bulk(self, ids: list[str]) -> BulkDeletedMediaResponse:
        items = self._tables.select(_MEDIA, Query(in_={"id": list(ids)}, columns="id, path")).rows
        paths = [item["path"] for item in items if item.get("path")]
        if not paths:
            raise not_found("No media items found for the provided IDs")

        try:
            self._storage.remove(paths)
        except ObjectStorageError as exc:
            raise object_storage_failure(exc, "delete media") from exc
        self._tables.delete(_MEDIA, Query(in_={"id": [item["id"] for item in items]}))
        logger.info("media.bulk_deleted count=%s", len(paths))
        return BulkDeletedMediaResponse(message="Media deleted successfully", deleted_count=len(paths))


__all__ = ["MediaService", "PLACEHOLDER_NAME"]
