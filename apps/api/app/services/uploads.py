"""Direct bucket upload service layer."""

from __future__ import annotations

import logging

from app.adapters.storage import ObjectStorage, ObjectStorageError
from app.core.logging import safe_log_identifier
from app.core.permissions import Action, Resource, capability_for, ensure_can_modify
from app.errors import ApiError, bad_request
from app.repositories.base import StorageError, TableGateway
from app.schemas.auth import AuthPrincipal
from app.schemas.common import DataResponse, MessageResponse
from app.schemas.upload import (
    BatchUploadResponse,
    BatchUploadResult,
    FailedUpload,
    FileListResponse,
    ListedFile,
    UploadedFile,
    UploadResponse,
)
from app.services.common import IncomingFile, build_object_key, ensure_image, object_storage_failure

logger = logging.getLogger(__name__)

DEFAULT_FOLDER = "general"
MAX_BATCH_FILES = 10


class UploadService:
    def __init__(self, storage: ObjectStorage, tables: TableGateway) -> None:
        self._storage = storage
        self._tables = tables

    def _media_folder_of(self, path: str) -> str | None:
        folder, separator, _ = path.strip("/").partition("/")
        if not separator:
            return None
        try:
            self._tables.select_one("media_folders", {"name": folder}, "name")
        except StorageError as exc:
            if exc.is_row_not_found:
                return None
            raise
        return folder

    def _store(self, upload: IncomingFile, folder: str) -> UploadedFile:
        ensure_image(upload)
        key = build_object_key(folder, upload.filename)
        path = self._storage.upload(key, upload.content, upload.content_type)
        return UploadedFile(
            path=path,
            url=self._storage.public_url(path),
            size=upload.size,
            mimetype=upload.content_type,
            original_name=upload.filename or None,
        )

    def upload_image(self, principal: AuthPrincipal, upload: IncomingFile, *, folder: str) -> UploadResponse:
        try:
            stored = self._store(upload, folder)
        except ObjectStorageError as exc:
            raise object_storage_failure(exc, "upload image") from exc
        logger.info(
            "upload.stored path=%s size=%s user_id=%s",
            stored.path,
            stored.size,
            safe_log_identifier(principal.user_id, prefix="uid"),
        )
        return DataResponse(message="Image uploaded successfully", data=stored)

    def upload_images(
        self,
        principal: AuthPrincipal,
        uploads: list[IncomingFile],
        *,
        folder: str,
    ) -> BatchUploadResponse:
        if not uploads:
            raise bad_request("No files uploaded", code="NO_FILES")
        if len(uploads) > MAX_BATCH_FILES:
            raise bad_request(f"At most {MAX_BATCH_FILES} files can be uploaded at once", code="TOO_MANY_FILES")

        stored: list[UploadedFile] = []
        failed: list[FailedUpload] = []
        for upload in uploads:
            try:
                stored.append(self._store(upload, folder))
            except ApiError as exc:
                failed.append(FailedUpload(filename=upload.filename, error=exc.message))
            except ObjectStorageError as exc:
                failed.append(FailedUpload(filename=upload.filename, error=str(exc) or "Upload failed"))

        logger.info(
            "upload.batch_stored stored=%s failed=%s user_id=%s",
            len(stored),
            len(failed),
            safe_log_identifier(principal.user_id, prefix="uid"),
        )
        return DataResponse(
            message=f"Uploaded {len(stored)} of {len(uploads)} files",
            data=BatchUploadResult(uploaded=stored, errors=failed or None),
        )

    def delete_image(self, principal: AuthPrincipal, path: str) -> MessageResponse:
        # Objects inside media library folders are owned by their media rows.
        if self._media_folder_of(path) is not None:
            ensure_can_modify(principal, {}, capability_for(Resource.MEDIA, Action.DELETE))
        try:
            self._storage.remove([path])
        except ObjectStorageError as exc:
            raise object_storage_failure(exc, "delete image") from exc
        logger.info("upload.deleted path=%s user_id=%s", path, safe_log_identifier(principal.user_id, prefix="uid"))
        return MessageResponse(message="Image deleted successfully")

    def list_images(self, folder: str = "") -> FileListResponse:
        try:
            objects = self._storage.list(folder)
        except ObjectStorageError as exc:
            raise object_storage_failure(exc, "list images") from exc
        return DataResponse(
            data=[
                ListedFile(
                    name=item.name,
                    url=self._storage.public_url(item.path),
                    size=item.size,
                    content_type=item.content_type,
                    created_at=item.created_at,
                    updated_at=item.updated_at,
                )
                for item in objects
            ]
        )


__all__ = ["DEFAULT_FOLDER", "MAX_BATCH_FILES", "UploadService"]
