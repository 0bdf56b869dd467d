"""Direct bucket upload routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile

from app.core.permissions import Action, Resource
from app.routes.dependencies import get_upload_service, read_upload_file, require_capability
from app.schemas.auth import AuthPrincipal
from app.schemas.common import MessageResponse
from app.schemas.error import ERROR_RESPONSES
from app.schemas.upload import (
    UPLOAD_FOLDER_PATTERN,
    BatchUploadResponse,
    DeleteImageRequest,
    FileListResponse,
    UploadResponse,
)
from app.services.uploads import DEFAULT_FOLDER, UploadService

router = APIRouter(prefix="/upload", tags=["Uploads"], responses=ERROR_RESPONSES)

UPLOAD_MAX_BYTES = 10 * 1024 * 1024

TargetFolder = Annotated[str, Query(pattern=UPLOAD_FOLDER_PATTERN, max_length=200)]


@router.post("/image", response_model=UploadResponse)
def upload_image(
    principal: Annotated[AuthPrincipal, Depends(require_capability(Resource.UPLOADS, Action.CREATE))],
    service: Annotated[UploadService, Depends(get_upload_service)],
    file: Annotated[UploadFile | None, File()] = None,
    folder: TargetFolder = DEFAULT_FOLDER,
) -> UploadResponse:
    return service.upload_image(principal, read_upload_file(file, max_bytes=UPLOAD_MAX_BYTES), folder=folder)


@router.post("/images", response_model=BatchUploadResponse)
def upload_images(
    principal: Annotated[AuthPrincipal, Depends(require_capability(Resource.UPLOADS, Action.CREATE))],
    service: Annotated[UploadService, Depends(get_upload_service)],
    files: Annotated[list[UploadFile] | None, File()] = None,
    folder: TargetFolder = DEFAULT_FOLDER,
) -> BatchUploadResponse:
    incoming = [read_upload_file(upload, max_bytes=UPLOAD_MAX_BYTES) for upload in files or []]
    return service.upload_images(principal, incoming, folder=folder)


@router.delete("/image", response_model=MessageResponse)
def delete_image(
    payload: DeleteImageRequest,
    principal: Annotated[AuthPrincipal, Depends(require_capability(Resource.UPLOADS, Action.DELETE))],
    service: Annotated[UploadService, Depends(get_upload_service)],
) -> MessageResponse:
    return service.delete_image(principal, payload.path)


@router.get("/list", response_model=FileListResponse)
def list_images(
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.UPLOADS, Action.LIST))],
    service: Annotated[UploadService, Depends(get_upload_service)],
) -> FileListResponse:
    return service.list_images()


@router.get("/list/{folder:path}", response_model=FileListResponse)
def list_folder_images(
    folder: Annotated[str, Path(pattern=UPLOAD_FOLDER_PATTERN, max_length=200)],
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.UPLOADS, Action.LIST))],
    service: Annotated[UploadService, Depends(get_upload_service)],
) -> FileListResponse:
    return service.list_images(folder)
