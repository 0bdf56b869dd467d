"""Media library routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status

from app.core.permissions import Action, Resource
from app.routes.dependencies import get_media_service, read_upload_file, require_capability
from app.schemas.auth import AuthPrincipal
from app.schemas.error import ERROR_RESPONSES
from app.schemas.media import (
    BulkDeletedMediaResponse,
    BulkDeleteMediaRequest,
    CreateFolderRequest,
    DeletedFolderResponse,
    DeletedMediaResponse,
    FolderListResponse,
    FolderMediaResponse,
    FolderResponse,
    MediaListQuery,
    MediaListResponse,
    MediaResponse,
    MoveMediaRequest,
    UpdateMediaRequest,
)
from app.services.media import MediaService

router = APIRouter(prefix="/media", tags=["Media"], responses=ERROR_RESPONSES)

MEDIA_MAX_BYTES = 2 * 1024 * 1024

FolderName = Annotated[str, Path(min_length=1, max_length=100)]
MediaId = Annotated[str, Path(min_length=1, max_length=100)]


@router.get("/folders", response_model=FolderListResponse)
def list_folders(service: Annotated[MediaService, Depends(get_media_service)]) -> FolderListResponse:
    return service.list_folders()


@router.post("/folders", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
def create_folder(
    payload: CreateFolderRequest,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.MEDIA_FOLDERS, Action.CREATE))],
    service: Annotated[MediaService, Depends(get_media_service)],
) -> FolderResponse:
    return service.create_folder(payload.name)


@router.delete("/folders/{name}", response_model=DeletedFolderResponse)
def delete_folder(
    name: FolderName,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.MEDIA_FOLDERS, Action.DELETE))],
    service: Annotated[MediaService, Depends(get_media_service)],
) -> DeletedFolderResponse:
    return service.delete_folder(name)


@router.get("/folders/{name}/images", response_model=FolderMediaResponse)
def list_folder_media(
    name: FolderName,
    service: Annotated[MediaService, Depends(get_media_service)],
) -> FolderMediaResponse:
    return service.folder_media(name)


@router.post("/upload", response_model=MediaResponse, status_code=status.HTTP_201_CREATED)
def upload_media(
    title: Annotated[str, Form(min_length=1, max_length=200)],
    media_type: Annotated[str, Form(alias="type", min_length=1, max_length=100)],
    principal: Annotated[AuthPrincipal, Depends(require_capability(Resource.MEDIA, Action.CREATE))],
    service: Annotated[MediaService, Depends(get_media_service)],
    file: Annotated[UploadFile | None, File()] = None,
    description: Annotated[str | None, Form(max_length=1000)] = None,
    alt_text: Annotated[str | None, Form(max_length=500)] = None,
) -> MediaResponse:
    return service.upload(
        principal,
        read_upload_file(file, max_bytes=MEDIA_MAX_BYTES),
        title=title,
        folder=media_type,
        description=description,
        alt_text=alt_text,
    )


@router.get("", response_model=MediaListResponse)
def list_media(
    filters: Annotated[MediaListQuery, Query()],
    service: Annotated[MediaService, Depends(get_media_service)],
) -> MediaListResponse:
    return service.list_media(filters)


@router.delete("", response_model=BulkDeletedMediaResponse)
def delete_media_bulk(
    payload: BulkDeleteMediaRequest,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.MEDIA, Action.DELETE))],
    service: Annotated[MediaService, Depends(get_media_service)],
) -> BulkDeletedMediaResponse:
    return service.delete_media_bulk(payload.ids)


@router.get("/{media_id}", response_model=MediaResponse)
def get_media(
    media_id: MediaId,
    service: Annotated[MediaService, Depends(get_media_service)],
) -> MediaResponse:
    return service.get_media(media_id)


@router.put("/{media_id}", response_model=MediaResponse)
def update_media(
    media_id: MediaId,
    payload: UpdateMediaRequest,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.MEDIA, Action.UPDATE))],
    service: Annotated[MediaService, Depends(get_media_service)],
) -> MediaResponse:
    return service.update_media(media_id, payload)


@router.patch("/{media_id}/move", response_model=MediaResponse)
def move_media(
    media_id: MediaId,
    payload: MoveMediaRequest,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.MEDIA, Action.UPDATE))],
    service: Annotated[MediaService, Depends(get_media_service)],
) -> MediaResponse:
    return service.move_media(media_id, payload.type)


@router.delete("/{media_id}", response_model=DeletedMediaResponse)
def delete_media(
    media_id: MediaId,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.MEDIA, Action.DELETE))],
    service: Annotated[MediaService, Depends(get_media_service)],
) -> DeletedMediaResponse:
    return service.delete_media(media_id)
