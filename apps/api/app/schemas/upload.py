"""File upload API schemas."""

from pydantic import BaseModel, Field

from app.schemas.common import DataResponse

UPLOAD_FOLDER_PATTERN = r"^[a-zA-Z0-9_-]+(/[a-zA-Z0-9_-]+)*$"


class UploadedFile(BaseModel):
    path: str
    url: str
    size: int
    mimetype: str
    original_name: str | None = None


class FailedUpload(BaseModel):
    filename: str
    error: str


class BatchUploadResult(BaseModel):
    uploaded: list[UploadedFile]
    errors: list[FailedUpload] | None = None


class DeleteImageRequest(BaseModel):
    path: str = Field(min_length=1, max_length=1024)


class ListedFile(BaseModel):
    name: str
    url: str
    size: int | None = None
    content_type: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


UploadResponse = DataResponse[UploadedFile]
BatchUploadResponse = DataResponse[BatchUploadResult]
FileListResponse = DataResponse[list[ListedFile]]
