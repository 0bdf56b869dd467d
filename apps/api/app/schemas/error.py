"""API error response schemas."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    code: str
    details: Any | None = None
    errors: dict[str, list[str]] | None = None
    stack: str | None = None


class ValidationErrorResponse(BaseModel):
    error: str = "Validation failed"
    code: str = "VALIDATION_ERROR"
    details: dict[str, list[str]]
    errors: dict[str, list[str]]


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ValidationErrorResponse},
}
