"""Custom code snippet routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.core.permissions import Action, Resource
from app.routes.dependencies import get_custom_code_service, require_capability
from app.schemas.auth import AuthPrincipal
from app.schemas.custom_code import (
    ActiveCustomCodesResponse,
    CodeType,
    CreateCustomCodeRequest,
    CustomCodeListResponse,
    CustomCodeResponse,
    DeletedCustomCodeResponse,
    UpdateCustomCodeRequest,
)
from app.schemas.error import ERROR_RESPONSES
from app.services.custom_codes import CustomCodeService

router = APIRouter(prefix="/custom-codes", tags=["Custom Codes"], responses=ERROR_RESPONSES)

CodeId = Annotated[str, Path(min_length=1, max_length=100)]


@router.get("", response_model=CustomCodeListResponse)
def list_codes(service: Annotated[CustomCodeService, Depends(get_custom_code_service)]) -> CustomCodeListResponse:
    return service.list_codes()


@router.get("/active", response_model=ActiveCustomCodesResponse)
def list_active_codes(
    service: Annotated[CustomCodeService, Depends(get_custom_code_service)],
) -> ActiveCustomCodesResponse:
    return service.list_active()


@router.get("/type/{code_type}", response_model=CustomCodeListResponse)
def list_codes_by_type(
    code_type: Annotated[CodeType, Path()],
    service: Annotated[CustomCodeService, Depends(get_custom_code_service)],
) -> CustomCodeListResponse:
    return service.list_by_type(code_type)


@router.get("/{code_id}", response_model=CustomCodeResponse)
def get_code(
    code_id: CodeId,
    service: Annotated[CustomCodeService, Depends(get_custom_code_service)],
) -> CustomCodeResponse:
    return service.get_code(code_id)


@router.post("", response_model=CustomCodeResponse, status_code=status.HTTP_201_CREATED)
def create_code(
    payload: CreateCustomCodeRequest,
    principal: Annotated[AuthPrincipal, Depends(require_capability(Resource.CUSTOM_CODES, Action.CREATE))],
    service: Annotated[CustomCodeService, Depends(get_custom_code_service)],
) -> CustomCodeResponse:
    return service.create_code(principal, payload)


@router.put("/{code_id}", response_model=CustomCodeResponse)
def update_code(
    code_id: CodeId,
    payload: UpdateCustomCodeRequest,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.CUSTOM_CODES, Action.UPDATE))],
    service: Annotated[CustomCodeService, Depends(get_custom_code_service)],
) -> CustomCodeResponse:
    return service.update_code(code_id, payload)


@router.patch("/{code_id}/toggle", response_model=CustomCodeResponse)
def toggle_code(
    code_id: CodeId,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.CUSTOM_CODES, Action.UPDATE))],
    service: Annotated[CustomCodeService, Depends(get_custom_code_service)],
) -> CustomCodeResponse:
    return service.toggle_code(code_id)


@router.delete("/{code_id}", response_model=DeletedCustomCodeResponse)
def delete_code(
    code_id: CodeId,
    principal: Annotated[AuthPrincipal, Depends(require_capability(Resource.CUSTOM_CODES, Action.DELETE))],
    service: Annotated[CustomCodeService, Depends(get_custom_code_service)],
) -> DeletedCustomCodeResponse:
    return service.delete_code(principal, code_id)
