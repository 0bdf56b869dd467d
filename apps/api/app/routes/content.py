"""Page and common content routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.core.permissions import Action, Resource
from app.routes.dependencies import get_content_service, get_optional_principal, require_capability
from app.schemas.auth import AuthPrincipal
from app.schemas.common import CONTENT_KEY_PATTERN, SLUG_PATTERN, DataResponse, MessageResponse
from app.schemas.content import CommonContentRecord, PageRecord, UpsertCommonContentRequest, UpsertPageRequest
from app.schemas.error import ERROR_RESPONSES
from app.services.content import ContentService

router = APIRouter(prefix="/content", tags=["Content"], responses=ERROR_RESPONSES)

ContentKey = Annotated[str, Path(pattern=CONTENT_KEY_PATTERN, min_length=1, max_length=100)]
PageSlug = Annotated[str, Path(pattern=SLUG_PATTERN, min_length=1, max_length=200)]


@router.get("/common", response_model=DataResponse[list[CommonContentRecord]])
def list_common_content(
    service: Annotated[ContentService, Depends(get_content_service)],
) -> DataResponse[list[CommonContentRecord]]:
    return service.list_common()


@router.get("/common/{key}", response_model=DataResponse[CommonContentRecord])
def get_common_content(
    key: ContentKey,
    service: Annotated[ContentService, Depends(get_content_service)],
) -> DataResponse[CommonContentRecord]:
    return service.get_common(key)


@router.put("/common/{key}", response_model=DataResponse[CommonContentRecord])
def upsert_common_content(
    key: ContentKey,
    payload: UpsertCommonContentRequest,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.COMMON_CONTENT, Action.UPDATE))],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> DataResponse[CommonContentRecord]:
    return service.upsert_common(key, payload)


@router.delete("/common/{key}", response_model=MessageResponse)
def delete_common_content(
    key: ContentKey,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.COMMON_CONTENT, Action.DELETE))],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> MessageResponse:
    return service.delete_common(key)


@router.get("/pages", response_model=DataResponse[list[PageRecord]])
def list_pages(
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
    service: Annotated[ContentService, Depends(get_content_service)],
    published: Annotated[bool | None, Query()] = None,
) -> DataResponse[list[PageRecord]]:
    return service.list_pages(published_only=principal is None or published is True)


@router.get("/pages/{slug}", response_model=DataResponse[PageRecord])
def get_page(
    slug: PageSlug,
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> DataResponse[PageRecord]:
    return service.get_page(slug, include_unpublished=principal is not None)


@router.put("/pages/{slug}", response_model=DataResponse[PageRecord])
def upsert_page(
    slug: PageSlug,
    payload: UpsertPageRequest,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.PAGES, Action.UPDATE))],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> DataResponse[PageRecord]:
    return service.upsert_page(slug, payload)


@router.delete("/pages/{slug}", response_model=MessageResponse)
def delete_page(
    slug: PageSlug,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.PAGES, Action.DELETE))],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> MessageResponse:
    return service.delete_page(slug)
