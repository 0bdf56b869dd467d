"""Blog category and tag routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.core.permissions import Action, Resource
from app.routes.dependencies import get_category_service, get_tag_service, require_capability
from app.schemas.auth import AuthPrincipal
from app.schemas.common import SLUG_PATTERN
from app.schemas.error import ERROR_RESPONSES
from app.schemas.taxonomy import (
    CategoryListResponse,
    CategoryResponse,
    CreateCategoryRequest,
    CreateTagRequest,
    TagListResponse,
    TagResponse,
    UpdateCategoryRequest,
    UpdateTagRequest,
)
from app.services.taxonomy import TaxonomyService

categories_router = APIRouter(prefix="/categories", tags=["Categories"], responses=ERROR_RESPONSES)
tags_router = APIRouter(prefix="/tags", tags=["Tags"], responses=ERROR_RESPONSES)

TaxonomySlug = Annotated[str, Path(pattern=SLUG_PATTERN, min_length=1, max_length=200)]


@categories_router.get("", response_model=CategoryListResponse)
def list_categories(service: Annotated[TaxonomyService, Depends(get_category_service)]) -> CategoryListResponse:
    categories = service.list()
    return CategoryListResponse(categories=categories, total=len(categories))


@categories_router.get("/{slug}", response_model=CategoryResponse)
def get_category(
    slug: TaxonomySlug,
    service: Annotated[TaxonomyService, Depends(get_category_service)],
) -> CategoryResponse:
    return CategoryResponse(category=service.get(slug))


@categories_router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CreateCategoryRequest,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.CATEGORIES, Action.CREATE))],
    service: Annotated[TaxonomyService, Depends(get_category_service)],
) -> CategoryResponse:
    return CategoryResponse(message="Category created successfully", category=service.create(payload))


@categories_router.put("/{slug}", response_model=CategoryResponse)
def update_category(
    slug: TaxonomySlug,
    payload: UpdateCategoryRequest,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.CATEGORIES, Action.UPDATE))],
    service: Annotated[TaxonomyService, Depends(get_category_service)],
) -> CategoryResponse:
    return CategoryResponse(message="Category updated successfully", category=service.update(slug, payload))


@categories_router.delete("/{slug}", response_model=CategoryResponse)
def delete_category(
    slug: TaxonomySlug,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.CATEGORIES, Action.DELETE))],
    service: Annotated[TaxonomyService, Depends(get_category_service)],
) -> CategoryResponse:
    return CategoryResponse(message="Category deleted successfully", category=service.delete(slug))


@tags_router.get("", response_model=TagListResponse)
def list_tags(service: Annotated[TaxonomyService, Depends(get_tag_service)]) -> TagListResponse:
    tags = service.list()
    return TagListResponse(tags=tags, total=len(tags))


@tags_router.get("/{slug}", response_model=TagResponse)
def get_tag(
    slug: TaxonomySlug,
    service: Annotated[TaxonomyService, Depends(get_tag_service)],
) -> TagResponse:
    return TagResponse(tag=service.get(slug))


@tags_router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(
    payload: CreateTagRequest,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.TAGS, Action.CREATE))],
    service: Annotated[TaxonomyService, Depends(get_tag_service)],
) -> TagResponse:
    return TagResponse(message="Tag created successfully", tag=service.create(payload))


@tags_router.put("/{slug}", response_model=TagResponse)
def update_tag(
    slug: TaxonomySlug,
    payload: UpdateTagRequest,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.TAGS, Action.UPDATE))],
    service: Annotated[TaxonomyService, Depends(get_tag_service)],
) -> TagResponse:
    return TagResponse(message="Tag updated successfully", tag=service.update(slug, payload))


@tags_router.delete("/{slug}", response_model=TagResponse)
def delete_tag(
    slug: TaxonomySlug,
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.TAGS, Action.DELETE))],
    service: Annotated[TaxonomyService, Depends(get_tag_service)],
) -> TagResponse:
    return TagResponse(message="Tag deleted successfully", tag=service.delete(slug))
