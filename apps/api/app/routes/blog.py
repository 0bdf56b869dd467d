"""Blog post routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from app.core.permissions import Action, Resource
from app.routes.dependencies import get_blog_service, get_optional_principal, require_capability
from app.schemas.auth import AuthPrincipal
from app.schemas.blog import BlogPostListResponse, BlogPostRecord, CreateBlogPostRequest, UpdateBlogPostRequest
from app.schemas.common import SLUG_PATTERN, DataResponse, MessageResponse
from app.schemas.error import ERROR_RESPONSES
from app.services.blog import BlogService

router = APIRouter(prefix="/blog", tags=["Blog"], responses=ERROR_RESPONSES)

PostSlug = Annotated[str, Path(pattern=SLUG_PATTERN, min_length=1, max_length=200)]


@router.get("", response_model=BlogPostListResponse)
def list_posts(
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
    service: Annotated[BlogService, Depends(get_blog_service)],
    published: Annotated[bool | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> BlogPostListResponse:
    return service.list_posts(
        published=published,
        limit=limit,
        offset=offset,
        authenticated=principal is not None,
    )


@router.get("/tag/{tag}", response_model=DataResponse[list[BlogPostRecord]])
def list_posts_by_tag(
    tag: Annotated[str, Path(min_length=1, max_length=100)],
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
    service: Annotated[BlogService, Depends(get_blog_service)],
) -> DataResponse[list[BlogPostRecord]]:
    return service.list_by_tag(tag, authenticated=principal is not None)


@router.get("/{slug}", response_model=DataResponse[BlogPostRecord])
def get_post(
    slug: PostSlug,
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
    service: Annotated[BlogService, Depends(get_blog_service)],
) -> DataResponse[BlogPostRecord]:
    return service.get_post(slug, authenticated=principal is not None)


@router.post("", response_model=DataResponse[BlogPostRecord], status_code=status.HTTP_201_CREATED)
def create_post(
    payload: CreateBlogPostRequest,
    principal: Annotated[AuthPrincipal, Depends(require_capability(Resource.BLOG_POSTS, Action.CREATE))],
    service: Annotated[BlogService, Depends(get_blog_service)],
) -> DataResponse[BlogPostRecord]:
    return service.create_post(principal, payload)


@router.put("/{slug}", response_model=DataResponse[BlogPostRecord])
def update_post(
    slug: PostSlug,
    payload: UpdateBlogPostRequest,
    principal: Annotated[AuthPrincipal, Depends(require_capability(Resource.BLOG_POSTS, Action.UPDATE))],
    service: Annotated[BlogService, Depends(get_blog_service)],
) -> DataResponse[BlogPostRecord]:
    return service.update_post(principal, slug, payload)


@router.delete("/{slug}", response_model=MessageResponse)
def delete_post(
    slug: PostSlug,
    principal: Annotated[AuthPrincipal, Depends(require_capability(Resource.BLOG_POSTS, Action.DELETE))],
    service: Annotated[BlogService, Depends(get_blog_service)],
) -> MessageResponse:
    return service.delete_post(principal, slug)
