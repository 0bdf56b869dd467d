"""Blog post service layer."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from app.core.logging import safe_log_identifier
from app.core.permissions import Action, Resource, capability_for, ensure_can_modify
from app.errors import not_found
from app.repositories.base import Query, StorageError, TableGateway
from app.schemas.auth import AuthPrincipal
from app.schemas.blog import BlogPostListResponse, BlogPostRecord, CreateBlogPostRequest, UpdateBlogPostRequest
from app.schemas.common import DataResponse, MessageResponse, Pagination
from app.services.common import duplicate_as_conflict, fetch_one, update_one

logger = logging.getLogger(__name__)

_POSTS = "blog_posts"
_NOT_FOUND = "Blog post not found"
_DUPLICATE_SLUG = "A blog post with this slug already exists"
_LIST_ORDER = [("published_at", True), ("created_at", True)]


def _now() -> str:
    return datetime.now(UTC).isoformat()


class BlogService:
    def __init__(self, tables: TableGateway) -> None:
        self._tables = tables

    def list_posts(
        self,
        *,
        published: bool | None,
        limit: int,
        offset: int,
        authenticated: bool,
    ) -> BlogPostListResponse:
        query = Query(order=list(_LIST_ORDER), offset=offset, limit=limit)
        if not authenticated or published is True:
            query.eq["published"] = True

        result = self._tables.select(_POSTS, query)
        return BlogPostListResponse(
            data=[BlogPostRecord.model_validate(row) for row in result.rows],
            pagination=Pagination(total=result.count, limit=limit, offset=offset),
        )

    def list_by_tag(self, tag: str, *, authenticated: bool) -> DataResponse[list[BlogPostRecord]]:
        query = Query(contains={"tags": [tag]}, order=list(_LIST_ORDER))
        if not authenticated:
            query.eq["published"] = True
        result = self._tables.select(_POSTS, query)
        return DataResponse(data=[BlogPostRecord.model_validate(row) for row in result.rows])

    def get_post(self, slug: str, *, authenticated: bool) -> DataResponse[BlogPostRecord]:
        row = fetch_one(self._tables, _POSTS, {"slug": slug}, not_found_message=_NOT_FOUND)
        if not row.get("published") and not authenticated:
            raise not_found(_NOT_FOUND)
        return DataResponse(data=BlogPostRecord.model_validate(row))

    def create_post(self, principal: AuthPrincipal, payload: CreateBlogPostRequest) -> DataResponse[BlogPostRecord]:
        record = payload.model_dump(mode="json")
        record["author_id"] = principal.user_id
        record["published_at"] = _now() if payload.published else None
        try:
            row = self._tables.insert(_POSTS, record)
        except StorageError as exc:
            raise duplicate_as_conflict(exc, _DUPLICATE_SLUG) or exc

        logger.info(
            "blog.post_created slug=%s author_id=%s published=%s",
            row["slug"],
            safe_log_identifier(principal.user_id, prefix="uid"),
            row.get("published"),
        )
        return DataResponse(message="Blog post created successfully", data=BlogPostRecord.model_validate(row))

    def update_post(
        self,
        principal: AuthPrincipal,
        slug: str,
        payload: UpdateBlogPostRequest,
    ) -> DataResponse[BlogPostRecord]:
        existing = fetch_one(self._tables, _POSTS, {"slug": slug}, not_found_message=_NOT_FOUND)
        ensure_can_modify(principal, existing, capability_for(Resource.BLOG_POSTS, Action.UPDATE))

        changes = payload.changes()
        if "published" in changes:
            if changes["published"] and not existing.get("published"):
                changes["published_at"] = _now()
            elif changes["published"] is False:
                changes["published_at"] = None

        row = update_one(self._tables, _POSTS, {"slug": slug}, changes, not_found_message=_NOT_FOUND)
        logger.info(
            "blog.post_updated slug=%s updated_by=%s",
            slug,
            safe_log_identifier(principal.user_id, prefix="uid"),
        )
        return DataResponse(message="Blog post updated successfully", data=BlogPostRecord.model_validate(row))

    def delete_post(self, principal: AuthPrincipal, slug: str) -> MessageResponse:
        existing = fetch_one(self._tables, _POSTS, {"slug": slug}, not_found_message=_NOT_FOUND)
        ensure_can_modify(principal, existing, capability_for(Resource.BLOG_POSTS, Action.DELETE))

        if not self._tables.delete(_POSTS, Query(eq={"slug": slug})):
            raise not_found(_NOT_FOUND)
        logger.info(
            "blog.post_deleted slug=%s deleted_by=%s",
            slug,
            safe_log_identifier(principal.user_id, prefix="uid"),
        )
        return MessageResponse(message="Blog post deleted successfully")


__all__ = ["BlogService"]
