"""Page and common content service layer."""

from __future__ import annotations

import logging

from app.errors import not_found
from app.repositories.base import Query, TableGateway
from app.schemas.common import DataResponse, MessageResponse
from app.schemas.content import CommonContentRecord, PageRecord, UpsertCommonContentRequest, UpsertPageRequest
from app.services.common import fetch_one

logger = logging.getLogger(__name__)

_COMMON = "content_common"
_PAGES = "content_pages"


class ContentService:
    def __init__(self, tables: TableGateway) -> None:
        self._tables = tables

    def list_common(self) -> DataResponse[list[CommonContentRecord]]:
        result = self._tables.select(_COMMON, Query(order=[("key", False)]))
        return DataResponse(data=[CommonContentRecord.model_validate(row) for row in result.rows])

    def get_common(self, key: str) -> DataResponse[CommonContentRecord]:
        row = fetch_one(self._tables, _COMMON, {"key": key}, not_found_message="Content not found")
        return DataResponse(data=CommonContentRecord.model_validate(row))

    def upsert_common(self, key: str, payload: UpsertCommonContentRequest) -> DataResponse[CommonContentRecord]:
        row = self._tables.upsert(_COMMON, {"key": key, "data": payload.data}, on_conflict="key")
        logger.info("content.common_saved key=%s", key)
        return DataResponse(message="Content saved successfully", data=CommonContentRecord.model_validate(row))

    def delete_common(self, key: str) -> MessageResponse:
        if not self._tables.delete(_COMMON, Query(eq={"key": key})):
            raise not_found("Content not found")
        logger.info("content.common_deleted key=%s", key)
        return MessageResponse(message="Content deleted successfully")

    def list_pages(self, *, published_only: bool) -> DataResponse[list[PageRecord]]:
        query = Query(order=[("slug", False)])
        if published_only:
            query.eq["published"] = True
        result = self._tables.select(_PAGES, query)
        return DataResponse(data=[PageRecord.model_validate(row) for row in result.rows])

    def get_page(self, slug: str, *, include_unpublished: bool) -> DataResponse[PageRecord]:
        row = fetch_one(self._tables, _PAGES, {"slug": slug}, not_found_message="Page not found")
        # Drafts are indistinguishable from missing pages for anonymous callers.
        if not row.get("published") and not include_unpublished:
            raise not_found("Page not found")
        return DataResponse(data=PageRecord.model_validate(row))

    def upsert_page(self, slug: str, payload: UpsertPageRequest) -> DataResponse[PageRecord]:
        row = self._tables.upsert(_PAGES, {"slug": slug, **payload.model_dump(mode="json")}, on_conflict="slug")
        logger.info("content.page_saved slug=%s published=%s", slug, row.get("published"))
        return DataResponse(message="Page saved successfully", data=PageRecord.model_validate(row))

    def delete_page(self, slug: str) -> MessageResponse:
        if not self._tables.delete(_PAGES, Query(eq={"slug": slug})):
            raise not_found("Page not found")
        logger.info("content.page_deleted slug=%s", slug)
        return MessageResponse(message="Page deleted successfully")


__all__ = ["ContentService"]
