"""Blog category and tag service layer.

Categories and tags share one table shape (unique ``name`` and ``slug``), so a single
service class is parameterized by ``TaxonomyKind``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from app.errors import not_found
from app.repositories.base import Query, StorageError, TableGateway
from app.schemas.common import Record
from app.schemas.taxonomy import (
    CategoryRecord,
    CreateCategoryRequest,
    CreateTagRequest,
    TagRecord,
    UpdateCategoryRequest,
    UpdateTagRequest,
)
from app.services.common import duplicate_as_conflict, fetch_one, update_one

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Record)


@dataclass(frozen=True, slots=True)
class TaxonomyKind(Generic[RecordT]):
    table: str
    label: str
    record_model: type[RecordT]

    @property
    def not_found_message(self) -> str:
        return f"{self.label} not found"

    @property
    def duplicate_message(self) -> str:
        return f"{self.label} with this name or slug already exists"


CATEGORIES = TaxonomyKind("blog_categories", "Category", CategoryRecord)
TAGS = TaxonomyKind("blog_tags", "Tag", TagRecord)


class TaxonomyService(Generic[RecordT]):
    def __init__(self, tables: TableGateway, kind: TaxonomyKind[RecordT]) -> None:
        self._tables = tables
        self._kind = kind

    def list(self) -> list[RecordT]:
        result = self._tables.select(self._kind.table, Query(order=[("name", False)]))
        return [self._kind.record_model.model_validate(row) for row in result.rows]

    def get(self, slug: str) -> RecordT:
        row = fetch_one(self._tables, self._kind.table, {"slug": slug}, not_found_message=self._kind.not_found_message)
        return self._kind.record_model.model_validate(row)

    def create(self, payload: CreateCategoryRequest | CreateTagRequest) -> RecordT:
        try:
            row = self._tables.insert(self._kind.table, payload.model_dump(mode="json"))
        except StorageError as exc:
            raise duplicate_as_conflict(exc, self._kind.duplicate_message) or exc
        logger.info("taxonomy.created table=%s slug=%s", self._kind.table, row["slug"])
        return self._kind.record_model.model_validate(row)

    def update(self, slug: str, payload: UpdateCategoryRequest | UpdateTagRequest) -> RecordT:
        try:
            row = update_one(
                self._tables,
                self._kind.table,
                {"slug": slug},
                payload.changes(),
                not_found_message=self._kind.not_found_message,
            )
        except StorageError as exc:
            raise duplicate_as_conflict(exc, self._kind.duplicate_message) or exc
        logger.info("taxonomy.updated table=%s slug=%s", self._kind.table, slug)
        return self._kind.record_model.model_validate(row)

    def delete(self, slug: str) -> RecordT:
        removed = self._tables.delete(self._kind.table, Query(eq={"slug": slug}))
        if not removed:
            raise not_found(self._kind.not_found_message)
        logger.info("taxonomy.deleted table=%s slug=%s", self._kind.table, slug)
        return self._kind.record_model.model_validate(removed[0])


__all__ = ["CATEGORIES", "TAGS", "TaxonomyKind", "TaxonomyService"]
