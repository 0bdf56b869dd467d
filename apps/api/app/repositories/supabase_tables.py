"""Supabase (PostgREST) table gateway."""

from __future__ import annotations

import logging
from typing import Any

from supabase import Client, PostgrestAPIError

from app.repositories.base import Query, QueryResult, Row, StorageError, TableGateway, row_not_found

logger = logging.getLogger(__name__)

# PostgREST rejects unbounded ranges; mirrors the default max-rows cap.
_MAX_ROWS = 1000


def _storage_error(exc: PostgrestAPIError) -> StorageError:
    return StorageError(
        code=str(exc.code or "DB_ERROR"),
        message=str(exc.message or "Database operation failed"),
        details=exc.details,
        hint=exc.hint,
    )


def _apply_filters(builder: Any, query: Query) -> Any:
    for column, value in query.eq.items():
        builder = builder.eq(column, value)
    for column, values in query.in_.items():
        builder = builder.in_(column, values)
    for column, values in query.contains.items():
        builder = builder.contains(column, values)
    for column, pattern in query.ilike.items():
        builder = builder.ilike(column, pattern)
    for column, value in query.gte.items():
        builder = builder.gte(column, value)
    for column, value in query.lte.items():
        builder = builder.lte(column, value)
    return builder


class SupabaseTableGateway(TableGateway):
    """Runs row operations through ``supabase-py``'s PostgREST builder.

    ``PostgrestAPIError`` is normalized into ``StorageError`` so nothing above the
    repository layer depends on the SDK.
    """

    def __init__(self, client: Client) -> None:
        self._client = client

    def _execute(self, table: str, operation: str, builder: Any) -> Any:
        try:
            return builder.execute()
        except PostgrestAPIError as exc:
            logger.debug("db.error table=%s operation=%s code=%s", table, operation, exc.code)
            raise _storage_error(exc) from exc

    def select(self, table: str, query: Query | None = None) -> QueryResult:
        query = query or Query()
        builder = _apply_filters(self._client.table(table).select(query.columns, count="exact"), query)
        for column, descending in query.order:
            builder = builder.order(column, desc=descending)
        limit = query.limit if query.limit is not None else _MAX_ROWS
        builder = builder.range(query.offset, query.offset + limit - 1)
        response = self._execute(table, "select", builder)
        rows = list(response.data or [])
        count = response.count if response.count is not None else len(rows)
        return QueryResult(rows=rows, count=count)

    def select_one(self, table: str, eq: dict[str, Any], columns: str = "*") -> Row:
        builder = _apply_filters(self._client.table(table).select(columns), Query(eq=eq)).single()
        response = self._execute(table, "select_one", builder)
        if not response.data:
            raise row_not_found(table)
        return response.data

    def insert(self, table: str, payload: Row) -> Row:
        response = self._execute(table, "insert", self._client.table(table).insert(payload))
        if not response.data:
            raise StorageError("DB_ERROR", f"Insert into {table} returned no row")
        return response.data[0]

    def update(self, table: str, eq: dict[str, Any], payload: Row) -> Row:
        builder = _apply_filters(self._client.table(table).update(payload), Query(eq=eq))
        response = self._execute(table, "update", builder)
        if not response.data:
            raise row_not_found(table)
        return response.data[0]

    def upsert(self, table: str, payload: Row, *, on_conflict: str) -> Row:
        builder = self._client.table(table).upsert(payload, on_conflict=on_conflict)
        response = self._execute(table, "upsert", builder)
        if not response.data:
            raise StorageError("DB_ERROR", f"Upsert into {table} returned no row")
        return response.data[0]

    def delete(self, table: str, query: Query) -> list[Row]:
        builder = _apply_filters(self._client.table(table).delete(), query)
        response = self._execute(table, "delete", builder)
        return list(response.data or [])

    def ping(self) -> dict[str, Any]:
        try:
            self._client.table("users").select("id").limit(1).execute()
        except PostgrestAPIError as exc:
            # Permission errors still prove the REST API answered.
            if exc.code in {"PGRST301", "42501", "42P01"} or "permission denied" in str(exc.message or ""):
                return {"ok": True, "note": "API reachable"}
            raise _storage_error(exc) from exc
        return {"ok": True}


__all__ = ["SupabaseTableGateway"]
