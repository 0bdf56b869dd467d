"""In-memory table gateway used by local development and tests."""

from __future__ import annotations

import copy
import re
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal
from uuid import uuid4

from app.repositories.base import Query, QueryResult, Row, StorageError, TableGateway, row_not_found

_MEDIA_FOLDER_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")
DEFAULT_MEDIA_FOLDERS = ("blog", "page", "event", "gallery")


@dataclass(frozen=True, slots=True)
class ForeignKey:
    column: str
    table: str
    target_column: str
    on_delete: Literal["restrict", "set_null", "cascade"] = "restrict"


@dataclass(frozen=True, slots=True)
class TableSpec:
    """Constraints mirrored from the SQL migrations."""

    primary_key: str = "id"
    generated_key: bool = True
    unique: tuple[str, ...] = ()
    not_null: tuple[str, ...] = ()
    checks: dict[str, Callable[[Any], bool]] = field(default_factory=dict)
    defaults: dict[str, Any] = field(default_factory=dict)
    foreign_keys: tuple[ForeignKey, ...] = ()
    timestamps: tuple[str, ...] = ("created_at", "updated_at")


def _one_of(*allowed: str) -> Callable[[Any], bool]:
    return lambda value: value is None or value in allowed


TABLE_SPECS: dict[str, TableSpec] = {
    "users": TableSpec(
        generated_key=False,
        unique=("email",),
        not_null=("id", "email"),
        checks={"role": _one_of("user", "admin", "moderator")},
        defaults={"role": "user", "metadata": {}, "full_name": None, "avatar_url": None, "bio": None},
    ),
    "content_common": TableSpec(unique=("key",), not_null=("key", "data")),
    "content_pages": TableSpec(
        unique=("slug",),
        not_null=("slug", "title", "data"),
        defaults={"published": False, "meta_data": None},
    ),
    "blog_posts": TableSpec(
        unique=("slug",),
        not_null=("slug", "title", "content"),
        defaults={
            "published": False,
            "published_at": None,
            "excerpt": None,
            "featured_image": None,
            "tags": [],
            "meta_data": None,
            "author_id": None,
        },
        foreign_keys=(ForeignKey("author_id", "users", "id", on_delete="set_null"),),
    ),
    "blog_categories": TableSpec(
        unique=("name", "slug"),
        not_null=("name", "slug"),
        defaults={"description": None},
    ),
    "blog_tags": TableSpec(unique=("name", "slug"), not_null=("name", "slug")),
    "custom_codes": TableSpec(
        not_null=("name", "code", "type", "position"),
        checks={
            "type": _one_of("analytics", "meta", "tracking", "verification", "custom"),
            "position": _one_of("head", "body_start", "body_end"),
        },
        defaults={"status": True, "author_name": None},
    ),
    "media_folders": TableSpec(
        primary_key="name",
        generated_key=False,
        not_null=("name",),
        checks={"name": lambda value: isinstance(value, str) and bool(_MEDIA_FOLDER_PATTERN.match(value))},
        timestamps=("created_at",),
    ),
    "media": TableSpec(
        unique=("path",),
        not_null=("title", "type", "author_name", "path", "url"),
        defaults={"description": None, "alt_text": None, "size": None, "mime_type": None},
        foreign_keys=(ForeignKey("type", "media_folders", "name", on_delete="restrict"),),
    ),
}


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _like_pattern(pattern: str) -> re.Pattern[str]:
    escaped = "".join(".*" if char == "%" else "." if char == "_" else re.escape(char) for char in pattern)
    return re.compile(f"^{escaped}$", re.IGNORECASE | re.DOTALL)


def _matches(row: Row, query: Query) -> bool:
    for column, value in query.eq.items():
        if row.get(column) != value:
            return False
    for column, values in query.in_.items():
        if row.get(column) not in values:
            return False
    for column, values in query.contains.items():
        current = row.get(column) or []
        if not all(value in current for value in values):
            return False
    for column, pattern in query.ilike.items():
        current = row.get(column)
        if current is None or not _like_pattern(pattern).match(str(current)):
            return False
    for column, value in query.gte.items():
        current = row.get(column)
        if current is None or current < value:
            return False
    for column, value in query.lte.items():
        current = row.get(column)
        if current is None or current > value:
            return False
    return True


def _project(row: Row, columns: str) -> Row:
    if columns.strip() == "*":
        return copy.deepcopy(row)
    names = [name.strip() for name in columns.split(",") if name.strip()]
    return {name: copy.deepcopy(row.get(name)) for name in names}


def _sort(rows: list[Row], order: list[tuple[str, bool]]) -> list[Row]:
    ordered = list(rows)
    # NULLs sort last ascending and first descending, as in PostgreSQL.
    for column, descending in reversed(order):
        ordered.sort(
            key=lambda row: (row.get(column) is None, row.get(column) if row.get(column) is not None else ""),
            reverse=descending,
        )
    return ordered


class InMemoryTableGateway(TableGateway):
    """Deterministic stand-in for the managed database.

    Enforces the unique, not-null, check and foreign-key constraints of ``TABLE_SPECS`` and raises
    the same PostgreSQL / PostgREST error codes. ``write_count`` counts successful mutations and
    ``call_count`` counts every call, so tests can assert that rejected requests touched nothing.
    Public calls are serialized by one re-entrant lock.
    """

    def __init__(self, specs: dict[str, TableSpec] | None = None, *, seed_media_folders: bool = True) -> None:
        self._specs = specs if specs is not None else TABLE_SPECS
        self._tables: dict[str, dict[str, Row]] = {name: {} for name in self._specs}
        self._pending_failures: list[tuple[str | None, StorageError]] = []
        self._lock = threading.RLock()
        self.write_count = 0
        self.call_count = 0
        if seed_media_folders and "media_folders" in self._specs:
            for name in DEFAULT_MEDIA_FOLDERS:
                self._tables["media_folders"][name] = {"name": name, "created_at": _now()}

    def fail_next(self, error: StorageError, *, table: str | None = None) -> None:
        """Make the next call (optionally only one against ``table``) raise ``error``."""
        with self._lock:
            self._pending_failures.append((table, error))

    def rows(self, table: str) -> list[Row]:
        with self._lock:
            return [copy.deepcopy(row) for row in self._table(table).values()]

    def _enter(self, table: str) -> None:
        self.call_count += 1
        for index, (target, error) in enumerate(self._pending_failures):
            if target is None or target == table:
                del self._pending_failures[index]
                raise error

    def _table(self, table: str) -> dict[str, Row]:
        if table not in self._tables:
            raise StorageError("42P01", f'relation "public.{table}" does not exist')
        return self._tables[table]

    def _check_row(self, table: str, row: Row, *, ignore_key: str | None) -> None:
        spec = self._specs[table]
        for column in spec.not_null:
            if row.get(column) is None:
                raise StorageError(
                    "23502",
                    f'null value in column "{column}" of relation "{table}" violates not-null constraint',
                )
        for column, predicate in spec.checks.items():
            if not predicate(row.get(column)):
                raise StorageError(
                    "23514",
                    f'new row for relation "{table}" violates check constraint "{table}_{column}_check"',
                )
        for column in (spec.primary_key, *spec.unique):
            value = row.get(column)
            if value is None:
                continue
            for key, existing in self._tables[table].items():
                if key != ignore_key and existing.get(column) == value:
                    raise StorageError(
                        "23505",
                        f'duplicate key value violates unique constraint "{table}_{column}_key"',
                        details=f"Key ({column})=({value}) already exists.",
                    )
        for foreign_key in spec.foreign_keys:
            value = row.get(foreign_key.column)
            if value is None:
                continue
            targets = self._tables[foreign_key.table].values()
            if not any(target.get(foreign_key.target_column) == value for target in targets):
                raise StorageError(
                    "23503",
                    f'insert or update on table "{table}" violates foreign key constraint '
                    f'"{table}_{foreign_key.column}_fkey"',
                    details=f'Key ({foreign_key.column})=({value}) is not present in table "{foreign_key.table}".',
                )

    def _apply_delete_rules(self, table: str, removed: list[Row]) -> None:
        for child_table, child_spec in self._specs.items():
            for foreign_key in child_spec.foreign_keys:
                if foreign_key.table != table:
                    continue
                removed_values = {row.get(foreign_key.target_column) for row in removed}
                children = [
                    (key, child)
                    for key, child in self._tables[child_table].items()
                    if child.get(foreign_key.column) in removed_values
                ]
                if not children:
                    continue
                if foreign_key.on_delete == "restrict":
                    raise StorageError(
                        "23503",
                        f'update or delete on table "{table}" violates foreign key constraint '
                        f'"{child_table}_{foreign_key.column}_fkey" on table "{child_table}"',
                    )
                for key, child in children:
                    if foreign_key.on_delete == "set_null":
                        child[foreign_key.column] = None
                    else:
                        del self._tables[child_table][key]

    def _build_row(self, table: str, payload: Row) -> Row:
        spec = self._specs[table]
        row: Row = copy.deepcopy(spec.defaults)
        row.update(copy.deepcopy(payload))
        if spec.generated_key and row.get(spec.primary_key) is None:
            row[spec.primary_key] = str(uuid4())
        now = _now()
        for column in spec.timestamps:
            row.setdefault(column, now)
        return row

    def select(self, table: str, query: Query | None = None) -> QueryResult:
        with self._lock:
            self._enter(table)
            query = query or Query()
            matched = [row for row in self._table(table).values() if _matches(row, query)]
            ordered = _sort(matched, query.order)
            end = None if query.limit is None else query.offset + query.limit
            page = ordered[query.offset:end]
            return QueryResult(rows=[_project(row, query.columns) for row in page], count=len(matched))

    def select_one(self, table: str, eq: dict[str, Any], columns: str = "*") -> Row:
        with self._lock:
            self._enter(table)
            matched = [row for row in self._table(table).values() if _matches(row, Query(eq=eq))]
            if len(matched) != 1:
                raise row_not_found(table)
            return _project(matched[0], columns)

    def insert(self, table: str, payload: Row) -> Row:
        with self._lock:
            self._enter(table)
            rows = self._table(table)
            row = self._build_row(table, payload)
            self._check_row(table, row, ignore_key=None)
            rows[str(row[self._specs[table].primary_key])] = row
            self.write_count += 1
            return copy.deepcopy(row)

    def update(self, table: str, eq: dict[str, Any], payload: Row) -> Row:
        with self._lock:
            self._enter(table)
            rows = self._table(table)
            spec = self._specs[table]
            matched = [(key, row) for key, row in rows.items() if _matches(row, Query(eq=eq))]
            if not matched:
                raise row_not_found(table)
            key, current = matched[0]
            candidate = {**current, **copy.deepcopy(payload)}
            if "updated_at" in spec.timestamps:
                candidate["updated_at"] = _now()
            self._check_row(table, candidate, ignore_key=key)
            new_key = str(candidate[spec.primary_key])
            if new_key != key:
                del rows[key]
            rows[new_key] = candidate
            self.write_count += 1
            return copy.deepcopy(candidate)

    def upsert(self, table: str, payload: Row, *, on_conflict: str) -> Row:
        with self._lock:
            self._enter(table)
            rows = self._table(table)
            spec = self._specs[table]
            existing = next(
                ((key, row) for key, row in rows.items() if row.get(on_conflict) == payload.get(on_conflict)),
                None,
            )
            if existing is None:
                row = self._build_row(table, payload)
                self._check_row(table, row, ignore_key=None)
                rows[str(row[spec.primary_key])] = row
            else:
                key, current = existing
                row = {**current, **copy.deepcopy(payload)}
                if "updated_at" in spec.timestamps:
                    row["updated_at"] = _now()
                self._check_row(table, row, ignore_key=key)
                rows[key] = row
            self.write_count += 1
            return copy.deepcopy(row)

    def delete(self, table: str, query: Query) -> list[Row]:
        with self._lock:
            self._enter(table)
            rows = self._table(table)
            removed = [(key, row) for key, row in rows.items() if _matches(row, query)]
            if not removed:
                return []
            self._apply_delete_rules(table, [row for _, row in removed])
            for key, _ in removed:
                del rows[key]
            self.write_count += 1
            return [copy.deepcopy(row) for _, row in removed]

    def ping(self) -> dict[str, Any]:
        with self._lock:
            self._enter("users")
            return {"ok": True, "tables": len(self._tables)}


__all__ = ["DEFAULT_MEDIA_FOLDERS", "ForeignKey", "InMemoryTableGateway", "TABLE_SPECS", "TableSpec"]
