"""Row storage port shared by the Supabase and in-memory gateways."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

Row = dict[str, Any]

ROW_NOT_FOUND = "PGRST116"


class StorageError(Exception):
    """Failure reported by the managed storage layer, normalized to ``code``/``message``."""

    def __init__(self, code: str, message: str, details: str | None = None, hint: str | None = None) -> None:
        self.code = code
        self.message = message
        self.details = details
        self.hint = hint
        super().__init__(message)

    @property
    def is_row_not_found(self) -> bool:
        return self.code == ROW_NOT_FOUND

    def __repr__(self) -> str:
        return f"StorageError(code={self.code!r}, message={self.message!r})"


def row_not_found(table: str) -> StorageError:
    return StorageError(
        ROW_NOT_FOUND,
        "JSON object requested, multiple (or no) rows returned",
        details=f"The result contains 0 rows ({table})",
    )


@dataclass(slots=True)
class Query:
    """Declarative filter set; every populated field narrows the selection."""

    eq: dict[str, Any] = field(default_factory=dict)
    in_: dict[str, list[Any]] = field(default_factory=dict)
    contains: dict[str, list[Any]] = field(default_factory=dict)
    ilike: dict[str, str] = field(default_factory=dict)
    gte: dict[str, Any] = field(default_factory=dict)
    lte: dict[str, Any] = field(default_factory=dict)
    order: list[tuple[str, bool]] = field(default_factory=list)
    offset: int = 0
    limit: int | None = None
    columns: str = "*"


@dataclass(slots=True)
class QueryResult:
    rows: list[Row]
    count: int


class TableGateway(ABC):
    """Provider-neutral row operations against named tables.

    Every method raises ``StorageError`` on failure. ``select_one`` and ``update`` raise
    the row-not-found code when nothing matches.
    """

    @abstractmethod
    def select(self, table: str, query: Query | None = None) -> QueryResult:
        """Return matching rows and the total count before pagination."""

    @abstractmethod
    def select_one(self, table: str, eq: dict[str, Any], columns: str = "*") -> Row:
        """Return exactly one row."""

    @abstractmethod
    def insert(self, table: str, payload: Row) -> Row:
        """Insert a row and return it with server-assigned fields."""

    @abstractmethod
    def update(self, table: str, eq: dict[str, Any], payload: Row) -> Row:
        """Update the single matching row and return it."""

    @abstractmethod
    def upsert(self, table: str, payload: Row, *, on_conflict: str) -> Row:
        """Insert, or update the row whose ``on_conflict`` column matches."""

    @abstractmethod
    def delete(self, table: str, query: Query) -> list[Row]:
        """Delete matching rows and return them."""

    @abstractmethod
    def ping(self) -> dict[str, Any]:
        """Return a readiness report; raise ``StorageError`` when unreachable."""


__all__ = [
    "Query",
    "QueryResult",
    "ROW_NOT_FOUND",
    "Row",
    "StorageError",
    "TableGateway",
    "row_not_found",
]
