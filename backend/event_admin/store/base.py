"""Table-level store interface.

The store exposes per-table select / insert / update / delete with equality
and membership filters. Each call is atomic on its own; nothing spans tables.
Rows travel as plain dicts keyed by column name.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence


class StoreError(Exception):
    """Raised when a store call fails (network, constraint, validation)."""

    def __init__(self, message: str, table: Optional[str] = None):
        super().__init__(message)
        self.table = table


@dataclass(frozen=True)
class Filter:
    column: str
    op: str  # "eq" | "in"
    value: Any


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def in_(column: str, values: Iterable[Any]) -> Filter:
    return Filter(column, "in", list(values))


class Store(ABC):
    """Generic per-table client. Filters passed together are AND-ed."""

    @abstractmethod
    def select(self, table: str, filters: Sequence[Filter] = ()) -> list[dict[str, Any]]:
        """Return every row of ``table`` matching ``filters``."""

    @abstractmethod
    def insert(self, table: str, rows: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        """Insert ``rows`` in one call; return the stored rows in insertion order."""

    @abstractmethod
    def update(self, table: str, patch: dict[str, Any], filters: Sequence[Filter]) -> list[dict[str, Any]]:
        """Apply ``patch`` to matching rows and return them."""

    @abstractmethod
    def delete(self, table: str, filters: Sequence[Filter]) -> int:
        """Delete matching rows and return how many were removed."""
