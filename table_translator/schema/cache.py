"""
Run-scoped column metadata cache.

One `ColumnCache` is created per run and handed to every component that needs
catalog facts. It is also the allow-list for SQL construction: a table or
column that is not in the cache has not been verified against the catalog and
must not be interpolated into a statement.
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Set, Tuple

from table_translator.domain.models import ColumnInfo
from table_translator.errors import SchemaError


class ColumnCache:
    def __init__(self) -> None:
        self._tables: Set[str] = set()
        self._columns: Dict[Tuple[str, str], ColumnInfo] = {}

    def mark_table(self, table: str) -> None:
        self._tables.add(table)

    def has_table(self, table: str) -> bool:
        return table in self._tables

    def put(self, table: str, info: ColumnInfo) -> ColumnInfo:
        self._tables.add(table)
        self._columns[(table, info.name)] = info
        return info

    def get(self, table: str, column: str) -> Optional[ColumnInfo]:
        return self._columns.get((table, column))

    def require_table(self, table: str) -> None:
        if table not in self._tables:
            raise SchemaError(f"table {table} has not been verified")

    def require(self, table: str, column: str) -> ColumnInfo:
        """Return cached metadata, or raise if the column was never verified."""
        info = self._columns.get((table, column))
        if info is None:
            raise SchemaError(f"field {column} has not been verified in table {table}")
        return info

    def columns(self, table: str) -> Iterator[ColumnInfo]:
        for (cached_table, _), info in self._columns.items():
            if cached_table == table:
                yield info

    def __contains__(self, key: Tuple[str, str]) -> bool:
        return key in self._columns

    def __len__(self) -> int:
        return len(self._columns)


__all__ = ["ColumnCache"]
