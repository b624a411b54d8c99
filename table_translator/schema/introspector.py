"""
Catalog lookups against MySQL's information_schema.

Every lookup is scoped to the configured schema and binds the table and column
names as parameters, so nothing here depends on identifiers having been
verified already.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from table_translator.domain.models import ColumnInfo, TableSpec
from table_translator.errors import SchemaError
from table_translator.schema.cache import ColumnCache
from table_translator.utils.logging import get_logger

log = get_logger(__name__)

_TABLE_EXISTS_SQL = (
    "SELECT 1 FROM information_schema.tables "
    "WHERE table_schema = %s AND table_name = %s LIMIT 1"
)
_COLUMN_EXISTS_SQL = (
    "SELECT 1 FROM information_schema.columns "
    "WHERE table_schema = %s AND table_name = %s AND column_name = %s LIMIT 1"
)
_COLUMNS_SQL = (
    "SELECT COLUMN_NAME, COLUMN_TYPE, CHARACTER_MAXIMUM_LENGTH, IS_NULLABLE "
    "FROM information_schema.columns "
    "WHERE table_schema = %s AND table_name = %s AND column_name IN ({placeholders})"
)
_INDEXED_SQL = (
    "SELECT DISTINCT COLUMN_NAME FROM information_schema.statistics "
    "WHERE table_schema = %s AND table_name = %s AND column_name IN ({placeholders})"
)


def _text(value: Any) -> str:
    # information_schema columns come back as bytes on some server/driver combinations.
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return "" if value is None else str(value)


def _placeholders(count: int) -> str:
    return ", ".join(["%s"] * count)


class SchemaIntrospector:
    """
    Answers existence, length and index-membership questions for one schema.
    """

    def __init__(self, conn: Any, schema: str) -> None:
        self._conn = conn
        self.schema = schema

    def _fetchall(self, sql: str, params: Sequence[Any]) -> List[tuple]:
        with self._conn.cursor() as cur:
            cur.execute(sql, tuple(params))
            return list(cur.fetchall())

    def table_exists(self, table: str) -> bool:
        return bool(self._fetchall(_TABLE_EXISTS_SQL, (self.schema, table)))

    def column_exists(self, table: str, column: str) -> bool:
        return bool(self._fetchall(_COLUMN_EXISTS_SQL, (self.schema, table, column)))

    def has_index(self, table: str, column: str) -> bool:
        """True if any index, at any position, covers the column."""
        return column.lower() in self._indexed_columns(table, [column])

    def column_info(self, table: str, column: str) -> ColumnInfo:
        """
        Metadata for a single column.

        Raises
        ------
        SchemaError
            If the column does not exist in the table.
        """
        found = self.load_columns(table, [column])
        if column not in found:
            raise SchemaError(f"field {column} does not exist in table {table}")
        return found[column]

    def load_columns(self, table: str, columns: Sequence[str]) -> Dict[str, ColumnInfo]:
        """
        Fetch metadata and index membership for several columns in two queries.

        Columns missing from the catalog are absent from the returned mapping,
        which is keyed by the names as requested.
        """
        names = list(dict.fromkeys(columns))
        if not names:
            return {}

        rows = self._fetchall(
            _COLUMNS_SQL.format(placeholders=_placeholders(len(names))),
            (self.schema, table, *names),
        )
        by_lower = {_text(row[0]).lower(): row for row in rows}
        indexed = self._indexed_columns(table, names)

        result: Dict[str, ColumnInfo] = {}
        for name in names:
            row = by_lower.get(name.lower())
            if row is None:
                continue
            _, column_type, max_length, is_nullable = row
            result[name] = ColumnInfo(
                name=name,
                column_type=_text(column_type),
                max_length=int(max_length or 0),
                has_index=name.lower() in indexed,
                nullable=_text(is_nullable).upper() != "NO",
            )
        return result

    def _indexed_columns(self, table: str, columns: Sequence[str]) -> set:
        rows = self._fetchall(
            _INDEXED_SQL.format(placeholders=_placeholders(len(columns))),
            (self.schema, table, *columns),
        )
        return {_text(row[0]).lower() for row in rows}

    def initialize_table(self, spec: TableSpec, cache: ColumnCache) -> List[ColumnInfo]:
        """
        Verify a configured table and load every column it names into the cache.

        Raises
        ------
        SchemaError
            If the table or any primary-key, source or target column is missing.
        """
        if not self.table_exists(spec.table_name):
            raise SchemaError(f"table {spec.table_name} does not exist")

        wanted = spec.all_columns()
        found = self.load_columns(spec.table_name, wanted)
        missing = [name for name in wanted if name not in found]
        if missing:
            raise SchemaError(
                f"field {', '.join(missing)} does not exist in table {spec.table_name}"
            )

        cache.mark_table(spec.table_name)
        for info in found.values():
            cache.put(spec.table_name, info)
        log.debug(
            "Loaded column info",
            extra={"table": spec.table_name, "columns": len(found)},
        )
        return list(found.values())

    def resolve(self, table: str, column: str, cache: ColumnCache) -> ColumnInfo:
        """
        Cached metadata for a column, looked up in the catalog on a miss.

        Raises
        ------
        SchemaError
            If the table was never verified or the column does not exist.
        """
        info = cache.get(table, column)
        if info is not None:
            return info
        cache.require_table(table)
        if not self.column_exists(table, column):
            raise SchemaError(f"field {column} does not exist in table {table}")
        return cache.put(table, self.column_info(table, column))


__all__ = ["SchemaIntrospector"]
