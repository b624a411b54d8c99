"""
SQL text construction for table-translator.

Table and column names cannot be bound as parameters, so they are interpolated
here. Callers only pass names the column cache has verified against
`information_schema`; `quote_identifier` additionally rejects anything that
could not be a plain MySQL identifier. Values are always bound with `%s`.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from table_translator.errors import SchemaError

MAX_IDENTIFIER_LENGTH = 64

# LIKE pattern matching any value that contains a NUL character.
NUL_PATTERN = "%\x00%"


def quote_identifier(name: str) -> str:
    """Backtick-quote a catalog-verified identifier."""
    if not name or len(name) > MAX_IDENTIFIER_LENGTH:
        raise SchemaError(f"invalid identifier {name!r}")
    if "`" in name or "\x00" in name or name != name.strip():
        raise SchemaError(f"invalid identifier {name!r}")
    return f"`{name}`"


def build_select_translatable(
    table: str, primary_key: str, columns: Sequence[str]
) -> Tuple[str, List[str]]:
    """
    SELECT the primary key and every source column of rows where at least one
    source column is non-NULL, non-empty and free of NUL characters.
    """
    if not columns:
        raise ValueError("at least one source column is required")

    select_list = ", ".join(quote_identifier(c) for c in [primary_key, *columns])
    conditions = []
    params: List[str] = []
    for column in columns:
        quoted = quote_identifier(column)
        conditions.append(f"({quoted} IS NOT NULL AND {quoted} != %s AND {quoted} NOT LIKE %s)")
        params.extend(["", NUL_PATTERN])

    sql = (
        f"SELECT {select_list} FROM {quote_identifier(table)} "
        f"WHERE {' OR '.join(conditions)}"
    )
    return sql, params


def build_update(
    table: str, primary_key: str, columns: Iterable[str]
) -> str:
    """Single-row UPDATE of `columns` keyed by the primary key."""
    assignments = ", ".join(f"{quote_identifier(c)} = %s" for c in columns)
    if not assignments:
        raise ValueError("at least one column is required")
    return (
        f"UPDATE {quote_identifier(table)} SET {assignments} "
        f"WHERE {quote_identifier(primary_key)} = %s"
    )


def build_alter_varchar(
    table: str,
    column: str,
    length: int,
    charset: str,
    collation: str,
    nullable: bool = True,
) -> str:
    """MODIFY a column to VARCHAR(length) with an explicit character set and collation."""
    if length <= 0:
        raise ValueError(f"invalid column length {length}")
    sql = (
        f"ALTER TABLE {quote_identifier(table)} MODIFY COLUMN {quote_identifier(column)} "
        f"VARCHAR({int(length)}) CHARACTER SET {charset} COLLATE {collation}"
    )
    if not nullable:
        sql += " NOT NULL"
    return sql


__all__ = [
    "NUL_PATTERN",
    "build_alter_varchar",
    "build_select_translatable",
    "build_update",
    "quote_identifier",
]
