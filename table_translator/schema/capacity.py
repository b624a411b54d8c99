"""
Column-capacity management: widening text columns so translations fit.

Two entry points share one widening routine:

- `ensure_length` (pre-read pass, opt-in): bring every source and target
  column up to `MIN_TEXT_LENGTH` characters, or to the index-safe cap for
  indexed columns.
- `ensure_capacity` (before each write): grow a column that is shorter than
  the value about to be stored. Indexed columns stop at `INDEXED_LENGTH_CAP`
  and the overflow is logged as a truncation risk; other columns grow to the
  required length plus `GROWTH_HEADROOM`, up to `MAX_VARCHAR_LENGTH`.

Widening always restates the character set and collation so lengths are
counted in characters of a 4-byte encoding.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

import mysql.connector

from table_translator.domain.models import ColumnInfo, FieldSpec
from table_translator.errors import CapacityError
from table_translator.schema.cache import ColumnCache
from table_translator.sql import build_alter_varchar
from table_translator.utils.logging import get_logger

log = get_logger(__name__)

INDEXED_LENGTH_CAP = 191
MAX_VARCHAR_LENGTH = 65535
GROWTH_HEADROOM = 100
MIN_TEXT_LENGTH = 255


def planned_length(info: ColumnInfo, required: int) -> Optional[int]:
    """
    New declared length for a column that must hold `required` characters,
    or None when no widening is needed or possible.
    """
    if required <= info.max_length:
        return None
    if info.has_index:
        new_length = min(required, INDEXED_LENGTH_CAP)
    else:
        new_length = min(required + GROWTH_HEADROOM, MAX_VARCHAR_LENGTH)
    if new_length <= info.max_length:
        return None
    return new_length


def prewiden_length(info: ColumnInfo) -> Optional[int]:
    """Target length for the pre-read pass, or None when the column is long enough."""
    target = min(MIN_TEXT_LENGTH, INDEXED_LENGTH_CAP) if info.has_index else MIN_TEXT_LENGTH
    if info.max_length >= target:
        return None
    return target


class ColumnCapacityManager:
    """
    Issues the ALTER TABLE statements that widen columns and keeps the
    column cache in step with them.
    """

    def __init__(
        self,
        conn: Any,
        cache: ColumnCache,
        charset: str = "utf8mb4",
        collation: str = "utf8mb4_unicode_ci",
    ) -> None:
        self._conn = conn
        self._cache = cache
        self.charset = charset
        self.collation = collation

    def ensure_length(self, table: str, fields: Sequence[FieldSpec]) -> List[str]:
        """
        Pre-read pass over every source and target column of a table.

        Returns the names of the columns that were widened.
        """
        widened: List[str] = []
        columns = list(dict.fromkeys(c for f in fields for c in (f.name, f.translated_name)))
        for column in columns:
            info = self._cache.require(table, column)
            if info.max_length == 0:
                log.warning(
                    f"Field {column} in table {table} is not a character column, skipping",
                    extra={"table": table, "field": column, "column_type": info.column_type},
                )
                continue
            target = prewiden_length(info)
            if target is None:
                continue
            log.info(
                f"Field {column} in table {table} needs to be modified "
                f"(current length: {info.max_length})",
                extra={"table": table, "field": column, "indexed": info.has_index},
            )
            self._widen(table, info, target)
            widened.append(column)
        return widened

    def ensure_capacity(self, table: str, column: str, required: int) -> Optional[int]:
        """
        Grow `column` so it can hold `required` characters.

        Returns the new declared length, or None if nothing changed.

        Raises
        ------
        CapacityError
            If the column is not a character column or the ALTER fails.
        """
        info = self._cache.require(table, column)
        if required <= info.max_length:
            return None
        if info.max_length == 0:
            raise CapacityError(
                f"field {column} in table {table} is not a character column ({info.column_type})"
            )

        log.info(
            f"Field {column} in table {table} needs to be extended "
            f"(current: {info.max_length}, required: {required})",
            extra={"table": table, "field": column, "required": required},
        )
        if info.has_index and required > INDEXED_LENGTH_CAP:
            log.warning(
                f"Field {column} has index, cannot extend beyond {INDEXED_LENGTH_CAP} characters; "
                f"values longer than that will be truncated",
                extra={"table": table, "field": column, "required": required},
            )

        new_length = planned_length(info, required)
        if new_length is None:
            log.warning(
                f"Field {column} in table {table} is already at its limit ({info.max_length})",
                extra={"table": table, "field": column, "required": required},
            )
            return None
        self._widen(table, info, new_length)
        return new_length

    def _widen(self, table: str, info: ColumnInfo, length: int) -> None:
        sql = build_alter_varchar(
            table, info.name, length, self.charset, self.collation, nullable=info.nullable
        )
        previous = info.max_length
        try:
            with self._conn.cursor() as cur:
                cur.execute(sql)
        except mysql.connector.Error as exc:
            raise CapacityError(f"error extending field {info.name}: {exc}") from exc

        info.max_length = length
        info.column_type = f"varchar({length})"
        log.info(
            f"Successfully extended field {info.name} in table {table} "
            f"from {previous} to {length} characters",
            extra={"table": table, "field": info.name, "length": length},
        )


__all__ = [
    "ColumnCapacityManager",
    "GROWTH_HEADROOM",
    "INDEXED_LENGTH_CAP",
    "MAX_VARCHAR_LENGTH",
    "MIN_TEXT_LENGTH",
    "planned_length",
    "prewiden_length",
]
