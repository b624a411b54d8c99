"""
Record fetcher: loads every row of a table that has something to translate.

The whole result set is materialized at once; there is no pagination.
"""

from __future__ import annotations

from typing import Any, List, Sequence

import mysql.connector

from table_translator.domain.models import FieldSpec, TranslationRecord
from table_translator.errors import RecordFetchError
from table_translator.schema.cache import ColumnCache
from table_translator.sql import build_select_translatable
from table_translator.utils.logging import get_logger

log = get_logger(__name__)


class RecordFetcher:
    def __init__(self, conn: Any, cache: ColumnCache) -> None:
        self._conn = conn
        self._cache = cache

    def fetch(
        self, table: str, primary_key: str, fields: Sequence[FieldSpec]
    ) -> List[TranslationRecord]:
        """
        Select rows where any source field is non-NULL, non-empty and NUL-free.

        Every source field is returned for a qualifying row, including the ones
        that do not qualify on their own (those come back as stored, NULL as None).

        Raises
        ------
        SchemaError
            If the table or a column has not been verified.
        RecordFetchError
            If the query fails or a primary-key value is not an unsigned integer.
        """
        self._cache.require_table(table)
        self._cache.require(table, primary_key)
        sources = [f.name for f in fields]
        for column in sources:
            self._cache.require(table, column)

        sql, params = build_select_translatable(table, primary_key, sources)
        try:
            with self._conn.cursor() as cur:
                cur.execute(sql, tuple(params))
                rows = cur.fetchall()
        except mysql.connector.Error as exc:
            raise RecordFetchError(f"error querying table {table}: {exc}") from exc

        records: List[TranslationRecord] = []
        for row in rows:
            try:
                records.append(
                    TranslationRecord(
                        id=int(row[0]),
                        fields={name: row[i + 1] for i, name in enumerate(sources)},
                    )
                )
            except (TypeError, ValueError) as exc:
                raise RecordFetchError(
                    f"error scanning row from table {table} ({primary_key}={row[0]!r}): {exc}"
                ) from exc

        log.debug("Fetched records", extra={"table": table, "records": len(records)})
        return records


__all__ = ["RecordFetcher"]
