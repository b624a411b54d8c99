"""
Update writer: stores translated texts back into their target columns.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

import mysql.connector

from table_translator.errors import UpdateError
from table_translator.schema.cache import ColumnCache
from table_translator.schema.capacity import ColumnCapacityManager
from table_translator.schema.introspector import SchemaIntrospector
from table_translator.sql import build_update
from table_translator.utils.logging import get_logger

log = get_logger(__name__)


class UpdateWriter:
    """
    Validates, trims and writes one record's translations in a single UPDATE,
    widening target columns first when a value would not fit.
    """

    def __init__(
        self,
        conn: Any,
        cache: ColumnCache,
        introspector: SchemaIntrospector,
        capacity: ColumnCapacityManager,
    ) -> None:
        self._conn = conn
        self._cache = cache
        self._introspector = introspector
        self._capacity = capacity

    def update(
        self,
        table: str,
        primary_key: str,
        record_id: int,
        translations: Mapping[str, str],
    ) -> int:
        """
        Write `translations` (target column -> text) to the row `primary_key = record_id`.

        Values are trimmed; blank values are dropped rather than written. A value
        longer than its column can be made (the index cap) is cut to fit.

        Returns
        -------
        int
            Number of columns written.

        Raises
        ------
        UpdateError
            If the mapping is empty, nothing survives trimming, the statement
            fails, or no row matches the primary key.
        SchemaError
            If a target column does not exist.
        CapacityError
            If a target column could not be widened.
        """
        if not translations:
            raise UpdateError("no translations provided")

        self._introspector.resolve(table, primary_key, self._cache)
        for column in translations:
            self._introspector.resolve(table, column, self._cache)

        values: Dict[str, str] = {}
        for column, text in translations.items():
            text = (text or "").strip()
            if text:
                values[column] = text

        if not values:
            raise UpdateError("no valid translations to update")

        for column, text in values.items():
            self._capacity.ensure_capacity(table, column, len(text))
            # Strict-mode servers reject over-long values instead of truncating.
            limit = self._cache.require(table, column).max_length
            if limit and len(text) > limit:
                log.warning(
                    f"Truncating translation for field {column} to {limit} characters",
                    extra={"table": table, "field": column, "record_id": record_id, "length": len(text)},
                )
                values[column] = text[:limit]

        columns: List[str] = list(values)
        sql = build_update(table, primary_key, columns)
        params = (*(values[c] for c in columns), record_id)
        try:
            with self._conn.cursor() as cur:
                cur.execute(sql, params)
                affected = cur.rowcount
        except mysql.connector.Error as exc:
            raise UpdateError(f"error updating table {table}: {exc}") from exc

        if affected == 0:
            raise UpdateError(f"no record found with {primary_key} = {record_id} in table {table}")
        return len(columns)


__all__ = ["UpdateWriter"]
