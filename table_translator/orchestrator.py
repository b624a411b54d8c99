"""
Orchestrator for a translation run: tables, then batches, then records.

Usage (example from CLI):
    from table_translator.orchestrator import RunConfig, TranslationJob

    job = TranslationJob(conn, schema="shop", translator=client, config=RunConfig())
    results = job.run(job_config.translation_tables)

Per-table and per-record failures are logged and counted; the run always
moves on to the next record or table. Only startup failures (config,
database connection) stop the process, and those happen before this module
is involved.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar

import mysql.connector

from table_translator.config import Settings
from table_translator.domain.models import FieldSpec, TableResult, TableSpec, TranslationRecord
from table_translator.errors import TranslationApiError, TranslatorError
from table_translator.records.fetcher import RecordFetcher
from table_translator.records.writer import UpdateWriter
from table_translator.schema.cache import ColumnCache
from table_translator.schema.capacity import ColumnCapacityManager
from table_translator.schema.introspector import SchemaIntrospector
from table_translator.translation.client import Translator
from table_translator.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")

# Errors that fail one table or one record without stopping the run.
_RECOVERABLE = (TranslatorError, mysql.connector.Error)

TRANSLATED = "translated"
SKIPPED = "skipped"


@dataclass(frozen=True)
class RunConfig:
    batch_size: int = 10
    batch_delay_seconds: float = 0.1
    prewiden_columns: bool = False
    column_charset: str = "utf8mb4"
    column_collation: str = "utf8mb4_unicode_ci"

    @classmethod
    def from_settings(cls, settings: Settings) -> "RunConfig":
        return cls(
            batch_size=settings.batch_size,
            batch_delay_seconds=settings.batch_delay_seconds,
            prewiden_columns=settings.prewiden_columns,
            column_charset=settings.column_charset,
            column_collation=settings.column_collation,
        )


def batched(items: Sequence[T], size: int) -> Iterator[Tuple[int, Sequence[T]]]:
    """Yield `(start_index, chunk)` pairs of at most `size` items."""
    if size < 1:
        raise ValueError(f"batch size must be positive, got {size}")
    for start in range(0, len(items), size):
        yield start, items[start : start + size]


def collect_pairs(
    record: TranslationRecord, fields: Iterable[FieldSpec]
) -> List[Tuple[FieldSpec, str]]:
    """Ordered (field, source text) pairs for the record's non-empty source texts."""
    pairs = []
    for field in fields:
        text = record.fields.get(field.name)
        if text:
            pairs.append((field, text))
    return pairs


def map_translations(
    pairs: Sequence[Tuple[FieldSpec, str]], translated: Sequence[str]
) -> Dict[str, str]:
    """
    Target column -> translated text, matched by position within `pairs`.

    Raises
    ------
    TranslationApiError
        If the endpoint returned fewer texts than were sent.
    """
    if len(translated) < len(pairs):
        raise TranslationApiError(
            f"translation response has {len(translated)} texts for {len(pairs)} inputs"
        )
    return {field.translated_name: text for (field, _), text in zip(pairs, translated)}


class TranslationJob:
    """
    Wires the schema, record and translation services around one connection
    and one run-scoped column cache. Without a translator only `check` is
    available.
    """

    def __init__(
        self,
        conn: Any,
        schema: str,
        translator: Optional[Translator] = None,
        config: RunConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or RunConfig()
        self.translator = translator
        self.cache = ColumnCache()
        self.introspector = SchemaIntrospector(conn, schema)
        self.capacity = ColumnCapacityManager(
            conn, self.cache, self.config.column_charset, self.config.column_collation
        )
        self.fetcher = RecordFetcher(conn, self.cache)
        self.writer = UpdateWriter(conn, self.cache, self.introspector, self.capacity)
        self._sleep = sleep

    def run(self, tables: Iterable[TableSpec]) -> List[TableResult]:
        if self.translator is None:
            raise ValueError("a translator is required to run; only check() works without one")
        results: List[TableResult] = []
        for spec in tables:
            results.append(self.process_table(spec))
        log.info(
            "Translation process completed",
            extra={"tables": len(results)},
        )
        return results

    def check(self, tables: Iterable[TableSpec]) -> List[TableResult]:
        """Verify every table and column without reading rows or writing."""
        results: List[TableResult] = []
        for spec in tables:
            result = _empty_result(spec.table_name)
            try:
                self.introspector.initialize_table(spec, self.cache)
            except _RECOVERABLE as exc:
                log.error(
                    f"Table {spec.table_name} failed verification: {exc}",
                    extra={"table": spec.table_name},
                )
                result["error"] = str(exc)
            results.append(result)
        return results

    def process_table(self, spec: TableSpec) -> TableResult:
        table = spec.table_name
        result = _empty_result(table)
        log.info(f"Processing table: {table}", extra={"table": table})

        try:
            self.introspector.initialize_table(spec, self.cache)
            if self.config.prewiden_columns:
                self.capacity.ensure_length(table, spec.fields)
            records = self.fetcher.fetch(table, spec.primary_key, spec.fields)
        except _RECOVERABLE as exc:
            log.error(f"Error getting texts from table {table}: {exc}", extra={"table": table})
            result["error"] = str(exc)
            return result

        result["records"] = len(records)
        if not records:
            log.info(f"No texts to translate in table {table}", extra={"table": table})
            return result

        log.info(
            f"Found {len(records)} records to translate in table {table}",
            extra={"table": table, "records": len(records)},
        )

        for index, (start, batch) in enumerate(batched(records, self.config.batch_size)):
            if index > 0 and self.config.batch_delay_seconds > 0:
                self._sleep(self.config.batch_delay_seconds)
            result["batches"] += 1
            log.info(
                f"Processing batch {start + 1} to {start + len(batch)} of {len(records)}",
                extra={"table": table, "batch": index + 1},
            )
            for record in batch:
                try:
                    outcome = self.process_record(spec, record)
                except _RECOVERABLE as exc:
                    log.error(
                        f"Error processing record {record.id} in table {table}: {exc}",
                        extra={"table": table, "record_id": record.id},
                    )
                    result["failed"] += 1
                    continue
                result[outcome] += 1

        log.info(
            f"Completed processing table: {table}",
            extra={
                "table": table,
                "translated": result["translated"],
                "skipped": result["skipped"],
                "failed": result["failed"],
            },
        )
        return result

    def process_record(self, spec: TableSpec, record: TranslationRecord) -> str:
        """
        Translate and store one record. Returns TRANSLATED or SKIPPED.
        """
        pairs = collect_pairs(record, spec.fields)
        if not pairs:
            log.info(
                f"No texts to translate for record {record.id}",
                extra={"table": spec.table_name, "record_id": record.id},
            )
            return SKIPPED

        texts = [text for _, text in pairs]
        log.debug(
            f"Translating texts for record {record.id}",
            extra={"table": spec.table_name, "record_id": record.id, "texts": texts},
        )
        translated = self.translator.translate(texts)
        translations = map_translations(pairs, translated)

        self.writer.update(spec.table_name, spec.primary_key, record.id, translations)
        log.info(
            f"Successfully translated and updated record {record.id} in table {spec.table_name}",
            extra={"table": spec.table_name, "record_id": record.id},
        )
        return TRANSLATED


def _empty_result(table: str) -> TableResult:
    return TableResult(
        table=table, records=0, batches=0, translated=0, skipped=0, failed=0, error=None
    )


__all__ = [
    "RunConfig",
    "TranslationJob",
    "batched",
    "collect_pairs",
    "map_translations",
]
