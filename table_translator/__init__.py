"""
table-translator - batch translation of database text columns.

Reads rows from configured MySQL tables, sends their text fields to a
translation endpoint, and writes the translations into designated target
columns:

- Catalog introspection (table/column existence, lengths, index membership)
- Index-aware column widening before writes
- Fixed-size batches with a pacing delay between them
- Per-table and per-record error isolation with structured logging
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from table_translator.config import Settings, get_settings, load_job_config
from table_translator.domain.models import (
    ColumnInfo,
    FieldSpec,
    JobConfig,
    TableResult,
    TableSpec,
    TranslationRecord,
)
from table_translator.orchestrator import RunConfig, TranslationJob
from table_translator.translation.client import TranslationClient, Translator
from table_translator.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    "load_job_config",
    # Domain
    "ColumnInfo",
    "FieldSpec",
    "JobConfig",
    "TableResult",
    "TableSpec",
    "TranslationRecord",
    # Orchestration
    "RunConfig",
    "TranslationJob",
    # Translation
    "TranslationClient",
    "Translator",
    # Logging
    "configure_logging",
    "get_logger",
]
