"""
Domain package for table-translator.

Exports the job configuration models and the records passed between the
database services, the translation client and the orchestrator.
"""

from table_translator.domain.models import (
    ColumnInfo,
    DatabaseConfig,
    FieldSpec,
    JobConfig,
    TableResult,
    TableSpec,
    TranslationApiConfig,
    TranslationRecord,
)

__all__ = [
    "ColumnInfo",
    "DatabaseConfig",
    "FieldSpec",
    "JobConfig",
    "TableResult",
    "TableSpec",
    "TranslationApiConfig",
    "TranslationRecord",
]
