"""
Domain models for table-translator.

The job configuration document (`config.json`) is validated into the pydantic
models below. `ColumnInfo` is the mutable catalog snapshot kept in the
run-scoped column cache, and `TableResult` is the per-table summary returned
by the orchestrator.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, TypedDict

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

_FROZEN = {
    "frozen": True,
    "populate_by_name": True,
    "extra": "ignore",
}


class DatabaseConfig(BaseModel):
    """
    Connection parameters for the MySQL schema that holds the tables.
    """

    host: str = Field("localhost", description="Database host name.")
    port: int = Field(3306, ge=1, le=65535, description="Database TCP port.")
    username: str = Field(..., description="Login user.")
    password: str = Field("", description="Login password.")
    dbname: str = Field(
        ...,
        validation_alias=AliasChoices("dbname", "schema", "database"),
        description="Schema (database) name; also scopes catalog lookups.",
    )

    model_config = _FROZEN


class TranslationApiConfig(BaseModel):
    url: str = Field(..., min_length=1, description="Translation endpoint URL.")

    model_config = _FROZEN


class FieldSpec(BaseModel):
    """
    A (source column, target column) pair for one translatable attribute.
    """

    name: str = Field(..., min_length=1, description="Source column.")
    translated_name: str = Field(..., min_length=1, description="Target column.")

    model_config = _FROZEN


class TableSpec(BaseModel):
    """
    A configured table with its primary key and ordered field pairs.
    """

    table_name: str = Field(..., min_length=1)
    primary_key: str = Field(..., min_length=1)
    fields: List[FieldSpec] = Field(..., min_length=1)

    model_config = _FROZEN

    @model_validator(mode="after")
    def _unique_targets(self) -> "TableSpec":
        targets = [f.translated_name for f in self.fields]
        duplicates = sorted({t for t in targets if targets.count(t) > 1})
        if duplicates:
            raise ValueError(
                f"table {self.table_name}: target columns listed more than once: {', '.join(duplicates)}"
            )
        return self

    @property
    def source_columns(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def target_columns(self) -> List[str]:
        return [f.translated_name for f in self.fields]

    def all_columns(self) -> List[str]:
        """Primary key, then every source and target column, without duplicates."""
        ordered = [self.primary_key]
        for field in self.fields:
            ordered.extend([field.name, field.translated_name])
        return list(dict.fromkeys(ordered))


class JobConfig(BaseModel):
    """
    Top-level job document: where to read, what to translate, and with which API.
    """

    database: DatabaseConfig
    translation_tables: List[TableSpec] = Field(default_factory=list)
    translation_api: TranslationApiConfig

    model_config = _FROZEN


@dataclass
class ColumnInfo:
    """
    Catalog metadata for one column. `max_length` is updated in place after a
    successful widening so later checks in the same run skip the catalog.
    """

    name: str
    column_type: str
    max_length: int = 0
    has_index: bool = False
    nullable: bool = True


class TranslationRecord(BaseModel):
    """
    One qualifying row: primary-key value plus source texts in TableSpec order.
    """

    id: int = Field(..., ge=0, description="Primary-key value (unsigned).")
    fields: Dict[str, Optional[str]] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @field_validator("fields", mode="before")
    @classmethod
    def _decode_bytes(cls, value: Dict[str, object]) -> Dict[str, object]:
        # Binary collations hand back bytes.
        return {
            k: (v.decode("utf-8", errors="replace") if isinstance(v, (bytes, bytearray)) else v)
            for k, v in value.items()
        }


class TableResult(TypedDict, total=False):
    """
    Per-table outcome of a run.
    """

    table: str
    records: int
    batches: int
    translated: int
    skipped: int
    failed: int
    error: Optional[str]


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
