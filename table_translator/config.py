"""
Configuration for table-translator.

Two layers:

- `Settings` (Pydantic Settings) holds runtime knobs read from environment
  variables or `.env`: where the job file lives, batch pacing, logging, and
  the DDL character set used when widening columns.
- `load_job_config` parses the JSON job document (database, tables, API) into
  a validated `JobConfig`.
"""
from __future__ import annotations

import json
import re
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from table_translator.domain.models import JobConfig
from table_translator.errors import ConfigError

_PLAIN_NAME = re.compile(r"^[A-Za-z0-9_]+$")


class Settings(BaseSettings):
    # Job
    config_path: Path = Field(Path("config.json"), alias="TRANSLATOR_CONFIG")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Batch pacing
    batch_size: int = Field(10, ge=1, alias="BATCH_SIZE")
    batch_delay_seconds: float = Field(0.1, ge=0, alias="BATCH_DELAY_SECONDS")

    # Column capacity
    prewiden_columns: bool = Field(False, alias="PREWIDEN_COLUMNS")
    column_charset: str = Field("utf8mb4", alias="COLUMN_CHARSET")
    column_collation: str = Field("utf8mb4_unicode_ci", alias="COLUMN_COLLATION")

    # I/O
    http_timeout_seconds: Optional[float] = Field(None, gt=0, alias="HTTP_TIMEOUT_SECONDS")
    db_connect_timeout: int = Field(10, ge=1, alias="DB_CONNECT_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("column_charset", "column_collation")
    @classmethod
    def _plain_name(cls, value: str) -> str:
        # Interpolated into ALTER TABLE; only bare identifiers are allowed.
        if not _PLAIN_NAME.match(value):
            raise ValueError(f"invalid character set or collation name: {value!r}")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


def load_job_config(path: Path | str) -> JobConfig:
    """
    Read and validate the JSON job document.

    Raises
    ------
    ConfigError
        If the file cannot be read, is not JSON, or does not match the schema.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"error reading config file {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"error parsing config file {path}: {exc}") from exc

    try:
        return JobConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"invalid config file {path}: {exc}") from exc


__all__ = ["Settings", "get_settings", "load_job_config"]
