"""
Exception hierarchy for table-translator.

Fatal errors (`ConfigError`, `DatabaseConnectionError`) stop the process at
startup. Everything else is raised per table or per record and handled by the
orchestrator, which logs it and moves on.
"""

from __future__ import annotations


class TranslatorError(Exception):
    """Base class for all errors raised by table-translator."""


class ConfigError(TranslatorError):
    """The job configuration file is unreadable or malformed."""


class DatabaseConnectionError(TranslatorError):
    """The target database could not be reached."""


class SchemaError(TranslatorError):
    """A configured table or column does not exist, or was never verified."""


class CapacityError(TranslatorError):
    """Widening a column failed."""


class RecordFetchError(TranslatorError):
    """Selecting translatable rows failed."""


class TranslationApiError(TranslatorError):
    """The translation endpoint failed or returned an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UpdateError(TranslatorError):
    """Writing translations back to a row failed."""


__all__ = [
    "TranslatorError",
    "ConfigError",
    "DatabaseConnectionError",
    "SchemaError",
    "CapacityError",
    "RecordFetchError",
    "TranslationApiError",
    "UpdateError",
]
