"""
Records package for table-translator.

Reading translatable rows and writing translations back.
"""

from table_translator.records.fetcher import RecordFetcher
from table_translator.records.writer import UpdateWriter

__all__ = [
    "RecordFetcher",
    "UpdateWriter",
]
