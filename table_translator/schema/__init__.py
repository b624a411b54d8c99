"""
Schema package for table-translator.

Catalog introspection, the run-scoped column cache, and the column-capacity
manager that widens text columns.
"""

from table_translator.schema.cache import ColumnCache
from table_translator.schema.capacity import (
    INDEXED_LENGTH_CAP,
    ColumnCapacityManager,
    planned_length,
    prewiden_length,
)
from table_translator.schema.introspector import SchemaIntrospector

__all__ = [
    "ColumnCache",
    "ColumnCapacityManager",
    "INDEXED_LENGTH_CAP",
    "SchemaIntrospector",
    "planned_length",
    "prewiden_length",
]
