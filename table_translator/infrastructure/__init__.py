"""
Infrastructure package for table-translator.

Centralizes database connectivity. Keep this layer focused on I/O and resource
management, decoupled from schema and orchestration logic.
"""

from table_translator.infrastructure.db_factory import (
    connection_kwargs,
    describe,
    get_connection,
    managed_connection,
)

__all__ = [
    "connection_kwargs",
    "describe",
    "get_connection",
    "managed_connection",
]
