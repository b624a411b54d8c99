"""
Database connection factory for table-translator.

Opens the single MySQL connection a run uses. The connection runs in
autocommit mode (each UPDATE and ALTER stands alone) and reports *matched*
rather than *changed* rows, so re-applying an identical translation still
counts as one affected row.

Includes retry logic for transient connection failures using tenacity.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import mysql.connector
from mysql.connector.constants import ClientFlag
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from table_translator.config import Settings, get_settings
from table_translator.domain.models import DatabaseConfig
from table_translator.errors import DatabaseConnectionError
from table_translator.utils.logging import get_logger

log = get_logger(__name__)


def connection_kwargs(db: DatabaseConfig, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Compose `mysql.connector.connect` arguments from the job's database block."""
    settings = settings or get_settings()
    return {
        "host": db.host,
        "port": db.port,
        "user": db.username,
        "password": db.password,
        "database": db.dbname,
        "charset": "utf8mb4",
        "autocommit": True,
        "connection_timeout": settings.db_connect_timeout,
        "client_flags": [ClientFlag.FOUND_ROWS],
    }


def describe(db: DatabaseConfig) -> str:
    """Password-free `user@host:port/schema` string for logs."""
    return f"{db.username}@{db.host}:{db.port}/{db.dbname}"


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(
        (mysql.connector.errors.InterfaceError, mysql.connector.errors.OperationalError)
    ),
    reraise=True,
)
def _connect(kwargs: Dict[str, Any]):
    return mysql.connector.connect(**kwargs)


def get_connection(db: DatabaseConfig, settings: Optional[Settings] = None):
    """
    Open a dedicated connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Returns
    -------
    MySQLConnection
        An autocommit connection to the configured schema.

    Raises
    ------
    DatabaseConnectionError
        If connection fails after all retry attempts.
    """
    try:
        conn = _connect(connection_kwargs(db, settings))
    except mysql.connector.Error as exc:
        raise DatabaseConnectionError(
            f"failed to connect to database {describe(db)}: {exc}"
        ) from exc
    log.info("Connected to database", extra={"database": describe(db)})
    return conn


@contextmanager
def managed_connection(
    db: DatabaseConfig, settings: Optional[Settings] = None
) -> Generator[Any, None, None]:
    """
    Context manager yielding a connection that is closed on exit.

    Example
    -------
        with managed_connection(job.database) as conn:
            introspector = SchemaIntrospector(conn, job.database.dbname)
    """
    conn = get_connection(db, settings)
    try:
        yield conn
    finally:
        conn.close()


__all__ = [
    "connection_kwargs",
    "describe",
    "get_connection",
    "managed_connection",
]
