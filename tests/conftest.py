"""
Pytest configuration for table-translator.

Provides fixtures for:
- An in-memory stand-in for a MySQL schema (catalog views, SELECT, UPDATE, ALTER)
- Fake translation endpoints
- Real database connection management for integration tests
"""

from __future__ import annotations

import os
import re
from typing import Any, Callable, Dict, Generator, Iterable, List, Optional, Sequence, Tuple

import mysql.connector
import pytest

from table_translator.config import get_settings
from table_translator.domain.models import DatabaseConfig

_SELECT_RE = re.compile(r"^SELECT (?P<cols>.+?) FROM `(?P<table>\w+)` WHERE ", re.S)
_UPDATE_RE = re.compile(r"^UPDATE `(?P<table>\w+)` SET (?P<sets>.+) WHERE `(?P<pk>\w+)` = %s$", re.S)
_ALTER_RE = re.compile(
    r"^ALTER TABLE `(?P<table>\w+)` MODIFY COLUMN `(?P<column>\w+)` VARCHAR\((?P<length>\d+)\)"
)


class FakeCursor:
    def __init__(self, catalog: "FakeCatalog") -> None:
        self._catalog = catalog
        self._rows: List[tuple] = []
        self.rowcount = -1

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> None:
        result = self._catalog.handle(sql, tuple(params or ()))
        if isinstance(result, int):
            self.rowcount = result
            self._rows = []
        else:
            self._rows = list(result)
            self.rowcount = len(self._rows)

    def fetchall(self) -> List[tuple]:
        rows, self._rows = self._rows, []
        return rows

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        del exc_type, exc, tb
        return False


class FakeCatalog:
    """
    Just enough of one MySQL schema to exercise the services end to end:
    information_schema lookups, the translatable-row SELECT, single-row
    UPDATEs (matched-row counts, strict-mode "Data too long" errors) and
    VARCHAR widening.
    """

    def __init__(self, schema: str = "shop") -> None:
        self.schema = schema
        self.columns: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.indexed: Dict[str, set] = {}
        self.primary_keys: Dict[str, str] = {}
        self.rows: Dict[str, Dict[int, Dict[str, Any]]] = {}
        self.executed: List[Tuple[str, tuple]] = []
        self.failures: List[Tuple[str, Exception]] = []
        self.closed = False

    # connection protocol
    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def close(self) -> None:
        self.closed = True

    # setup helpers
    def add_table(
        self,
        name: str,
        columns: Dict[str, Tuple[str, int]],
        indexed: Iterable[str] = (),
        primary_key: str = "id",
        not_null: Iterable[str] = (),
    ) -> None:
        cols: Dict[str, Dict[str, Any]] = {
            primary_key: {"type": "int unsigned", "length": 0, "nullable": False}
        }
        for col, (col_type, length) in columns.items():
            cols[col] = {"type": col_type, "length": length, "nullable": col not in set(not_null)}
        self.columns[name] = cols
        self.indexed[name] = {primary_key, *indexed}
        self.primary_keys[name] = primary_key
        self.rows[name] = {}

    def insert(self, table: str, row_id: int, **values: Any) -> None:
        row = {col: None for col in self.columns[table]}
        row.update(values)
        row[self.primary_keys[table]] = row_id
        self.rows[table][row_id] = row

    def fail(self, sql_prefix: str, exc: Exception) -> None:
        self.failures.append((sql_prefix, exc))

    def length(self, table: str, column: str) -> int:
        return self.columns[table][column]["length"]

    def statements(self, prefix: str) -> List[str]:
        return [sql for sql, _ in self.executed if sql.startswith(prefix)]

    # query routing
    def handle(self, sql: str, params: tuple) -> Any:
        self.executed.append((sql, params))
        for prefix, exc in self.failures:
            if sql.startswith(prefix):
                raise exc

        if "information_schema.tables" in sql:
            _, table = params
            return [(1,)] if table in self.columns else []
        if sql.startswith("SELECT 1 FROM information_schema.columns"):
            _, table, column = params
            return [(1,)] if column in self.columns.get(table, {}) else []
        if "FROM information_schema.columns" in sql:
            _, table, *names = params
            cols = self.columns.get(table, {})
            return [
                (
                    name,
                    cols[name]["type"],
                    cols[name]["length"] or None,
                    "YES" if cols[name]["nullable"] else "NO",
                )
                for name in names
                if name in cols
            ]
        if "information_schema.statistics" in sql:
            _, table, *names = params
            return [(name,) for name in names if name in self.indexed.get(table, set())]

        match = _ALTER_RE.match(sql)
        if match:
            col = self.columns[match["table"]][match["column"]]
            col["length"] = int(match["length"])
            col["type"] = f"varchar({match['length']})"
            return 0

        match = _UPDATE_RE.match(sql)
        if match:
            set_cols = re.findall(r"`(\w+)` = %s", match["sets"])
            *values, row_id = params
            row = self.rows[match["table"]].get(row_id)
            if row is None:
                return 0
            for col, value in zip(set_cols, values):
                limit = self.columns[match["table"]][col]["length"]
                if limit and len(value) > limit:
                    # STRICT_TRANS_TABLES behaviour.
                    raise mysql.connector.errors.DataError(
                        msg=f"Data too long for column '{col}' at row 1", errno=1406
                    )
            for col, value in zip(set_cols, values):
                row[col] = value
            return 1

        match = _SELECT_RE.match(sql)
        if match:
            cols = [c.strip().strip("`") for c in match["cols"].split(",")]
            pk, sources = cols[0], cols[1:]
            result = []
            for row in self.rows[match["table"]].values():
                if any(_qualifies(row.get(c)) for c in sources):
                    result.append(tuple(row.get(c) for c in [pk, *sources]))
            return result

        raise AssertionError(f"unexpected SQL: {sql}")


def _qualifies(value: Any) -> bool:
    return value is not None and value != "" and "\x00" not in value


class FakeTranslator:
    """Records every call and translates each text with `fn`."""

    def __init__(self, fn: Optional[Callable[[str], str]] = None) -> None:
        self.calls: List[List[str]] = []
        self._fn = fn or (lambda text: f"[fr] {text}")
        self.error: Optional[Exception] = None

    def translate(self, texts: Sequence[str]) -> List[str]:
        self.calls.append(list(texts))
        if self.error is not None:
            raise self.error
        return [self._fn(text) for text in texts]


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def catalog() -> FakeCatalog:
    """
    In-memory schema with one `articles` table: a narrow indexed target and a
    narrow unindexed one.
    """
    cat = FakeCatalog(schema="shop")
    cat.add_table(
        "articles",
        {
            "title": ("varchar(100)", 100),
            "body": ("text", 65535),
            "title_translated": ("varchar(50)", 50),
            "body_translated": ("varchar(20)", 20),
        },
        indexed=["title_translated"],
    )
    return cat


@pytest.fixture()
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture()
def make_translator() -> Callable[..., FakeTranslator]:
    return FakeTranslator


# Integration fixtures -------------------------------------------------------


@pytest.fixture(scope="session")
def test_database() -> DatabaseConfig:
    """
    Database settings for integration tests, overridable via environment variables.
    """
    return DatabaseConfig(
        host=os.getenv("DB_HOST", "localhost"),
        port=int(os.getenv("DB_PORT", "3306")),
        username=os.getenv("DB_USER", "root"),
        password=os.getenv("DB_PASSWORD", ""),
        dbname=os.getenv("DB_NAME", "translator_test"),
    )


@pytest.fixture(scope="session")
def db_connection_available(test_database: DatabaseConfig) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    import mysql.connector

    try:
        conn = mysql.connector.connect(
            host=test_database.host,
            port=test_database.port,
            user=test_database.username,
            password=test_database.password,
            database=test_database.dbname,
            connection_timeout=5,
        )
    except mysql.connector.Error:
        return False
    conn.close()
    return True


@pytest.fixture()
def db_connection(test_database: DatabaseConfig, db_connection_available: bool):
    """
    Provide an autocommit connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    from table_translator.infrastructure.db_factory import get_connection

    conn = get_connection(test_database)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture()
def seeded_demo_table(db_connection, test_database: DatabaseConfig) -> Generator[str, None, None]:
    """
    Create `it_articles` with 25 seeded rows; dropped after the test.
    """
    from scripts.seed_demo import _create_demo_table, _generate_rows, _insert_rows

    table = "it_articles"
    _create_demo_table(db_connection, table)
    _insert_rows(db_connection, table, _generate_rows(25, seed=7))
    yield table
    with db_connection.cursor() as cur:
        cur.execute(f"DROP TABLE IF EXISTS `{table}`")
