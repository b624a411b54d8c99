"""
Demo data script for table-translator.

Creates a small `articles`-style table with deliberately narrow and indexed
text columns, fills it with deterministic pseudo-random rows (some with NULL or
empty fields), and optionally writes a matching job file.
"""

from __future__ import annotations

import json
import random
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import typer

from table_translator.domain.models import DatabaseConfig
from table_translator.infrastructure.db_factory import managed_connection
from table_translator.sql import quote_identifier

app = typer.Typer(help="Create and seed a demo table in MySQL.")

_WORDS = [
    "hello", "world", "morning", "market", "river", "window", "garden",
    "station", "winter", "letter", "bridge", "coffee", "summer", "forest",
]


def _generate_rows(rows: int, seed: int) -> List[Tuple[Optional[str], Optional[str]]]:
    """(title, body) pairs; every fifth row has a blank title, every seventh a NULL body."""
    rng = random.Random(seed)
    generated: List[Tuple[Optional[str], Optional[str]]] = []
    for i in range(rows):
        title: Optional[str] = " ".join(rng.choice(_WORDS) for _ in range(rng.randint(1, 4))).title()
        body: Optional[str] = " ".join(rng.choice(_WORDS) for _ in range(rng.randint(5, 15)))
        if i % 5 == 4:
            title = ""
        if i % 7 == 6:
            body = None
        generated.append((title, body))
    return generated


def _create_demo_table(conn, table: str) -> None:
    name = quote_identifier(table)
    with conn.cursor() as cur:
        cur.execute(f"DROP TABLE IF EXISTS {name}")
        cur.execute(
            f"""
            CREATE TABLE {name} (
                id INT UNSIGNED NOT NULL AUTO_INCREMENT PRIMARY KEY,
                title VARCHAR(60) NULL,
                body VARCHAR(200) NULL,
                title_translated VARCHAR(50) NULL,
                body_translated VARCHAR(20) NULL,
                INDEX idx_title_translated (title_translated)
            ) DEFAULT CHARSET = utf8mb4 COLLATE = utf8mb4_unicode_ci
            """
        )


def _insert_rows(conn, table: str, rows: List[Tuple[Optional[str], Optional[str]]]) -> int:
    with conn.cursor() as cur:
        cur.executemany(
            f"INSERT INTO {quote_identifier(table)} (title, body) VALUES (%s, %s)",
            rows,
        )
    return len(rows)


def _job_document(db: DatabaseConfig, table: str, api_url: str) -> dict:
    return {
        "database": {
            "host": db.host,
            "port": db.port,
            "username": db.username,
            "password": db.password,
            "dbname": db.dbname,
        },
        "translation_tables": [
            {
                "table_name": table,
                "primary_key": "id",
                "fields": [
                    {"name": "title", "translated_name": "title_translated"},
                    {"name": "body", "translated_name": "body_translated"},
                ],
            }
        ],
        "translation_api": {"url": api_url},
    }


def seed(db: DatabaseConfig, table: str, rows: int, seed_value: int) -> int:
    with managed_connection(db) as conn:
        _create_demo_table(conn, table)
        return _insert_rows(conn, table, _generate_rows(rows, seed_value))


@app.command()
def main(
    rows: int = typer.Option(25, "--rows", "-r", help="Number of rows to insert."),
    seed_value: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
    table: str = typer.Option("demo_articles", "--table", "-t", help="Demo table name."),
    host: str = typer.Option("localhost", "--host"),
    port: int = typer.Option(3306, "--port"),
    user: str = typer.Option("root", "--user"),
    password: str = typer.Option("", "--password"),
    database: str = typer.Option("translator_demo", "--database"),
    api_url: str = typer.Option(
        "http://localhost:8010/translate", "--api-url", help="Endpoint written into the job file."
    ),
    write_config: Optional[Path] = typer.Option(
        None, "--write-config", help="Write a matching job file to this path."
    ),
    no_load: bool = typer.Option(False, "--no-load", help="Only write the job file."),
) -> None:
    """
    Create the demo table, insert rows, and optionally write a job file.
    """
    db = DatabaseConfig(host=host, port=port, username=user, password=password, dbname=database)

    if not no_load:
        inserted = seed(db, table, rows, seed_value)
        typer.echo(f"Created {database}.{table} with {inserted:,} rows (seed={seed_value}).")

    if write_config:
        write_config.parent.mkdir(parents=True, exist_ok=True)
        write_config.write_text(
            json.dumps(_job_document(db, table, api_url), indent=2), encoding="utf-8"
        )
        typer.echo(f"Job file written to {write_config}")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
