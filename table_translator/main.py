from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List, Optional

import typer

from table_translator.config import Settings, get_settings, load_job_config
from table_translator.domain.models import JobConfig, TableResult
from table_translator.errors import ConfigError, DatabaseConnectionError
from table_translator.infrastructure.db_factory import describe, get_connection
from table_translator.orchestrator import RunConfig, TranslationJob
from table_translator.reporter import print_results
from table_translator.translation.client import TranslationClient
from table_translator.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Translate configured database columns through a translation API.")
log = get_logger(__name__)

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to the JSON job file (default: $TRANSLATOR_CONFIG or config.json).",
)


def _load(settings: Settings, config: Optional[Path]) -> JobConfig:
    path = config or settings.config_path
    try:
        return load_job_config(path)
    except ConfigError as exc:
        log.critical(f"Failed to load config: {exc}")
        raise typer.Exit(code=1) from exc


def _connect(job: JobConfig, settings: Settings):
    try:
        return get_connection(job.database, settings)
    except DatabaseConnectionError as exc:
        log.critical(f"Failed to initialize database service: {exc}")
        raise typer.Exit(code=1) from exc


def _emit(results: List[TableResult], as_json: bool, title: str) -> None:
    if as_json:
        typer.echo(json.dumps(results, indent=2))
    else:
        print_results(results, title=title)


@app.command()
def info(config: Optional[Path] = ConfigOption) -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"config={config or settings.config_path} batch={settings.batch_size} "
        f"delay={settings.batch_delay_seconds}s prewiden={settings.prewiden_columns} "
        f"charset={settings.column_charset}/{settings.column_collation}"
    )
    path = config or settings.config_path
    if Path(path).exists():
        try:
            job = load_job_config(path)
        except ConfigError as exc:
            typer.echo(f"invalid job file: {exc}", err=True)
            raise typer.Exit(code=1) from exc
        typer.echo(
            f"DB={describe(job.database)} | API={job.translation_api.url} | "
            f"tables={', '.join(t.table_name for t in job.translation_tables) or '-'}"
        )


@app.command()
def run(
    config: Optional[Path] = ConfigOption,
    batch_size: Optional[int] = typer.Option(
        None, "--batch-size", "-b", min=1, help="Records per batch (default from settings)."
    ),
    delay: Optional[float] = typer.Option(
        None, "--delay", min=0.0, help="Seconds to pause between batches (default from settings)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the run summary as JSON."),
) -> None:
    """
    Translate every configured table and write the results back.
    """
    settings = get_settings()
    overrides = {}
    if batch_size is not None:
        overrides["batch_size"] = batch_size
    if delay is not None:
        overrides["batch_delay_seconds"] = delay
    if overrides:
        settings = settings.model_copy(update=overrides)
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    job = _load(settings, config)
    conn = _connect(job, settings)
    try:
        with TranslationClient(
            job.translation_api.url, timeout=settings.http_timeout_seconds
        ) as client:
            runner = TranslationJob(
                conn,
                schema=job.database.dbname,
                translator=client,
                config=RunConfig.from_settings(settings),
            )
            results = runner.run(job.translation_tables)
    finally:
        conn.close()

    _emit(results, as_json, title="Translation Run")


@app.command()
def check(
    config: Optional[Path] = ConfigOption,
    as_json: bool = typer.Option(False, "--json", help="Print the check summary as JSON."),
) -> None:
    """
    Verify the job file and every configured table and column, without writing.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    job = _load(settings, config)
    conn = _connect(job, settings)
    try:
        runner = TranslationJob(
            conn, schema=job.database.dbname, config=RunConfig.from_settings(settings)
        )
        results = runner.check(job.translation_tables)
    finally:
        conn.close()

    _emit(results, as_json, title="Configuration Check")
    if any(r.get("error") for r in results):
        raise typer.Exit(code=1)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
