from __future__ import annotations

from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from table_translator.domain.models import TableResult


def summarize(results: List[TableResult]) -> Dict[str, int]:
    """
    Totals across tables: records seen, translated, skipped, failed, and the
    number of tables that could not be processed at all.
    """
    totals = {"records": 0, "translated": 0, "skipped": 0, "failed": 0, "table_errors": 0}
    for res in results:
        for key in ("records", "translated", "skipped", "failed"):
            totals[key] += res.get(key, 0) or 0
        if res.get("error"):
            totals["table_errors"] += 1
    return totals


def print_results(
    results: List[TableResult],
    title: str = "Translation Run",
    console: Optional[Console] = None,
) -> None:
    """
    Render per-table results as a rich table, in configuration order.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No tables configured.[/yellow]")
        return

    totals = summarize(results)
    table = Table(
        title=title,
        box=box.ROUNDED,
        caption=(
            f"{totals['translated']:,} translated │ {totals['skipped']:,} skipped │ "
            f"{totals['failed']:,} failed │ {totals['table_errors']} table error(s)"
        ),
    )

    table.add_column("Table", style="cyan", no_wrap=True)
    table.add_column("Records", justify="right", style="magenta")
    table.add_column("Batches", justify="right", style="blue")
    table.add_column("Translated", justify="right", style="bold green")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Error", style="red")

    for res in results:
        table.add_row(
            res.get("table", "Unknown"),
            f"{res.get('records', 0):,}",
            str(res.get("batches", 0)),
            f"{res.get('translated', 0):,}",
            f"{res.get('skipped', 0):,}",
            f"{res.get('failed', 0):,}",
            res.get("error") or "",
        )

    console.print(table)


__all__ = ["print_results", "summarize"]
