"""Output formatting for scanned rows."""

from __future__ import annotations

import json
import sys
from enum import Enum
from typing import Any

from rich.console import Console
from rich.table import Table

from sustainalytics.models.cells import Jsonb

console = Console(stderr=True)


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def print_output(
    data: list[dict[str, Any]] | dict[str, Any],
    fmt: OutputFormat = OutputFormat.TABLE,
    columns: list[str] | None = None,
    title: str | None = None,
) -> None:
    """Print data in the requested format.

    Args:
        data: The data to display (list of dicts or single dict).
        fmt: Output format (table, json, csv).
        columns: Which columns to show in table/csv mode. None = all.
        title: Optional title for table output.
    """
    if fmt == OutputFormat.JSON:
        print_json(data)
    elif fmt == OutputFormat.CSV:
        print_csv(data, columns)
    else:
        print_table(data, columns, title)


def _json_default(value: Any) -> Any:
    return str(value)


def _expand(value: Any) -> Any:
    """Inline JSONB cells as documents instead of escaped strings."""
    if isinstance(value, Jsonb):
        return value.load()
    if isinstance(value, dict):
        return {k: _expand(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand(v) for v in value]
    return value


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    json.dump(_expand(data), sys.stdout, indent=2, default=_json_default)
    sys.stdout.write("\n")


def _cell_text(value: Any) -> str:
    return "" if value is None else str(value)


def print_table(
    data: list[dict[str, Any]] | dict[str, Any],
    columns: list[str] | None = None,
    title: str | None = None,
) -> None:
    """Print data as a Rich table."""
    if isinstance(data, dict):
        data = [data]

    if not data:
        console.print("[dim]No rows.[/dim]")
        return

    if columns is None:
        columns = list(data[0].keys())

    table = Table(title=title, show_lines=False)
    for col in columns:
        table.add_column(col, overflow="fold")

    for row in data:
        table.add_row(*[_cell_text(row.get(col)) for col in columns])

    console.print(table)


def print_csv(
    data: list[dict[str, Any]] | dict[str, Any],
    columns: list[str] | None = None,
) -> None:
    """Print data as CSV to stdout."""
    import csv

    if isinstance(data, dict):
        data = [data]

    if not data:
        return

    if columns is None:
        columns = list(data[0].keys())

    writer = csv.DictWriter(sys.stdout, fieldnames=columns, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in data:
        writer.writerow({k: _cell_text(row.get(k)) for k in columns})
