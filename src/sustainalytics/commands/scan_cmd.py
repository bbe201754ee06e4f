"""CLI commands that scan a resource and print its rows."""

from __future__ import annotations

from itertools import islice
from typing import Annotated

import typer
from rich.console import Console

from sustainalytics.config import get_config
from sustainalytics.models import data_services, field_mappings
from sustainalytics.session import SCHEMAS, ScanSession
from sustainalytics.utils.errors import ConfigurationError, SustainalyticsError, handle_error
from sustainalytics.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="scan", help="Scan Sustainalytics resources as rows.")

ColumnsOpt = Annotated[
    list[str] | None,
    typer.Option("--columns", "-c", help="Column(s) to project. Default: all"),
]
LimitOpt = Annotated[int | None, typer.Option("--limit", "-l", min=0, help="Stop after N rows")]
OutputOpt = Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Show request details")]


def _build_session(verbose: bool = False) -> ScanSession:
    options = get_config().settings.server_options()
    return ScanSession(options, verbose=verbose)


def _run(
    resource: str,
    options: dict[str, str],
    columns: list[str] | None,
    limit: int | None,
    output: OutputFormat,
    verbose: bool,
) -> None:
    """Drive one scan through a session and print the collected rows."""
    try:
        if resource not in SCHEMAS:
            raise ConfigurationError(f"unknown endpoint: {resource}")
        columns = columns or list(SCHEMAS[resource])
        session = _build_session(verbose)
    except SustainalyticsError as e:
        handle_error(e)
        raise typer.Exit(1)

    try:
        rows = list(islice(session.scan(resource, options, columns), limit))
        console.print(f"[dim]Fetched {len(rows)} rows[/dim]")
        print_output(rows, output, columns=columns, title=resource)
    except SustainalyticsError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        session.close()


@app.command("table")
def scan_table(
    name: Annotated[str, typer.Argument(help="Table name from config/tables.yaml")],
    columns: ColumnsOpt = None,
    limit: LimitOpt = None,
    output: OutputOpt = OutputFormat.TABLE,
    verbose: VerboseOpt = False,
) -> None:
    """Scan a table defined in config/tables.yaml."""
    try:
        options = get_config().get_table(name)
        resource = options.get("endpoint")
        if not resource:
            raise ConfigurationError(f"missing table option endpoint for table '{name}'")
    except SustainalyticsError as e:
        handle_error(e)
        raise typer.Exit(1)

    _run(resource, options, columns, limit, output, verbose)


@app.command("data-services")
def scan_data_services(
    product_id: Annotated[str, typer.Option("--product-id", "-p", help="ProductId (required)")] = ...,
    package_ids: Annotated[str | None, typer.Option("--package-ids", help="Comma-separated PackageIds")] = None,
    field_cluster_ids: Annotated[str | None, typer.Option("--field-cluster-ids", help="Comma-separated FieldClusterIds")] = None,
    field_ids: Annotated[str | None, typer.Option("--field-ids", help="Comma-separated FieldIds")] = None,
    take: Annotated[str | None, typer.Option("--take", "-t", help="Page size (1-10, default 10)")] = None,
    columns: ColumnsOpt = None,
    limit: LimitOpt = None,
    output: OutputOpt = OutputFormat.TABLE,
    verbose: VerboseOpt = False,
) -> None:
    """Scan the paginated DataService listing."""
    options = {"ProductId": product_id}
    if package_ids is not None:
        options["PackageIds"] = package_ids
    if field_cluster_ids is not None:
        options["FieldClusterIds"] = field_cluster_ids
    if field_ids is not None:
        options["FieldIds"] = field_ids
    if take is not None:
        options["Take"] = take

    _run(data_services.RESOURCE, options, columns, limit, output, verbose)


@app.command("field-mappings")
def scan_field_mappings(
    columns: ColumnsOpt = None,
    limit: LimitOpt = None,
    output: OutputOpt = OutputFormat.TABLE,
    verbose: VerboseOpt = False,
) -> None:
    """Scan FieldMappingDefinitions flattened to one row per field."""
    _run(field_mappings.RESOURCE, {}, columns, limit, output, verbose)
