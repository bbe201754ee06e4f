"""CLI command for column schema introspection."""

from __future__ import annotations

from typing import Annotated

import typer

from sustainalytics.session import SCHEMAS
from sustainalytics.utils.errors import ConfigurationError, handle_error
from sustainalytics.utils.output import OutputFormat, print_output


def schema_rows(resource: str | None = None) -> list[dict[str, str]]:
    """One row per (resource, column) with its cell type."""
    if resource is not None and resource not in SCHEMAS:
        raise ConfigurationError(f"unknown endpoint: {resource}")

    names = [resource] if resource else list(SCHEMAS)
    return [
        {"resource": name, "column": column, "type": cell_type.value}
        for name in names
        for column, cell_type in SCHEMAS[name].items()
    ]


def schema(
    resource: Annotated[str | None, typer.Argument(help="DataServices or FieldMappingDefinitions")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """List resource columns and their cell types."""
    try:
        rows = schema_rows(resource)
    except ConfigurationError as e:
        handle_error(e)
        raise typer.Exit(1)
    print_output(rows, output, columns=["resource", "column", "type"], title="Column Schema")
