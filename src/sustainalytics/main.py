"""Sustainalytics CLI — entry point.

Scans the Sustainalytics REST API as tables: the paginated DataService
listing and the flattened FieldMappingDefinitions tree.
"""

from __future__ import annotations

import logging

import typer

from sustainalytics.commands.auth_cmd import app as auth_app
from sustainalytics.commands.scan_cmd import app as scan_app
from sustainalytics.commands.schema_cmd import schema

app = typer.Typer(
    name="sustainalytics",
    help="Query the Sustainalytics API as row sources.",
    no_args_is_help=True,
)

app.add_typer(auth_app, name="auth")
app.add_typer(scan_app, name="scan")
app.command("schema")(schema)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Sustainalytics CLI — authenticate and scan DataServices / FieldMappingDefinitions."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
