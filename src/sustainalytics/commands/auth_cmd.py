"""CLI commands for authentication checks."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from sustainalytics.auth import TokenStore
from sustainalytics.config import get_config
from sustainalytics.utils.errors import SustainalyticsError, handle_error
from sustainalytics.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="auth", help="Check API credentials.")


@app.callback()
def auth() -> None:
    """Check API credentials."""


@app.command()
def login(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Authenticate and display token metadata (never the token itself)."""
    try:
        options = get_config().settings.server_options()
    except SustainalyticsError as e:
        handle_error(e)
        raise typer.Exit(1)

    tokens = TokenStore(options)
    try:
        console.print(f"Authenticating against [bold]{options.api_root}[/bold]...", style="yellow")
        tokens.ensure()
        status = tokens.status()
        result = {
            "status": "authenticated",
            "token_type": status.token_type or "N/A",
            "scope": status.scope or "N/A",
            "expires_in": status.expires_in if status.expires_in is not None else "N/A",
            "issued_at": str(status.issued_at),
        }
        print_output(result, output, title="Authentication")
    except SustainalyticsError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        tokens.close()
