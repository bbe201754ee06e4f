"""Error taxonomy and structured error output for the CLI host."""

from __future__ import annotations

import json
import sys

from rich.console import Console

console = Console(stderr=True)


class SustainalyticsError(RuntimeError):
    """Base class for every failure surfaced to the host."""

    code = "RUNTIME_ERROR"


class ConfigurationError(SustainalyticsError):
    """Missing or invalid option, unknown resource or column."""

    code = "CONFIG_ERROR"


class UnsupportedColumnError(ConfigurationError):
    """A requested column is not part of the resource's schema."""

    code = "UNSUPPORTED_COLUMN"

    def __init__(self, column: str, resource: str) -> None:
        super().__init__(f"unsupported column for {resource}: {column}")
        self.column = column
        self.resource = resource


class AuthenticationError(SustainalyticsError):
    """Token endpoint returned non-2xx or an unusable body."""

    code = "AUTH_ERROR"

    def __init__(self, message: str, status: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class UpstreamError(SustainalyticsError):
    """A data endpoint returned non-2xx, or could not be reached."""

    code = "UPSTREAM_ERROR"

    def __init__(self, message: str, status: int | None = None, url: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.url = url


class SchemaError(SustainalyticsError):
    """Response decoded fine but is not shaped as expected."""

    code = "SCHEMA_ERROR"


class ProtocolError(SustainalyticsError):
    """Response body is not valid JSON."""

    code = "PROTOCOL_ERROR"

    def __init__(self, message: str, status: int | None = None, url: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.url = url


# Actionable hints keyed by error substring
_ERROR_HINTS: list[tuple[str, str]] = [
    ("auth failed", "Check SUSTAINALYTICS_CLIENT_ID / SUSTAINALYTICS_CLIENT_SECRET in your .env"),
    ("invalid auth json", "Token endpoint answered with an unexpected body — verify base_url"),
    ("missing server option", "Set the missing credential in your environment or .env file"),
    ("invalid server option", "Fix the value in your environment or .env file"),
    ("missing required table option", "Add the option to config/tables.yaml or pass it on the command line"),
    ("unsupported table option", "DataServices accepts ProductId, PackageIds, FieldClusterIds, FieldIds and Take"),
    ("unknown endpoint", "Use DataServices or FieldMappingDefinitions as the table endpoint"),
    ("unknown table", "Check the table names in config/tables.yaml"),
    ("unsupported column", "Run `sustainalytics schema` to list valid columns"),
    ("status=401", "Credentials were rejected even after re-authenticating"),
    ("status=403", "Credentials lack access to this product or endpoint"),
    ("status=429", "Rate limited — wait a moment and retry, or lower Take"),
    ("not an array", "Upstream response shape changed — the API contract may have drifted"),
    ("invalid json", "Upstream returned a non-JSON body — the service may be degraded"),
    ("timed out", "Request timed out — try again or raise SUSTAINALYTICS_TIMEOUT"),
    ("connect", "Connection error — check network connectivity and base_url"),
]


def _get_hint(error_message: str) -> str | None:
    """Match an error message to an actionable hint."""
    lower = error_message.lower()
    for pattern, hint in _ERROR_HINTS:
        if pattern.lower() in lower:
            return hint
    return None


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout for machine consumption:
    {"error": true, "code": "UPSTREAM_ERROR", "message": "...", "hint": "..."}

    Also prints a human-readable error to stderr.
    """
    message = str(error)
    hint = _get_hint(message)
    code = getattr(error, "code", SustainalyticsError.code)

    error_obj: dict[str, object] = {
        "error": True,
        "code": code,
        "message": message,
    }
    status = getattr(error, "status", None)
    if status is not None:
        error_obj["status"] = status
    url = getattr(error, "url", "")
    if url:
        error_obj["url"] = url
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
