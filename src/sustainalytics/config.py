"""Configuration management for the Sustainalytics adapter.

Server options (credentials, base URL) come from the environment or .env;
named table definitions come from config/tables.yaml.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from sustainalytics.utils.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.sustainalytics.com"


class ServerOptions(BaseModel):
    """Server-level options shared by every table."""
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API root, no trailing path")
    client_id: str = Field(description="OAuth client ID")
    client_secret: str = Field(description="OAuth client secret")
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")

    @classmethod
    def from_options(cls, options: Mapping[str, str]) -> ServerOptions:
        """Build from a host key/value mapping, enforcing required keys."""
        for key in ("client_id", "client_secret"):
            if not options.get(key):
                raise ConfigurationError(f"missing server option {key}")

        base_url = options.get("base_url") or DEFAULT_BASE_URL
        timeout = options.get("timeout")
        try:
            timeout_value = float(timeout) if timeout else 30.0
        except ValueError:
            raise ConfigurationError(f"invalid server option timeout: {timeout!r}") from None

        return cls(
            base_url=base_url,
            client_id=options["client_id"],
            client_secret=options["client_secret"],
            timeout=timeout_value,
        )

    @property
    def api_root(self) -> str:
        return self.base_url.rstrip("/")


class Settings(BaseModel):
    """Application settings loaded from environment variables."""
    base_url: str = Field(default="", description="Override for the API base URL")
    client_id: str = Field(default="", description="OAuth client ID")
    client_secret: str = Field(default="", description="OAuth client secret")
    timeout: str = Field(default="", description="HTTP timeout in seconds")

    def server_options(self) -> ServerOptions:
        return ServerOptions.from_options(self.model_dump())


class Config(BaseModel):
    """Full application configuration."""
    settings: Settings
    tables: dict[str, dict[str, str]] = Field(default_factory=dict)

    def get_table(self, name: str) -> dict[str, str]:
        """Get the table-level options for a named table."""
        if name not in self.tables:
            available = ", ".join(sorted(self.tables)) or "none"
            raise ConfigurationError(f"unknown table '{name}'. Available: {available}")
        return dict(self.tables[name])

    @property
    def table_names(self) -> list[str]:
        return sorted(self.tables)


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (where config/ lives)."""
    current = Path(__file__).resolve().parent
    for parent in [current, *current.parents]:
        if (parent / "config" / "tables.yaml").exists():
            return parent
    return Path.cwd()


def _load_tables(project_root: Path) -> dict[str, dict[str, str]]:
    """Load named table definitions from tables.yaml."""
    tables_path = project_root / "config" / "tables.yaml"
    if not tables_path.exists():
        return {}

    with open(tables_path) as f:
        data = yaml.safe_load(f) or {}

    tables = {}
    for name, options in (data.get("tables") or {}).items():
        # YAML may type ids and Take as ints; host options are always strings
        tables[str(name)] = {str(k): str(v) for k, v in (options or {}).items()}
    return tables


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _load_settings() -> Settings:
    """Load settings from environment variables.

    Supports both SUSTAINALYTICS_* and legacy camelCase names from .env.
    """
    return Settings(
        base_url=_env("SUSTAINALYTICS_BASE_URL", "baseUrl"),
        client_id=_env("SUSTAINALYTICS_CLIENT_ID", "clientId"),
        client_secret=_env("SUSTAINALYTICS_CLIENT_SECRET", "clientSecret"),
        timeout=_env("SUSTAINALYTICS_TIMEOUT"),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and cache the full application configuration."""
    project_root = _find_project_root()

    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Config(settings=_load_settings(), tables=_load_tables(project_root))
