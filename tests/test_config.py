"""Tests for config.py — server options, table lookup, env helpers, tables.yaml."""
import pytest

from sustainalytics.config import (
    DEFAULT_BASE_URL,
    ServerOptions,
    Settings,
    _env,
    _load_settings,
    _load_tables,
)
from sustainalytics.utils.errors import ConfigurationError


# ── ServerOptions.from_options ───────────────────────────────────────

def test_server_options_defaults():
    opts = ServerOptions.from_options({"client_id": "id", "client_secret": "sec"})
    assert opts.base_url == DEFAULT_BASE_URL
    assert opts.timeout == 30.0


def test_server_options_base_url_override():
    opts = ServerOptions.from_options({
        "client_id": "id", "client_secret": "sec", "base_url": "https://sandbox.example/",
    })
    assert opts.api_root == "https://sandbox.example"


@pytest.mark.parametrize("missing", ["client_id", "client_secret"])
def test_server_options_require_credentials(missing):
    options = {"client_id": "id", "client_secret": "sec"}
    options[missing] = ""
    with pytest.raises(ConfigurationError, match=f"missing server option {missing}"):
        ServerOptions.from_options(options)


def test_server_options_invalid_timeout():
    with pytest.raises(ConfigurationError, match="timeout"):
        ServerOptions.from_options({"client_id": "a", "client_secret": "b", "timeout": "soon"})


def test_settings_to_server_options():
    opts = Settings(client_id="a", client_secret="b", timeout="5").server_options()
    assert opts.timeout == 5.0
    assert opts.base_url == DEFAULT_BASE_URL


# ── get_table ────────────────────────────────────────────────────────

def test_get_table_found(fake_config):
    assert fake_config.get_table("ratings")["ProductId"] == "1"


def test_get_table_returns_copy(fake_config):
    fake_config.get_table("ratings")["ProductId"] = "changed"
    assert fake_config.get_table("ratings")["ProductId"] == "1"


def test_get_table_unknown(fake_config):
    with pytest.raises(ConfigurationError, match="unknown table 'nope'. Available: broken, mappings, ratings"):
        fake_config.get_table("nope")


def test_table_names_sorted(fake_config):
    assert fake_config.table_names == ["broken", "mappings", "ratings"]


# ── _load_tables ─────────────────────────────────────────────────────

def test_load_tables_stringifies_values(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "tables.yaml").write_text(
        "tables:\n"
        "  ratings:\n"
        "    endpoint: DataServices\n"
        "    ProductId: 1\n"
        "    Take: 5\n"
    )
    tables = _load_tables(tmp_path)
    assert tables == {"ratings": {"endpoint": "DataServices", "ProductId": "1", "Take": "5"}}


def test_load_tables_missing_file(tmp_path):
    assert _load_tables(tmp_path) == {}


def test_load_tables_empty_file(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "tables.yaml").write_text("")
    assert _load_tables(tmp_path) == {}


# ── _env helper ──────────────────────────────────────────────────────

def test_env_fallback_key(monkeypatch):
    monkeypatch.delenv("FOO", raising=False)
    monkeypatch.setenv("BAZ", "qux")
    assert _env("FOO", "BAZ") == "qux"


def test_env_default(monkeypatch):
    monkeypatch.delenv("FOO", raising=False)
    assert _env("FOO", default="fallback") == "fallback"


def test_env_strips_quotes_and_whitespace(monkeypatch):
    monkeypatch.setenv("FOO", '  "hello"  ')
    assert _env("FOO") == "hello"


# ── _load_settings ───────────────────────────────────────────────────

def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("SUSTAINALYTICS_CLIENT_ID", "cid")
    monkeypatch.setenv("SUSTAINALYTICS_CLIENT_SECRET", "csec")
    monkeypatch.setenv("SUSTAINALYTICS_BASE_URL", "https://alt.example")
    settings = _load_settings()
    assert settings.client_id == "cid"
    assert settings.client_secret == "csec"
    assert settings.server_options().api_root == "https://alt.example"


def test_load_settings_legacy_names(monkeypatch):
    monkeypatch.delenv("SUSTAINALYTICS_CLIENT_ID", raising=False)
    monkeypatch.delenv("SUSTAINALYTICS_CLIENT_SECRET", raising=False)
    monkeypatch.setenv("clientId", "legacy-id")
    monkeypatch.setenv("clientSecret", "legacy-sec")
    settings = _load_settings()
    assert settings.client_id == "legacy-id"
    assert settings.client_secret == "legacy-sec"
