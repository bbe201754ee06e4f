"""Shared fixtures for the sustainalytics test suite."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from sustainalytics.config import Config, ServerOptions, Settings

BASE = "https://api.test"


def _response(status_code=200, json_data=None, text=None, bad_json=False):
    """Build a fake httpx.Response."""
    r = MagicMock()
    r.status_code = status_code
    r.text = text if text is not None else str(json_data)
    if bad_json:
        r.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        r.json.return_value = json_data
    return r


def _token_response(access_token="tok-abc", status_code=200):
    return _response(status_code, {
        "access_token": access_token,
        "token_type": "Bearer",
        "expires_in": 3600,
    })


def _product_tree(products=2, packages=2, clusters=2, fields=2):
    """A FieldMappingDefinitions document with uniform fan-out."""
    doc = []
    for p in range(products):
        prod = {"productId": p + 1, "productName": f"P{p + 1}", "packages": []}
        for g in range(packages):
            pkg = {"packageId": 10 * (p + 1) + g, "packageName": f"pkg{g}", "clusters": []}
            for s in range(clusters):
                cl = {
                    "fieldClusterId": 100 * (p + 1) + 10 * g + s,
                    "fieldClusterName": f"cl{s}",
                    "fieldDefinitions": [],
                }
                for f in range(fields):
                    cl["fieldDefinitions"].append({
                        "fieldId": 1000 * (p + 1) + 100 * g + 10 * s + f,
                        "fieldName": f"field{f}",
                        "fieldType": "Text",
                        "parentage": {"path": [p, g, s, f]},
                    })
                pkg["clusters"].append(cl)
            prod["packages"].append(pkg)
        doc.append(prod)
    return doc


@pytest.fixture
def server_options() -> ServerOptions:
    return ServerOptions(
        base_url=BASE + "/",
        client_id="test-client-id",
        client_secret="test-client-secret",
    )


@pytest.fixture
def fake_config() -> Config:
    return Config(
        settings=Settings(client_id="cid", client_secret="csec"),
        tables={
            "ratings": {"endpoint": "DataServices", "ProductId": "1", "Take": "5"},
            "mappings": {"endpoint": "FieldMappingDefinitions"},
            "broken": {"ProductId": "1"},
        },
    )


@pytest.fixture
def mock_fetcher():
    """MagicMock standing in for AuthenticatedFetcher."""
    fetcher = MagicMock()
    fetcher.url.side_effect = lambda path: BASE + path
    return fetcher


@pytest.fixture
def make_response():
    """Factory for fake httpx.Response objects."""
    return _response


@pytest.fixture
def token_response():
    return _token_response


@pytest.fixture
def product_tree():
    return _product_tree
