"""Tests for services/field_mappings.py — tree flattening and row serving."""
import pytest

from sustainalytics.models.field_mappings import COLUMNS
from sustainalytics.services.field_mappings import (
    FieldMappingLoader,
    FieldMappingScan,
    flatten_products,
)
from sustainalytics.utils.errors import SchemaError, UpstreamError


# ── flatten_products ─────────────────────────────────────────────────

@pytest.mark.parametrize("shape", [(1, 1, 1, 1), (2, 3, 1, 4), (3, 2, 2, 2), (2, 0, 3, 3)])
def test_row_count_is_product_of_fanout(shape, product_tree):
    r, g, s, leaves = shape
    rows = flatten_products(product_tree(r, g, s, leaves))
    assert len(rows) == r * g * s * leaves


def test_rows_carry_their_own_lineage(product_tree):
    for row in flatten_products(product_tree(2, 2, 2, 2)):
        assert row.product_id
        p = int(row.product_id)
        assert row.package_id // 10 == p
        assert row.field_cluster_id // 100 == p
        assert row.field_id // 1000 == p
        assert row.parentage["path"][0] == p - 1


def test_document_order(product_tree):
    rows = flatten_products(product_tree(2, 2, 1, 2))
    assert [r.field_id for r in rows] == sorted(r.field_id for r in rows)
    assert rows[0].product_name == "P1"
    assert rows[-1].product_name == "P2"


def test_missing_levels_are_empty():
    doc = [
        {"productId": "A"},
        {"productId": "B", "packages": None},
        {"productId": "C", "packages": [{"packageId": 1}]},
        {"productId": "D", "packages": [{"packageId": 2, "clusters": [{"fieldClusterId": 3}]}]},
        {"productId": "E", "packages": [{"clusters": [{"fieldDefinitions": [{"fieldId": 9}]}]}]},
    ]
    rows = flatten_products(doc)

    assert len(rows) == 1
    row = rows[0]
    assert row.product_id == "E"
    assert row.product_name is None
    assert row.package_id is None
    assert row.field_cluster_name is None
    assert row.field_id == 9


def test_missing_optional_fields_are_none_not_empty():
    doc = [{"packages": [{"clusters": [{"fieldDefinitions": [{}]}]}]}]
    row = flatten_products(doc)[0]
    assert all(value is None for value in row.model_dump().values())


def test_wrongly_typed_values_are_none():
    doc = [{
        "productId": 5,
        "productName": 7,
        "packages": [{
            "packageId": "12",
            "clusters": [{
                "fieldClusterId": 1.5,
                "fieldDefinitions": [{"fieldId": True, "fieldLength": 255}],
            }],
        }],
    }]
    row = flatten_products(doc)[0]
    assert row.product_id == "5"
    assert row.product_name is None
    assert row.package_id is None
    assert row.field_cluster_id is None
    assert row.field_id is None
    assert row.field_length is None


def test_rows_are_snapshots(product_tree):
    doc = product_tree(1, 1, 1, 2)
    rows = flatten_products(doc)
    doc[0]["productName"] = "renamed"
    assert rows[0].product_name == "P1"
    assert rows[0].field_id != rows[1].field_id
    assert rows[0].field_cluster_id == rows[1].field_cluster_id


# ── FieldMappingLoader ───────────────────────────────────────────────

def test_load_all_single_fetch(mock_fetcher, product_tree):
    mock_fetcher.get_json.return_value = (200, product_tree(1, 2, 2, 2))

    rows = FieldMappingLoader(mock_fetcher).load_all()
    assert len(rows) == 8
    mock_fetcher.get_json.assert_called_once_with("https://api.test/v2/FieldMappingDefinitions")


def test_load_all_is_idempotent(mock_fetcher, product_tree):
    mock_fetcher.get_json.return_value = (200, product_tree(2, 2, 2, 2))
    loader = FieldMappingLoader(mock_fetcher)

    assert loader.load_all() == loader.load_all()


def test_load_all_non_2xx(mock_fetcher):
    mock_fetcher.get_json.return_value = (500, {"error": "boom"})

    with pytest.raises(UpstreamError, match="status=500") as exc:
        FieldMappingLoader(mock_fetcher).load_all()
    assert exc.value.url.endswith("/v2/FieldMappingDefinitions")


def test_load_all_non_array(mock_fetcher):
    mock_fetcher.get_json.return_value = (200, {"products": []})

    with pytest.raises(SchemaError):
        FieldMappingLoader(mock_fetcher).load_all()


# ── FieldMappingScan ─────────────────────────────────────────────────

def test_scan_serves_rows_by_index(product_tree):
    scan = FieldMappingScan(flatten_products(product_tree(1, 1, 1, 3)))
    cols = list(COLUMNS)

    served = [scan.next_row(cols) for _ in range(3)]
    assert [r["field_name"] for r in served] == ["field0", "field1", "field2"]
    assert served[0]["parentage"] == '{"path":[0,0,0,0]}'
    assert scan.next_row(cols) is None
    assert scan.next_row(cols) is None
