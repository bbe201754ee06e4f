"""FieldMappingDefinitions loader: flattens the product tree into rows."""

from __future__ import annotations

import logging
from typing import Any

from sustainalytics.client import AuthenticatedFetcher
from sustainalytics.models.cells import Row, as_i64, as_list, as_str, json_text
from sustainalytics.models.field_mappings import FieldMappingRow
from sustainalytics.utils.errors import SchemaError, UpstreamError

logger = logging.getLogger(__name__)

FIELD_MAPPINGS_PATH = "/v2/FieldMappingDefinitions"


def _obj(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def flatten_products(products: list[Any]) -> list[FieldMappingRow]:
    """Walk product -> packages -> clusters -> fieldDefinitions in document order.

    Emits one row per field definition. A missing or non-list collection at
    any level contributes no children.
    """
    rows: list[FieldMappingRow] = []

    for prod in map(_obj, products):
        product = {
            "product_id": json_text(prod.get("productId")),
            "product_name": as_str(prod.get("productName")),
        }

        for pkg in map(_obj, as_list(prod.get("packages"))):
            package = {
                **product,
                "package_id": as_i64(pkg.get("packageId")),
                "package_name": as_str(pkg.get("packageName")),
            }

            for cl in map(_obj, as_list(pkg.get("clusters"))):
                cluster = {
                    **package,
                    "field_cluster_id": as_i64(cl.get("fieldClusterId")),
                    "field_cluster_name": as_str(cl.get("fieldClusterName")),
                }

                for d in map(_obj, as_list(cl.get("fieldDefinitions"))):
                    rows.append(FieldMappingRow(
                        **cluster,
                        field_id=as_i64(d.get("fieldId")),
                        field_name=as_str(d.get("fieldName")),
                        description=as_str(d.get("description")),
                        field_type=as_str(d.get("fieldType")),
                        field_length=as_str(d.get("fieldLength")),
                        possible_values=as_str(d.get("possibleValues")),
                        grouping=as_str(d.get("grouping")),
                        parentage=d.get("parentage"),
                    ))

    return rows


class FieldMappingLoader:
    """Fetches the single FieldMappingDefinitions document."""

    def __init__(self, fetcher: AuthenticatedFetcher) -> None:
        self._fetcher = fetcher

    def load_all(self) -> list[FieldMappingRow]:
        url = self._fetcher.url(FIELD_MAPPINGS_PATH)
        status, body = self._fetcher.get_json(url)
        if not 200 <= status < 300:
            raise UpstreamError(
                f"FieldMappingDefinitions failed: status={status} url={url} body={body}",
                status=status,
                url=url,
            )
        if not isinstance(body, list):
            raise SchemaError("FieldMappingDefinitions not an array")

        rows = flatten_products(body)
        logger.info(f"FieldMappingDefinitions: {len(body)} products, {len(rows)} field rows")
        return rows


class FieldMappingScan:
    """Serves materialized field rows by index."""

    def __init__(self, rows: list[FieldMappingRow]) -> None:
        self.rows = rows
        self.index = 0

    def next_row(self, columns: list[str]) -> Row | None:
        if self.index >= len(self.rows):
            return None
        row = self.rows[self.index]
        self.index += 1
        return row.project(columns)
