"""FieldMappingDefinitions row model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from sustainalytics.models.cells import CellType, Jsonb, Row

RESOURCE = "FieldMappingDefinitions"

COLUMNS: dict[str, CellType] = {
    "product_id": CellType.STRING,
    "product_name": CellType.STRING,
    "package_id": CellType.I64,
    "package_name": CellType.STRING,
    "field_cluster_id": CellType.I64,
    "field_cluster_name": CellType.STRING,
    "field_id": CellType.I64,
    "field_name": CellType.STRING,
    "description": CellType.STRING,
    "field_type": CellType.STRING,
    "field_length": CellType.STRING,
    "possible_values": CellType.STRING,
    "grouping": CellType.STRING,
    "parentage": CellType.JSONB,
}


class FieldMappingRow(BaseModel):
    """One field definition with its product/package/cluster ancestry."""
    product_id: str | None = None
    product_name: str | None = None
    package_id: int | None = None
    package_name: str | None = None
    field_cluster_id: int | None = None
    field_cluster_name: str | None = None
    field_id: int | None = None
    field_name: str | None = None
    description: str | None = None
    field_type: str | None = None
    field_length: str | None = None
    possible_values: str | None = None
    grouping: str | None = None
    parentage: Any = None

    model_config = {"frozen": True}

    def project(self, columns: list[str]) -> Row:
        row: Row = {}
        for column in columns:
            value = getattr(self, column)
            if column == "parentage" and value is not None:
                value = Jsonb.dump(value)
            row[column] = value
        return row
