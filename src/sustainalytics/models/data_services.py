"""DataServices listing models."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from sustainalytics.models.cells import CellType, Row, as_jsonb, as_str, json_text
from sustainalytics.utils.errors import ConfigurationError

RESOURCE = "DataServices"

DEFAULT_TAKE = 10
MAX_TAKE = 10

ALLOWED_OPTIONS = ("endpoint", "ProductId", "PackageIds", "FieldClusterIds", "FieldIds", "Take")

COLUMNS: dict[str, CellType] = {
    "entityId": CellType.STRING,
    "entityName": CellType.STRING,
    "fields": CellType.JSONB,
}


def normalize_take(raw: str | None) -> int:
    """Resolve the page size: default when absent/invalid/< 1, clamp to MAX_TAKE."""
    if raw is None:
        return DEFAULT_TAKE
    try:
        n = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_TAKE
    if n < 1:
        return DEFAULT_TAKE
    return n if n < MAX_TAKE else MAX_TAKE


class DataServicesParams(BaseModel):
    """Immutable query parameters for one DataServices scan."""
    product_id: str = Field(alias="ProductId")
    package_ids: str | None = Field(default=None, alias="PackageIds")
    field_cluster_ids: str | None = Field(default=None, alias="FieldClusterIds")
    field_ids: str | None = Field(default=None, alias="FieldIds")
    take: int = Field(default=DEFAULT_TAKE, ge=1, le=MAX_TAKE, alias="Take")

    model_config = {"populate_by_name": True, "frozen": True}

    @classmethod
    def from_options(cls, options: Mapping[str, str]) -> DataServicesParams:
        """Validate table-level options and build the query."""
        for key in options:
            if key not in ALLOWED_OPTIONS:
                raise ConfigurationError(f"unsupported table option for {RESOURCE}: {key}")

        product_id = options.get("ProductId")
        if product_id is None:
            raise ConfigurationError("missing required table option ProductId")

        return cls(
            product_id=product_id,
            package_ids=options.get("PackageIds"),
            field_cluster_ids=options.get("FieldClusterIds"),
            field_ids=options.get("FieldIds"),
            take=normalize_take(options.get("Take")),
        )


def project_entity(src: Any, columns: list[str]) -> Row:
    """Project a raw DataService element onto the requested columns."""
    item = src if isinstance(src, dict) else {}
    row: Row = {}
    for column in columns:
        if column == "entityId":
            row[column] = json_text(item.get("entityId"))
        elif column == "entityName":
            row[column] = as_str(item.get("entityName"))
        elif column == "fields":
            row[column] = as_jsonb(item.get("fields"))
    return row
