"""Typed cell values and column checks shared by both resources."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Union

from sustainalytics.utils.errors import UnsupportedColumnError


class CellType(str, Enum):
    STRING = "string"
    I64 = "i64"
    JSONB = "jsonb"


class Jsonb(str):
    """A cell holding a serialized JSON document."""

    @classmethod
    def dump(cls, value: Any) -> Jsonb:
        return cls(json.dumps(value, separators=(",", ":"), ensure_ascii=False))

    def load(self) -> Any:
        return json.loads(self)


Cell = Union[str, int, Jsonb]
Row = dict[str, Union[Cell, None]]


def require_columns(
    columns: Iterable[str],
    schema: Mapping[str, CellType],
    resource: str,
) -> list[str]:
    """Return the requested columns, failing on the first one not in schema."""
    requested = list(columns)
    for column in requested:
        if column not in schema:
            raise UnsupportedColumnError(column, resource)
    return requested


def json_text(value: Any) -> str | None:
    """Render a scalar JSON value as text, unquoting strings.

    Numbers keep their JSON spelling so ids like 1001 become "1001".
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).strip('"')


def as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def as_i64(value: Any) -> int | None:
    # bool is an int subclass but never a valid id
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def as_jsonb(value: Any) -> Jsonb | None:
    if value is None:
        return None
    return Jsonb.dump(value)


def as_list(value: Any) -> list[Any]:
    """A nested collection that is absent or not a list counts as empty."""
    return value if isinstance(value, list) else []
