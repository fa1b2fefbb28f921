"""JSON-compatible and selection typing aliases shared across the project."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeAlias, Union

JSONPrimitive: TypeAlias = Union[str, int, float, bool, None]
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | Mapping[str, "JSONValue"]
MutableJSONObject: TypeAlias = dict[str, JSONValue]

AttributeSelection: TypeAlias = dict[str, bool]
SelectionMap: TypeAlias = dict[str, AttributeSelection]
