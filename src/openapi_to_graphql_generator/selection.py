"""Selection state: endpoint selections and dotted attribute paths."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from .json_types import AttributeSelection, SelectionMap


class EndpointSelection(BaseModel):
    """One selected REST endpoint and the attributes chosen for its response type."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str
    method: str
    type_name: str = Field(alias="typeName")
    selected_attrs: dict[str, bool] = Field(default_factory=dict, alias="selectedAttrs")

    @property
    def key(self) -> str:
        """External key of the selection, ``METHOD_path``."""
        return endpoint_key(self.method, self.path)


SelectedEndpoints: TypeAlias = Mapping[str, EndpointSelection]


def endpoint_key(method: str, path: str) -> str:
    """Build the ``METHOD_path`` key used for selected endpoints."""
    return f"{method.upper()}_{path}"


def collect_paths(value: Any, prefix: Sequence[str] = ()) -> list[str]:
    """Enumerate every reachable dotted key path of a plain value tree.

    Arrays contribute their own ``"0"`` path and only their first element is
    descended into. Primitives and None contribute no paths.
    """
    if isinstance(value, list):
        if not value:
            return []
        item_prefix = [*prefix, "0"]
        return [".".join(item_prefix), *collect_paths(value[0], item_prefix)]
    if not isinstance(value, dict):
        return []

    paths: list[str] = []
    for key, child in value.items():
        current = [*prefix, str(key)]
        paths.append(".".join(current))
        if isinstance(child, (dict, list)):
            paths.extend(collect_paths(child, current))
    return paths


def toggle_attribute(
    selection: Mapping[str, AttributeSelection],
    type_name: str,
    path: Sequence[str],
) -> SelectionMap:
    """Return a copy of the selection with one attribute path flipped."""
    updated = copy_selection(selection)
    type_attrs = updated.setdefault(type_name, {})
    key = ".".join(path)
    type_attrs[key] = not type_attrs.get(key, False)
    return updated


def select_all_attributes(
    selection: Mapping[str, AttributeSelection],
    type_name: str,
    sample: Any,
) -> SelectionMap:
    """Select every path of a sample value, or clear the type when all are selected."""
    updated = copy_selection(selection)
    all_paths = collect_paths(sample)
    current = updated.get(type_name, {})
    if all(current.get(path) for path in all_paths):
        updated[type_name] = {}
    else:
        updated[type_name] = {path: True for path in all_paths}
    return updated


def selection_from_endpoints(endpoints: Iterable[EndpointSelection]) -> SelectionMap:
    """Merge endpoint-scoped attribute selections into one type-keyed selection map.

    A path selected by any endpoint stays selected; an explicit ``False`` is kept
    only when no endpoint selects the path.
    """
    merged: SelectionMap = {}
    for endpoint in endpoints:
        type_attrs = merged.setdefault(endpoint.type_name, {})
        for path, selected in endpoint.selected_attrs.items():
            if selected:
                type_attrs[path] = True
            else:
                type_attrs.setdefault(path, False)
    return merged


def copy_selection(selection: Mapping[str, Mapping[str, bool]]) -> SelectionMap:
    """Copy a two-level selection map."""
    return {type_name: dict(attrs) for type_name, attrs in selection.items()}


def selected_paths(attrs: Mapping[str, bool]) -> tuple[str, ...]:
    """Paths marked ``True``, in insertion order."""
    return tuple(path for path, selected in attrs.items() if selected is True)
