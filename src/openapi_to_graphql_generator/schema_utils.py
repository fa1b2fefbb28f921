"""Shared helpers for OpenAPI schema shape operations."""

from __future__ import annotations

from collections.abc import Callable
from copy import deepcopy
from typing import Any, Optional

from .resolver import has_ref, ref_of, resolve_ref

_PRIMITIVE_TYPES = frozenset({"string", "integer", "number", "boolean"})


def schema_type(schema: Any) -> Optional[str]:
    """Return the declared ``type`` of a schema when it is a plain string."""
    if not isinstance(schema, dict):
        return None
    declared = schema.get("type")
    return declared if isinstance(declared, str) else None


def is_object_schema(schema: Any) -> bool:
    """Return whether a schema behaves as an object schema."""
    if not isinstance(schema, dict):
        return False
    if schema.get("type") == "object":
        return True
    if isinstance(schema.get("properties"), dict):
        return True
    all_of = schema.get("allOf")
    if isinstance(all_of, list) and all_of:
        return all(isinstance(item, dict) and is_object_schema(item) for item in all_of)
    return False


def is_array_schema(schema: Any) -> bool:
    """Return whether a schema describes an array."""
    return schema_type(schema) == "array"


def is_primitive_schema(schema: Any) -> bool:
    """Return whether a schema declares a primitive type (string, integer, number, boolean)."""
    return schema_type(schema) in _PRIMITIVE_TYPES


def array_items(schema: Any) -> Optional[dict[str, Any]]:
    """Return the ``items`` schema of an array schema."""
    if not isinstance(schema, dict):
        return None
    items = schema.get("items")
    return items if isinstance(items, dict) else None


def object_properties(schema: Any) -> dict[str, Any]:
    """Return the declared properties of a schema, or an empty mapping."""
    if not isinstance(schema, dict):
        return {}
    properties = schema.get("properties")
    return properties if isinstance(properties, dict) else {}


def expand_all_of(schema: dict[str, Any], document: Any) -> dict[str, Any]:
    """Merge an ``allOf`` composition, inlining ``$ref`` members from the document.

    Schemas without ``allOf`` are returned unchanged.
    """
    all_of = schema.get("allOf")
    if not isinstance(all_of, list) or not all_of:
        return schema

    def _inline_member(member: dict[str, Any]) -> dict[str, Any]:
        if not has_ref(member):
            return member
        resolved = resolve_ref(ref_of(member), document)
        return deepcopy(resolved) if resolved is not None else member

    return merge_all_of_schema(schema, normalize_item=_inline_member)


def merge_all_of_schema(
    schema: dict[str, Any],
    *,
    normalize_item: Optional[Callable[[dict[str, Any]], dict[str, Any]]] = None,
) -> dict[str, Any]:
    """Merge object-only ``allOf`` chains into one object schema when possible.

    Args:
        schema (dict[str, Any]): Schema that may contain an ``allOf`` chain.
        normalize_item (Optional[Callable[[dict[str, Any]], dict[str, Any]]]):
            Optional normalization callback applied to each member before merge.

    Returns:
        dict[str, Any]: Merged object schema, or a copy of the original shape
        when a member is not an object schema.
    """
    all_of = schema.get("allOf")
    if not isinstance(all_of, list) or not all_of:
        return deepcopy(dict(schema))

    merged: dict[str, Any] = {key: value for key, value in schema.items() if key != "allOf"}
    members = _collect_mergeable_members(all_of, normalize_item=normalize_item)
    if members is None:
        return deepcopy(dict(schema))

    merged_properties: dict[str, Any] = {}
    merged_required: list[str] = []
    for member in members:
        merged_properties.update(deepcopy(object_properties(member)))
        required = member.get("required")
        if isinstance(required, list):
            for name in required:
                if isinstance(name, str) and name not in merged_required:
                    merged_required.append(name)
        if "description" not in merged and isinstance(member.get("description"), str):
            merged["description"] = member["description"]

    merged_properties.update(deepcopy(object_properties(merged)))
    merged["type"] = "object"
    merged["properties"] = merged_properties
    if merged_required:
        merged["required"] = merged_required
    return merged


def _collect_mergeable_members(
    all_of: list[Any],
    *,
    normalize_item: Optional[Callable[[dict[str, Any]], dict[str, Any]]],
) -> Optional[list[dict[str, Any]]]:
    members: list[dict[str, Any]] = []
    for item in all_of:
        if not isinstance(item, dict):
            return None
        member = deepcopy(item)
        if normalize_item is not None:
            member = normalize_item(member)
        merged_member = merge_all_of_schema(member, normalize_item=normalize_item)
        if not is_object_schema(merged_member):
            return None
        members.append(merged_member)
    return members
