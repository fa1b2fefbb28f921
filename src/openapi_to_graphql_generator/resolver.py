"""Reference resolution against the root OpenAPI document."""

from __future__ import annotations

from typing import Any, Optional

from .naming import capitalize_type_name

_REF_KEYS: tuple[str, ...] = ("$ref", "$$ref")


def has_ref(node: Any) -> bool:
    """Return whether a node carries a string ``$ref`` or ``$$ref``."""
    if not isinstance(node, dict):
        return False
    return any(isinstance(node.get(key), str) for key in _REF_KEYS)


def ref_of(node: Any) -> Optional[str]:
    """Return the reference string of a node, preferring ``$ref`` over ``$$ref``."""
    if not isinstance(node, dict):
        return None
    for key in _REF_KEYS:
        value = node.get(key)
        if isinstance(value, str):
            return value
    return None


def get_ref_name(ref: Any) -> str:
    """Extract the trailing schema name from a reference.

    Accepts full-path (``#/components/schemas/Pet``), hash-prefixed (``#Pet``)
    and bare (``Pet``) forms. Empty or malformed refs yield ``""``.
    """
    if not isinstance(ref, str) or not ref:
        return ""
    return ref.rsplit("/", 1)[-1].lstrip("#")


def component_schemas(document: Any) -> dict[str, Any]:
    """Return ``components.schemas`` of a document, or an empty mapping."""
    if not isinstance(document, dict):
        return {}
    components = document.get("components")
    if not isinstance(components, dict):
        return {}
    schemas = components.get("schemas")
    if not isinstance(schemas, dict):
        return {}
    return schemas


def component_schema(document: Any, name: str) -> Optional[dict[str, Any]]:
    """Look up one named schema in ``components.schemas``."""
    schema = component_schemas(document).get(name)
    return schema if isinstance(schema, dict) else None


def resolve_ref(ref: Any, document: Any) -> Optional[dict[str, Any]]:
    """Resolve a schema reference, returning None when it cannot be found."""
    name = get_ref_name(ref)
    if not name:
        return None
    return component_schema(document, name)


def get_preferred_name(schema: Any) -> Optional[str]:
    """Pick the type name a schema asks for.

    Preference order: capitalized ``xml.name``, then the ``$ref`` name, then the
    ``$$ref`` name.
    """
    if not isinstance(schema, dict):
        return None
    xml = schema.get("xml")
    if isinstance(xml, dict):
        xml_name = xml.get("name")
        if isinstance(xml_name, str) and xml_name:
            return capitalize_type_name(xml_name)
    for key in _REF_KEYS:
        name = get_ref_name(schema.get(key))
        if name:
            return name
    return None


def resolve_pointer(node: Any, document: Any) -> Any:
    """Inline a local ``#/...`` reference object such as a shared parameter.

    Nodes without a reference are returned unchanged; unresolvable or non-local
    references yield None.
    """
    ref = node.get("$ref") if isinstance(node, dict) else None
    if not isinstance(ref, str):
        return node
    if not ref.startswith("#/"):
        return None

    current: Any = document
    for token in ref[2:].split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if not isinstance(current, dict) or token not in current:
            return None
        current = current[token]
    return current


def resolve_schema_node(node: Any, document: Any) -> Optional[dict[str, Any]]:
    """Return the schema a reference node stands for.

    ``$ref`` nodes resolve through ``components.schemas``. A ``$$ref`` node is an
    already dereferenced schema that remembers its origin, so when its name does
    not resolve the node itself is used with the marker removed.
    """
    if not isinstance(node, dict):
        return None
    if isinstance(node.get("$ref"), str):
        return resolve_ref(node["$ref"], document)
    resolved = resolve_ref(node.get("$$ref"), document)
    if resolved is not None:
        return resolved
    inline = {key: value for key, value in node.items() if key not in _REF_KEYS}
    return inline or None
