"""Naming helpers for operations, GraphQL identifiers and type names."""

from __future__ import annotations

import re
from typing import Union

HTTP_METHODS: tuple[str, ...] = (
    "get",
    "put",
    "post",
    "delete",
    "patch",
    "head",
    "options",
    "trace",
)

_SUCCESS_CODE_RE = re.compile(r"2\d\d")
_PATH_SANITIZE_RE = re.compile(r"[^0-9a-zA-Z_]+")
_GRAPHQL_INVALID_CHAR_RE = re.compile(r"[^_a-zA-Z0-9]")


def is_success_response(code: Union[str, int]) -> bool:
    """Return whether a response status code is a 2xx code.

    YAML documents may carry status codes as integers, so both forms are accepted.
    """
    return _SUCCESS_CODE_RE.fullmatch(str(code)) is not None


def generate_operation_id(path: str, method: str) -> str:
    """Derive an operation id from an HTTP method and path template.

    Every run of characters outside ``[0-9a-zA-Z_]`` becomes one underscore,
    so ``("/users", "get")`` yields ``get__users``.
    """
    return f"{method.lower()}_{_PATH_SANITIZE_RE.sub('_', path)}"


def endpoint_fallback_name(path: str, method: str) -> str:
    """Endpoint name used by the app config when an operation has no operationId."""
    return f"{method.upper()}_{_PATH_SANITIZE_RE.sub('_', path)}"


def sanitize_graphql_name(name: str) -> str:
    """Convert arbitrary text into a name matching ``/^[_a-zA-Z][_a-zA-Z0-9]*$/``."""
    sanitized = _GRAPHQL_INVALID_CHAR_RE.sub("_", name)
    if not sanitized:
        return "_"
    if sanitized[0].isdigit():
        sanitized = f"_{sanitized}"
    return sanitized


def capitalize_type_name(name: str) -> str:
    """Uppercase the first letter of a type name."""
    return name[:1].upper() + name[1:]


def singularize_and_capitalize(name: str) -> str:
    """Strip one trailing ``s`` and capitalize, e.g. ``pets`` -> ``Pet``."""
    if name.endswith("s"):
        name = name[:-1]
    return capitalize_type_name(name)
