"""Loading of OpenAPI documents and endpoint selection files."""

from __future__ import annotations

from pathlib import Path

import yaml
from openapi_python_client.schema import OpenAPI
from pydantic import ValidationError

from .json_types import JSONValue, MutableJSONObject
from .selection import EndpointSelection


class OpenAPILoadError(RuntimeError):
    """Raised when a source OpenAPI document cannot be loaded."""


class SelectionLoadError(RuntimeError):
    """Raised when a selected endpoints file cannot be loaded."""


def read_yaml_file(path: Path, *, error_type: type[RuntimeError]) -> JSONValue:
    """Parse a YAML (or JSON) file, wrapping I/O and syntax failures in ``error_type``."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except OSError as exc:
        raise error_type(f"Failed to read file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise error_type(f"Failed to parse YAML in {path}: {exc}") from exc


def load_openapi_document(path: Path, *, validate: bool = False) -> MutableJSONObject:
    """Load an OpenAPI v3 document from YAML or JSON.

    Args:
        path (Path): Document path.
        validate (bool): Also validate the document against the OpenAPI model.

    Returns:
        MutableJSONObject: Parsed document.
    """
    payload = read_yaml_file(path, error_type=OpenAPILoadError)
    if not isinstance(payload, dict):
        raise OpenAPILoadError(
            f"OpenAPI document must deserialize to a mapping, got {type(payload)!r}"
        )

    ensure_supported_version(get_openapi_version(payload))

    if validate:
        try:
            OpenAPI.model_validate(payload)
        except ValidationError as exc:
            raise OpenAPILoadError(f"OpenAPI schema validation failed for {path}: {exc}") from exc

    return payload


def get_openapi_version(document: MutableJSONObject) -> str:
    """Return the declared OpenAPI version string."""
    version = document.get("openapi")
    if not isinstance(version, str) or not version.strip():
        raise OpenAPILoadError("Missing or invalid 'openapi' version field")
    return version.strip()


def ensure_supported_version(version: str) -> None:
    """Validate that the input version is OpenAPI v3+."""
    major_text = version.split(".", maxsplit=1)[0]
    try:
        major = int(major_text)
    except ValueError as exc:
        raise OpenAPILoadError(f"Unable to parse OpenAPI version: {version}") from exc
    if major < 3:
        raise OpenAPILoadError(f"Unsupported OpenAPI version {version}; only v3+ is supported")


def load_selected_endpoints(path: Path) -> dict[str, EndpointSelection]:
    """Load selected endpoints keyed ``METHOD_path``.

    Entries may omit ``path`` and ``method``; they are then taken from the key.
    """
    payload = read_yaml_file(path, error_type=SelectionLoadError)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise SelectionLoadError(
            f"Selections file {path} must deserialize to a mapping, got {type(payload)!r}"
        )

    endpoints: dict[str, EndpointSelection] = {}
    for key, entry in payload.items():
        if not isinstance(entry, dict):
            raise SelectionLoadError(f"Selection {key!r} in {path} must be a mapping")
        values = dict(entry)
        method, _, endpoint_path = str(key).partition("_")
        values.setdefault("method", method)
        values.setdefault("path", endpoint_path)
        try:
            endpoint = EndpointSelection.model_validate(values)
        except ValidationError as exc:
            raise SelectionLoadError(f"Invalid selection {key!r} in {path}: {exc}") from exc
        endpoints[endpoint.key] = endpoint
    return endpoints
