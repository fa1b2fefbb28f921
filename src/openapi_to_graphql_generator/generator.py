"""High-level generator orchestration and the error boundary."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .app_config import CONFIG_ERROR, CONFIG_PLACEHOLDER, generate_app_config_yaml
from .assembler import SCHEMA_ERROR, SCHEMA_PLACEHOLDER, assemble_schema
from .enricher import enrich_selected_attributes
from .gen_logging import get_logger
from .loader import load_openapi_document, load_selected_endpoints
from .selection import EndpointSelection, SelectedEndpoints, selection_from_endpoints
from .settings import DEFAULT_REQUIRED_SCOPES, apply_scope_override, load_settings
from .writer import write_output

logger = get_logger(__name__)


@dataclass(frozen=True)
class GenerationRun:
    """Texts produced by one CLI generation run."""

    schema_sdl: str
    app_config_yaml: str
    warnings: tuple[str, ...]


def generate_graphql_schema(
    document: Any,
    selected_endpoints: SelectedEndpoints,
    required_scopes: Optional[Sequence[Sequence[str]]] = None,
) -> str:
    """Generate the SDL for the selected endpoints.

    Never raises: failures are logged and replaced by the error placeholder.

    Args:
        document (Any): Parsed OpenAPI document, or None.
        selected_endpoints (SelectedEndpoints): Endpoint selections keyed ``METHOD_path``.
        required_scopes (Optional[Sequence[Sequence[str]]]): Scope groups for
            ``@requiredScopes``; defaults to ``[["test"]]``.

    Returns:
        str: SDL text or one of the placeholder strings.
    """
    if not document or not selected_endpoints:
        return SCHEMA_PLACEHOLDER
    try:
        endpoints = list(selected_endpoints.values())
        selection = enrich_selected_attributes(selection_from_endpoints(endpoints), document)
        operations = {(endpoint.method.upper(), endpoint.path) for endpoint in endpoints}
        return assemble_schema(document, selection, _scopes_or_default(required_scopes), operations)
    except Exception:
        logger.exception("Error generating GraphQL schema")
        return SCHEMA_ERROR


def generate_graphql_schema_from_selections(
    document: Any,
    selection: Mapping[str, Mapping[str, bool]],
    required_scopes: Optional[Sequence[Sequence[str]]] = None,
) -> str:
    """Generate the SDL from a raw type-keyed selection map over all operations."""
    if not document:
        return SCHEMA_PLACEHOLDER
    try:
        enriched = enrich_selected_attributes(selection, document)
        return assemble_schema(document, enriched, _scopes_or_default(required_scopes))
    except Exception:
        logger.exception("Error generating GraphQL schema")
        return SCHEMA_ERROR


def generate_app_config(document: Any, selected_endpoints: SelectedEndpoints) -> str:
    """Generate the routing config; failures yield the error placeholder."""
    if not document or not selected_endpoints:
        return CONFIG_PLACEHOLDER
    try:
        return generate_app_config_yaml(document, selected_endpoints.values())
    except Exception:
        logger.exception("Error generating application config")
        return CONFIG_ERROR


def run_generation(
    *,
    input_path: Path,
    selections_path: Path,
    settings_path: Optional[Path] = None,
    scopes: Sequence[str] = (),
    schema_output: Optional[Path] = None,
    config_output: Optional[Path] = None,
    validate: bool = False,
) -> GenerationRun:
    """Load inputs, generate both documents and write the requested outputs.

    Args:
        input_path (Path): OpenAPI document.
        selections_path (Path): Selected endpoints file.
        settings_path (Optional[Path]): Optional settings file.
        scopes (Sequence[str]): ``--scope`` values overriding the settings.
        schema_output (Optional[Path]): Where to write the SDL.
        config_output (Optional[Path]): Where to write the config YAML.
        validate (bool): Validate the document against the OpenAPI model first.

    Returns:
        GenerationRun: Generated texts and warnings.
    """
    document = load_openapi_document(input_path, validate=validate)
    selected_endpoints = load_selected_endpoints(selections_path)
    settings = apply_scope_override(load_settings(settings_path), scopes)

    warnings = _missing_endpoint_warnings(document, selected_endpoints.values())
    schema_sdl = generate_graphql_schema(document, selected_endpoints, settings.required_scopes)
    app_config_yaml = generate_app_config(document, selected_endpoints)

    if schema_output is not None:
        write_output(schema_output, schema_sdl)
        logger.info("Wrote GraphQL schema to %s", schema_output)
    if config_output is not None:
        write_output(config_output, app_config_yaml)
        logger.info("Wrote application config to %s", config_output)

    return GenerationRun(
        schema_sdl=schema_sdl,
        app_config_yaml=app_config_yaml,
        warnings=tuple(warnings),
    )


def _scopes_or_default(
    required_scopes: Optional[Sequence[Sequence[str]]],
) -> Sequence[Sequence[str]]:
    if required_scopes is None:
        return DEFAULT_REQUIRED_SCOPES
    return required_scopes


def _missing_endpoint_warnings(
    document: Mapping[str, Any],
    endpoints: Iterable[EndpointSelection],
) -> list[str]:
    paths = document.get("paths")
    paths = paths if isinstance(paths, dict) else {}
    warnings: list[str] = []
    for endpoint in endpoints:
        path_item = paths.get(endpoint.path)
        if not isinstance(path_item, dict) or endpoint.method.lower() not in path_item:
            warnings.append(f"Selected endpoint {endpoint.key} is not defined in the document")
    return warnings
