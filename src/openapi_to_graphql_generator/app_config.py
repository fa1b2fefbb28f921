"""Companion routing config derived from the selected endpoints."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Optional

import yaml

from .gen_logging import get_logger
from .naming import endpoint_fallback_name
from .operations import collect_parameters
from .selection import EndpointSelection

logger = get_logger(__name__)

CONFIG_PLACEHOLDER = "# Application config YAML will appear here\n"
CONFIG_ERROR = "# Error generating application config\n"
CONFIG_VERSION = 1
DEFAULT_API_NAME = "Api"


def generate_app_config_yaml(
    document: Any,
    selected_endpoints: Iterable[EndpointSelection],
) -> str:
    """Render the routing config for the selected endpoints.

    Each endpoint becomes ``<Api>/<Endpoint>`` with its HTTP method, path
    template and path parameter names. Endpoints missing from the document are
    skipped.

    Args:
        document (Any): Parsed OpenAPI document, or None.
        selected_endpoints (Iterable[EndpointSelection]): Selected endpoints.

    Returns:
        str: YAML document, or the placeholder when nothing is selected.
    """
    endpoints_list = list(selected_endpoints)
    if not document or not endpoints_list:
        return CONFIG_PLACEHOLDER

    endpoints: dict[str, Any] = {}
    for endpoint in endpoints_list:
        path_item = _path_item(document, endpoint.path)
        operation = path_item.get(endpoint.method.lower()) if path_item else None
        if not isinstance(operation, dict):
            logger.debug("Selected endpoint %s not found in document", endpoint.key)
            continue

        key = f"{_api_name(operation)}/{_endpoint_name(endpoint, operation)}"
        endpoints[key] = {
            "http": {
                "method": endpoint.method.upper(),
                "url": {
                    "template": endpoint.path,
                    "path_params": [
                        parameter["name"]
                        for parameter in collect_parameters(operation, path_item, document)
                        if parameter.get("in") == "path"
                    ],
                },
            }
        }

    config = {"version": CONFIG_VERSION, "endpoints": endpoints}
    return "---\n" + yaml.safe_dump(config, sort_keys=False, allow_unicode=True)


def _path_item(document: Any, path: str) -> Optional[dict[str, Any]]:
    paths = document.get("paths") if isinstance(document, dict) else None
    if not isinstance(paths, dict):
        return None
    path_item = paths.get(path)
    return path_item if isinstance(path_item, dict) else None


def _api_name(operation: dict[str, Any]) -> str:
    tags = operation.get("tags")
    if isinstance(tags, list) and tags and isinstance(tags[0], str) and tags[0]:
        return tags[0]
    return DEFAULT_API_NAME


def _endpoint_name(endpoint: EndpointSelection, operation: dict[str, Any]) -> str:
    operation_id = operation.get("operationId")
    if isinstance(operation_id, str) and operation_id:
        return operation_id
    return endpoint_fallback_name(endpoint.path, endpoint.method)
