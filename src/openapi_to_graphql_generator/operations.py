"""Turn one REST operation into the material for a GraphQL Query field."""

from __future__ import annotations

from collections.abc import Collection, Iterator, Mapping
from typing import Any, Optional

from graphql import GraphQLArgument

from .gen_logging import get_logger
from .model_types import DataSourceDirective, OperationResult, TypeMaps
from .naming import (
    HTTP_METHODS,
    generate_operation_id,
    is_success_response,
    sanitize_graphql_name,
)
from .resolver import get_ref_name, has_ref, ref_of, resolve_pointer
from .selection import selected_paths
from .type_builder import TypeBuilder

logger = get_logger(__name__)


def process_operation(
    path: str,
    method: str,
    operation: Any,
    document: Any,
    selection: Mapping[str, Mapping[str, bool]],
    type_maps: TypeMaps,
    path_item: Optional[Mapping[str, Any]] = None,
) -> Optional[OperationResult]:
    """Build the Query field material for one operation.

    The first 2xx response is inspected; its first JSON media type whose root
    type has a non-empty selection produces the result. Operations without a
    success response, without JSON content or without a selection yield None.

    Args:
        path (str): Path template, e.g. ``/pets/{id}``.
        method (str): HTTP method in any case.
        operation (Any): OpenAPI operation object.
        document (Any): Root OpenAPI document.
        selection (Mapping[str, Mapping[str, bool]]): Enriched selection map.
        type_maps (TypeMaps): Type cache of the current generation pass.
        path_item (Optional[Mapping[str, Any]]): Owning path item, for shared parameters.

    Returns:
        Optional[OperationResult]: Field material, or None when not eligible.
    """
    if not isinstance(operation, dict):
        return None
    operation_id = operation_id_of(path, method, operation)

    success = _first_success_response(operation.get("responses"), document)
    if success is None:
        logger.debug("Skipping %s %s: no success response", method.upper(), path)
        return None
    code, response = success
    content = response.get("content")
    if not isinstance(content, dict) or not content:
        logger.debug("Skipping %s %s: response %s has no content", method.upper(), path, code)
        return None

    builder = TypeBuilder(document, type_maps)
    for media_type, media in content.items():
        if "json" not in media_type or not isinstance(media, dict):
            continue
        schema = media.get("schema")
        if not isinstance(schema, dict):
            continue
        type_name = _root_type_name(schema, operation_id, code)
        attrs = selection.get(type_name)
        if not attrs:
            logger.debug("Skipping %s %s: nothing selected for %s", method.upper(), path, type_name)
            continue

        gql_type = builder.build_object_type(type_name, schema, selection, type_name, [])
        return OperationResult(
            operation_id=operation_id,
            gql_type=gql_type,
            args=_build_arguments(builder, operation, path_item, operation_id, document),
            description=_describe(path, method, operation),
            directive=DataSourceDirective(
                path=path,
                method=method.upper(),
                selection=selected_paths(attrs),
            ),
        )
    return None


def operation_id_of(path: str, method: str, operation: Mapping[str, Any]) -> str:
    """Return the explicit operationId, or one generated from method and path."""
    operation_id = operation.get("operationId")
    if isinstance(operation_id, str) and operation_id:
        return operation_id
    return generate_operation_id(path, method)


def collect_parameters(
    operation: Mapping[str, Any],
    path_item: Optional[Mapping[str, Any]],
    document: Any,
) -> list[dict[str, Any]]:
    """Merge path-item and operation parameters, resolving local references.

    Operation parameters replace path-item parameters with the same name and
    location.
    """
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    sources = [path_item.get("parameters") if path_item else None, operation.get("parameters")]
    for parameters in sources:
        if not isinstance(parameters, list):
            continue
        for raw in parameters:
            parameter = resolve_pointer(raw, document)
            if not isinstance(parameter, dict):
                continue
            name = parameter.get("name")
            location = parameter.get("in")
            if not isinstance(name, str) or not name or not isinstance(location, str):
                continue
            merged[(name, location)] = parameter
    return list(merged.values())


def _first_success_response(
    responses: Any,
    document: Any,
) -> Optional[tuple[str, dict[str, Any]]]:
    if not isinstance(responses, dict):
        return None
    success_codes = sorted((code for code in responses if is_success_response(code)), key=int)
    if not success_codes:
        return None
    code = success_codes[0]
    response = resolve_pointer(responses[code], document)
    if not isinstance(response, dict):
        return None
    return str(code), response


def _root_type_name(schema: Mapping[str, Any], operation_id: str, code: str) -> str:
    if has_ref(schema):
        ref_name = get_ref_name(ref_of(schema))
        if ref_name:
            return ref_name
    if operation_id:
        return f"{operation_id}_{code}"
    return f"Type_{code}"


def _describe(path: str, method: str, operation: Mapping[str, Any]) -> str:
    header = f"OpenAPI: {method.upper()} {path}"
    for key in ("summary", "description"):
        text = operation.get(key)
        if isinstance(text, str) and text:
            return f"{header}\n{text}"
    return header


def _build_arguments(
    builder: TypeBuilder,
    operation: Mapping[str, Any],
    path_item: Optional[Mapping[str, Any]],
    operation_id: str,
    document: Any,
) -> dict[str, GraphQLArgument]:
    args: dict[str, GraphQLArgument] = {}
    for parameter in collect_parameters(operation, path_item, document):
        arg_name = sanitize_graphql_name(parameter["name"])
        if arg_name in args:
            continue
        args[arg_name] = GraphQLArgument(builder.map_parameter_type(parameter, arg_name))

    body_schema = _json_request_schema(operation.get("requestBody"), document)
    if body_schema is not None:
        input_name = f"{operation_id}Input"
        if has_ref(body_schema):
            input_name = f"{get_ref_name(ref_of(body_schema))}Input"
        args["input"] = GraphQLArgument(builder.map_input_type(body_schema, input_name))
    return args


def _json_request_schema(request_body: Any, document: Any) -> Optional[dict[str, Any]]:
    body = resolve_pointer(request_body, document)
    if not isinstance(body, dict):
        return None
    content = body.get("content")
    if not isinstance(content, dict):
        return None
    for media_type, media in content.items():
        if "json" in media_type and isinstance(media, dict) and isinstance(media.get("schema"), dict):
            return media["schema"]
    return None


def iter_operations(
    document: Any,
    operations: Optional[Collection[tuple[str, str]]] = None,
) -> Iterator[tuple[str, str, dict[str, Any], dict[str, Any]]]:
    """Yield ``(path, method, operation, path_item)`` for every HTTP operation.

    When ``operations`` is given only the listed ``(METHOD, path)`` pairs are
    yielded.
    """
    paths = document.get("paths") if isinstance(document, dict) else None
    if not isinstance(paths, dict):
        return
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if not isinstance(method, str) or method.lower() not in HTTP_METHODS:
                continue
            if operations is not None and (method.upper(), path) not in operations:
                continue
            if isinstance(operation, dict):
                yield path, method, operation, path_item
