"""Assemble processed operations into the final SDL document."""

from __future__ import annotations

from collections.abc import Collection, Mapping, Sequence
from typing import Any, Optional

from graphql import GraphQLField, GraphQLObjectType, GraphQLSchema, print_schema

from .gen_logging import get_logger
from .model_types import DataSourceDirective, TypeMaps
from .naming import sanitize_graphql_name
from .operations import iter_operations, process_operation
from .sdl_directives import (
    QUERY_TYPE_NAME,
    annotate_type_descriptions,
    append_directive_definitions,
    inject_data_sources,
    inject_required_scopes,
)

logger = get_logger(__name__)

SCHEMA_PLACEHOLDER = "# GraphQL schema will appear here\n"
SCHEMA_ERROR = "# Error generating GraphQL schema\n"


def assemble_schema(
    document: Any,
    selection: Mapping[str, Mapping[str, bool]],
    required_scopes: Sequence[Sequence[str]],
    operations: Optional[Collection[tuple[str, str]]] = None,
) -> str:
    """Render the SDL for every operation that yields a result.

    Args:
        document (Any): Parsed OpenAPI document.
        selection (Mapping[str, Mapping[str, bool]]): Enriched selection map.
        required_scopes (Sequence[Sequence[str]]): OR-of-AND scope groups.
        operations (Optional[Collection[tuple[str, str]]]): ``(METHOD, path)``
            pairs to process, or None for every operation of the document.

    Returns:
        str: SDL text with directives, or the placeholder when nothing was produced.
    """
    type_maps = TypeMaps()
    fields: dict[str, GraphQLField] = {}
    directives: dict[str, DataSourceDirective] = {}

    for path, method, operation, path_item in iter_operations(document, operations):
        result = process_operation(path, method, operation, document, selection, type_maps, path_item)
        if result is None:
            continue
        field_name = sanitize_graphql_name(result.operation_id)
        if field_name in fields:
            logger.warning(
                "Duplicate query field %s from %s %s ignored",
                field_name,
                method.upper(),
                path,
            )
            continue
        fields[field_name] = GraphQLField(
            result.gql_type,
            args=result.args,
            description=result.description,
        )
        directives[field_name] = result.directive

    if not fields:
        return SCHEMA_PLACEHOLDER

    schema = GraphQLSchema(query=GraphQLObjectType(QUERY_TYPE_NAME, fields=fields))
    sdl = print_schema(schema)
    sdl = annotate_type_descriptions(sdl, type_maps.descriptions)
    sdl = inject_data_sources(sdl, directives)
    sdl = inject_required_scopes(sdl, required_scopes)
    logger.debug("Assembled schema with %d query fields", len(fields))
    return append_directive_definitions(sdl)
