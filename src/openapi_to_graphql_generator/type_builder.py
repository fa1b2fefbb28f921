"""Build GraphQL output and input types from OpenAPI schema nodes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Optional, TypeAlias

from graphql import (
    GraphQLBoolean,
    GraphQLField,
    GraphQLFloat,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLInputType,
    GraphQLInt,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLOutputType,
    GraphQLScalarType,
    GraphQLString,
)

from .gen_logging import get_logger
from .json_types import SelectionMap
from .model_types import TypeMaps
from .naming import sanitize_graphql_name, singularize_and_capitalize
from .resolver import get_preferred_name, get_ref_name, has_ref, ref_of, resolve_schema_node
from .schema_utils import (
    array_items,
    expand_all_of,
    is_array_schema,
    is_object_schema,
    is_primitive_schema,
    object_properties,
    schema_type,
)

logger = get_logger(__name__)

_SCALARS: dict[str, GraphQLScalarType] = {
    "string": GraphQLString,
    "integer": GraphQLInt,
    "number": GraphQLFloat,
    "boolean": GraphQLBoolean,
}

_ARRAY_ITEM = "0"

SelectionInput: TypeAlias = Mapping[str, Mapping[str, bool]]


def scalar_for(schema: Any) -> GraphQLScalarType:
    """Map a primitive OpenAPI type to its GraphQL scalar, ``String`` when unknown."""
    declared = schema_type(schema)
    if declared is None:
        return GraphQLString
    return _SCALARS.get(declared, GraphQLString)


def _scoped_selection(
    selection: SelectionInput,
    scope: str,
    prefix: Sequence[str],
    target: str,
) -> SelectionMap:
    """Re-key the selections of ``scope`` found under ``prefix`` into ``target``.

    An existing non-empty ``target`` entry wins. Otherwise every selected path
    below ``prefix`` is stripped of it, and each intermediate path of the
    remainder is selected too so nested objects keep their parent fields.
    """
    scoped: SelectionMap = {name: dict(attrs) for name, attrs in selection.items()}
    if scoped.get(target):
        return scoped

    lead = ".".join(prefix) + "." if prefix else ""
    derived: dict[str, bool] = {}
    for attr_path, selected in selection.get(scope, {}).items():
        if selected is not True or not attr_path.startswith(lead):
            continue
        remainder = attr_path[len(lead) :]
        if not remainder:
            continue
        segments = remainder.split(".")
        for end in range(1, len(segments) + 1):
            derived[".".join(segments[:end])] = True
    scoped[target] = derived
    return scoped


class TypeBuilder:
    """Create GraphQL types for one generation pass.

    Every type is memoized in the shared ``TypeMaps`` so that repeated
    references resolve to the same instance. Object fields are supplied as
    thunks and the type is cached before they are evaluated, which lets
    self-referencing schemas terminate.
    """

    def __init__(self, document: Any, type_maps: TypeMaps) -> None:
        self._document = document
        self._type_maps = type_maps

    def build_object_type(
        self,
        name: str,
        schema: Any,
        selection: SelectionInput,
        type_scope: str,
        path: Sequence[str],
    ) -> GraphQLOutputType:
        """Build the output type for a schema, keeping only selected fields.

        Args:
            name (str): Name for the type when the schema is an inline object.
            schema (Any): OpenAPI schema node.
            selection (SelectionInput): Type-keyed selection map.
            type_scope (str): Selection entry the dotted ``path`` is relative to.
            path (Sequence[str]): Segments from the scope's root to this schema.

        Returns:
            GraphQLOutputType: Object type, list of item types or placeholder.
        """
        if not isinstance(schema, dict):
            return self._placeholder(f"{name}_Empty")
        if has_ref(schema):
            return self._build_reference(schema, selection, type_scope, path)

        schema = expand_all_of(schema, self._document)
        if is_object_schema(schema):
            return self._build_object(name, schema, selection, type_scope, path)
        if is_array_schema(schema):
            return self._build_list(name, schema, selection, type_scope, path)
        return self._placeholder(f"{name}_Scalar")

    def map_output_type(
        self,
        schema: Any,
        selection: SelectionInput,
        type_name: str,
        path: Sequence[str],
        *,
        type_scope: Optional[str] = None,
    ) -> GraphQLOutputType:
        """Map a field schema to its GraphQL output type.

        Missing schemas and unknown primitive types become ``String``.
        """
        if not isinstance(schema, dict):
            return GraphQLString
        scope = type_scope if type_scope is not None else type_name
        if has_ref(schema):
            resolved = resolve_schema_node(schema, self._document)
            if resolved is not None and is_primitive_schema(resolved):
                return scalar_for(resolved)
            return self._build_reference(schema, selection, scope, path)

        schema = expand_all_of(schema, self._document)
        if is_object_schema(schema):
            return self._build_object(type_name, schema, selection, scope, path)
        if is_array_schema(schema):
            return self._build_list(type_name, schema, selection, scope, path)
        return scalar_for(schema)

    def build_input_type(self, name: str, schema: Any) -> GraphQLInputType:
        """Build an input object type including every declared property."""
        if not isinstance(schema, dict):
            return self._input_placeholder(f"{name}_Empty")
        if has_ref(schema):
            ref_name = f"{get_ref_name(ref_of(schema))}Input"
            cached = self._type_maps.input.get(sanitize_graphql_name(ref_name))
            if cached is not None:
                return cached
            resolved = resolve_schema_node(schema, self._document)
            if resolved is None:
                logger.debug("Unresolved input reference %s", ref_of(schema))
                return self._input_placeholder(f"{ref_name}_Unresolved")
            return self.build_input_type(ref_name, resolved)

        schema = expand_all_of(schema, self._document)
        if not is_object_schema(schema):
            return self._input_placeholder(f"{name}_ScalarInput")

        type_name = sanitize_graphql_name(name)
        cached = self._type_maps.input.get(type_name)
        if cached is not None:
            return cached
        properties = object_properties(schema)

        def _fields() -> dict[str, GraphQLInputField]:
            fields: dict[str, GraphQLInputField] = {}
            for key, prop_schema in properties.items():
                field_name = sanitize_graphql_name(key)
                if field_name in fields:
                    continue
                fields[field_name] = GraphQLInputField(
                    self.map_input_type(prop_schema, f"{type_name}_{key}")
                )
            return fields

        input_type = GraphQLInputObjectType(type_name, fields=_fields)
        self._type_maps.input[type_name] = input_type
        return input_type

    def map_input_type(self, schema: Any, name_hint: str) -> GraphQLInputType:
        """Map a schema to a GraphQL input type; ``name_hint`` names inline objects."""
        if not isinstance(schema, dict):
            return GraphQLString
        if has_ref(schema):
            resolved = resolve_schema_node(schema, self._document)
            if resolved is not None and is_primitive_schema(resolved):
                return scalar_for(resolved)
            return self.build_input_type(name_hint, schema)

        schema = expand_all_of(schema, self._document)
        if is_object_schema(schema):
            return self.build_input_type(name_hint, schema)
        if is_array_schema(schema):
            return GraphQLList(self.map_input_type(array_items(schema), f"{name_hint}Item"))
        return scalar_for(schema)

    def map_parameter_type(self, parameter: Mapping[str, Any], name: str) -> GraphQLInputType:
        """Map an operation parameter to its argument type, non-null when required."""
        schema = parameter.get("schema")
        gql_type: GraphQLInputType = GraphQLString
        if isinstance(schema, dict):
            gql_type = self.map_input_type(schema, f"{name}Input")
        if parameter.get("required") is True:
            gql_type = GraphQLNonNull(gql_type)
        return gql_type

    def _build_reference(
        self,
        schema: dict[str, Any],
        selection: SelectionInput,
        type_scope: str,
        path: Sequence[str],
    ) -> GraphQLOutputType:
        ref_name = get_ref_name(ref_of(schema))
        cache_key = sanitize_graphql_name(ref_name)
        cached = self._type_maps.output.get(cache_key)
        if cached is not None:
            return cached
        if cache_key in self._type_maps.building:
            logger.warning("Recursive reference %s replaced by a placeholder type", ref_name)
            return self._placeholder(f"{ref_name}_Recursive")

        resolved = resolve_schema_node(schema, self._document)
        if resolved is None:
            logger.debug("Unresolved reference %s", ref_of(schema))
            return self._placeholder(f"{ref_name}_Unresolved")

        scoped = _scoped_selection(selection, type_scope, path, ref_name)
        self._type_maps.building.add(cache_key)
        try:
            gql_type = self.build_object_type(ref_name, resolved, scoped, ref_name, [])
        finally:
            self._type_maps.building.discard(cache_key)
        return self._type_maps.output.setdefault(cache_key, gql_type)

    def _build_object(
        self,
        name: str,
        schema: dict[str, Any],
        selection: SelectionInput,
        type_scope: str,
        path: Sequence[str],
    ) -> GraphQLOutputType:
        type_name = sanitize_graphql_name(name)
        cached = self._type_maps.output.get(type_name)
        if cached is not None:
            return cached

        attrs = selection.get(type_scope, {})
        properties = object_properties(schema)

        def _fields() -> dict[str, GraphQLField]:
            fields: dict[str, GraphQLField] = {}
            for key, prop_schema in properties.items():
                prop_path = [*path, key]
                if attrs.get(".".join(prop_path)) is not True:
                    continue
                field_name = sanitize_graphql_name(key)
                if field_name in fields:
                    continue
                nested_name = get_preferred_name(prop_schema) or key
                fields[field_name] = GraphQLField(
                    self.map_output_type(
                        prop_schema,
                        selection,
                        nested_name,
                        prop_path,
                        type_scope=type_scope,
                    )
                )
            return fields

        description = _description_of(schema)
        if description is not None:
            self._type_maps.descriptions[type_name] = description
        object_type = GraphQLObjectType(type_name, fields=_fields, description=description)
        self._type_maps.output[type_name] = object_type
        return object_type

    def _build_list(
        self,
        name: str,
        schema: dict[str, Any],
        selection: SelectionInput,
        type_scope: str,
        path: Sequence[str],
    ) -> GraphQLList:
        items = array_items(schema)
        if items is None:
            return GraphQLList(GraphQLString)
        item_path = [*path, _ARRAY_ITEM]
        item_name = get_preferred_name(items) or singularize_and_capitalize(name)

        if not has_ref(items):
            items = expand_all_of(items, self._document)
            if is_object_schema(items):
                item_selection = _scoped_selection(selection, type_scope, item_path, item_name)
                return GraphQLList(
                    self._build_object(item_name, items, item_selection, item_name, [])
                )
        return GraphQLList(
            self.map_output_type(items, selection, item_name, item_path, type_scope=type_scope)
        )

    def _placeholder(self, name: str) -> GraphQLObjectType:
        type_name = sanitize_graphql_name(name)
        cached = self._type_maps.output.get(type_name)
        if isinstance(cached, GraphQLObjectType):
            return cached
        logger.debug("Using placeholder type %s", type_name)
        placeholder = GraphQLObjectType(type_name, fields={})
        self._type_maps.output[type_name] = placeholder
        return placeholder

    def _input_placeholder(self, name: str) -> GraphQLInputObjectType:
        type_name = sanitize_graphql_name(name)
        cached = self._type_maps.input.get(type_name)
        if isinstance(cached, GraphQLInputObjectType):
            return cached
        placeholder = GraphQLInputObjectType(type_name, fields={})
        self._type_maps.input[type_name] = placeholder
        return placeholder


def _description_of(schema: Any) -> Optional[str]:
    if not isinstance(schema, dict):
        return None
    description = schema.get("description")
    return description if isinstance(description, str) and description else None
