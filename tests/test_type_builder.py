"""Tests for GraphQL type construction."""

from __future__ import annotations

from typing import Any

from graphql import (
    GraphQLBoolean,
    GraphQLFloat,
    GraphQLInputObjectType,
    GraphQLInt,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLString,
)

from openapi_to_graphql_generator.model_types import TypeMaps
from openapi_to_graphql_generator.type_builder import TypeBuilder

_DOCUMENT: dict[str, Any] = {
    "components": {
        "schemas": {
            "Pet": {
                "type": "object",
                "description": "A pet in the store",
                "properties": {
                    "id": {"type": "integer"},
                    "name": {"type": "string"},
                    "weight": {"type": "number"},
                    "vaccinated": {"type": "boolean"},
                    "photo": {"type": "file"},
                    "extra": {},
                    "petId": {"$ref": "#/components/schemas/PetId"},
                    "category": {"$ref": "#/components/schemas/Category"},
                    "owner": {"$ref": "#/components/schemas/Missing"},
                },
            },
            "PetId": {"type": "integer"},
            "Category": {
                "type": "object",
                "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
            },
            "Owner": {
                "type": "object",
                "properties": {
                    "pets": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {"name": {"type": "string"}, "age": {"type": "integer"}},
                        },
                    },
                    "address": {
                        "type": "object",
                        "properties": {"city": {"type": "string"}, "street": {"type": "string"}},
                    },
                    "x-rating": {"type": "integer"},
                },
            },
            "Node": {
                "type": "object",
                "properties": {
                    "value": {"type": "string"},
                    "parent": {"$ref": "#/components/schemas/Node"},
                    "children": {"type": "array", "items": {"$ref": "#/components/schemas/Node"}},
                },
            },
            "Tree": {"type": "array", "items": {"$ref": "#/components/schemas/Tree"}},
            "Admin": {
                "allOf": [
                    {"$ref": "#/components/schemas/Category"},
                    {"type": "object", "properties": {"level": {"type": "integer"}}},
                ]
            },
            "NewPet": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "category": {"$ref": "#/components/schemas/Category"},
                },
            },
        }
    }
}


def _builder() -> tuple[TypeBuilder, TypeMaps]:
    type_maps = TypeMaps()
    return TypeBuilder(_DOCUMENT, type_maps), type_maps


def _ref(name: str) -> dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


def _object(gql_type: Any) -> GraphQLObjectType:
    assert isinstance(gql_type, GraphQLObjectType)
    return gql_type


def test_only_selected_fields_are_built() -> None:
    builder, _ = _builder()
    selection = {"Pet": {"id": True, "name": False}}

    pet = _object(builder.build_object_type("Pet", _ref("Pet"), selection, "Pet", []))

    assert pet.name == "Pet"
    assert list(pet.fields) == ["id"]


def test_inline_object_uses_its_own_name_and_scope() -> None:
    builder, _ = _builder()
    schema = {"type": "object", "properties": {"id": {"type": "string"}, "label": {"type": "string"}}}

    gql_type = _object(
        builder.build_object_type("getThing_200", schema, {"getThing_200": {"label": True}}, "getThing_200", [])
    )

    assert gql_type.name == "getThing_200"
    assert list(gql_type.fields) == ["label"]


def test_primitive_types_map_to_scalars() -> None:
    builder, _ = _builder()
    selection = {
        "Pet": {
            "id": True,
            "name": True,
            "weight": True,
            "vaccinated": True,
            "photo": True,
            "extra": True,
            "petId": True,
        }
    }

    pet = _object(builder.build_object_type("Pet", _ref("Pet"), selection, "Pet", []))

    assert pet.fields["id"].type is GraphQLInt
    assert pet.fields["name"].type is GraphQLString
    assert pet.fields["weight"].type is GraphQLFloat
    assert pet.fields["vaccinated"].type is GraphQLBoolean
    assert pet.fields["photo"].type is GraphQLString
    assert pet.fields["extra"].type is GraphQLString
    assert pet.fields["petId"].type is GraphQLInt


def test_placeholders_for_missing_unresolved_and_scalar_schemas() -> None:
    builder, _ = _builder()

    empty = _object(builder.build_object_type("Thing", None, {}, "Thing", []))
    unresolved = _object(builder.build_object_type("Thing", _ref("Missing"), {}, "Thing", []))
    scalar = _object(builder.build_object_type("Thing", {"type": "string"}, {}, "Thing", []))

    assert empty.name == "Thing_Empty"
    assert unresolved.name == "Missing_Unresolved"
    assert scalar.name == "Thing_Scalar"
    assert builder.build_object_type("Thing", None, {}, "Thing", []) is empty


def test_unresolved_field_reference_becomes_placeholder() -> None:
    builder, _ = _builder()

    pet = _object(builder.build_object_type("Pet", _ref("Pet"), {"Pet": {"owner": True}}, "Pet", []))

    assert _object(pet.fields["owner"].type).name == "Missing_Unresolved"


def test_reference_selection_is_derived_from_parent_paths() -> None:
    builder, _ = _builder()
    selection = {"Pet": {"category": True, "category.name": True}}

    pet = _object(builder.build_object_type("Pet", _ref("Pet"), selection, "Pet", []))
    category = _object(pet.fields["category"].type)

    assert category.name == "Category"
    assert list(category.fields) == ["name"]


def test_existing_reference_selection_wins() -> None:
    builder, _ = _builder()
    selection = {"Pet": {"category": True, "category.name": True}, "Category": {"id": True}}

    pet = _object(builder.build_object_type("Pet", _ref("Pet"), selection, "Pet", []))

    assert list(_object(pet.fields["category"].type).fields) == ["id"]


def test_array_response_rescopes_item_selection() -> None:
    builder, _ = _builder()
    schema = {"type": "array", "items": _ref("Pet")}
    selection = {"listPets_200": {"0": True, "0.id": True, "0.category.id": True}}

    gql_type = builder.build_object_type("listPets_200", schema, selection, "listPets_200", [])

    assert isinstance(gql_type, GraphQLList)
    pet = _object(gql_type.of_type)
    assert pet.name == "Pet"
    assert list(pet.fields) == ["id", "category"]
    assert list(_object(pet.fields["category"].type).fields) == ["id"]


def test_inline_array_items_and_nested_objects() -> None:
    builder, _ = _builder()
    selection = {
        "Owner": {
            "pets": True,
            "pets.0.name": True,
            "address": True,
            "address.city": True,
            "x-rating": True,
        }
    }

    owner = _object(builder.build_object_type("Owner", _ref("Owner"), selection, "Owner", []))

    assert list(owner.fields) == ["pets", "address", "x_rating"]
    pets_type = owner.fields["pets"].type
    assert isinstance(pets_type, GraphQLList)
    item = _object(pets_type.of_type)
    assert item.name == "Pet"
    assert list(item.fields) == ["name"]
    address = _object(owner.fields["address"].type)
    assert address.name == "address"
    assert list(address.fields) == ["city"]


def test_self_references_terminate_with_shared_instance() -> None:
    builder, _ = _builder()
    selection = {"Node": {"value": True, "parent": True, "children": True}}

    node = _object(builder.build_object_type("Node", _ref("Node"), selection, "Node", []))

    assert node.fields["parent"].type is node
    children = node.fields["children"].type
    assert isinstance(children, GraphQLList)
    assert children.of_type is node


def test_recursive_array_alias_gets_placeholder() -> None:
    builder, _ = _builder()

    tree = builder.build_object_type("Tree", _ref("Tree"), {}, "Tree", [])

    assert isinstance(tree, GraphQLList)
    assert _object(tree.of_type).name == "Tree_Recursive"


def test_repeated_references_share_one_instance() -> None:
    builder, type_maps = _builder()
    selection = {"Pet": {"id": True}}

    first = builder.build_object_type("Pet", _ref("Pet"), selection, "Pet", [])
    second = builder.build_object_type("Pet", _ref("Pet"), {"Pet": {"name": True}}, "Pet", [])

    assert first is second
    assert type_maps.output["Pet"] is first
    assert type_maps.descriptions == {"Pet": "A pet in the store"}


def test_all_of_is_merged_before_building() -> None:
    builder, _ = _builder()

    admin = _object(builder.build_object_type("Admin", _ref("Admin"), {"Admin": {"name": True, "level": True}}, "Admin", []))

    assert list(admin.fields) == ["name", "level"]


def test_input_types_include_every_property() -> None:
    builder, type_maps = _builder()

    new_pet = builder.map_input_type(_ref("NewPet"), "NewPetInput")

    assert isinstance(new_pet, GraphQLInputObjectType)
    assert new_pet.name == "NewPetInput"
    assert list(new_pet.fields) == ["name", "category"]
    category = new_pet.fields["category"].type
    assert isinstance(category, GraphQLInputObjectType)
    assert category.name == "CategoryInput"
    assert list(category.fields) == ["id", "name"]
    assert set(type_maps.input) == {"NewPetInput", "CategoryInput"}


def test_inline_input_arrays_use_item_hints() -> None:
    builder, _ = _builder()
    schema = {
        "type": "object",
        "properties": {
            "lines": {
                "type": "array",
                "items": {"type": "object", "properties": {"qty": {"type": "integer"}}},
            },
            "tags": {"type": "array", "items": {"type": "string"}},
        },
    }

    order = builder.map_input_type(schema, "createOrderInput")

    assert isinstance(order, GraphQLInputObjectType)
    lines = order.fields["lines"].type
    assert isinstance(lines, GraphQLList)
    assert lines.of_type.name == "createOrderInput_linesItem"
    tags = order.fields["tags"].type
    assert isinstance(tags, GraphQLList)
    assert tags.of_type is GraphQLString


def test_input_placeholders() -> None:
    builder, _ = _builder()

    assert builder.build_input_type("Body", None).name == "Body_Empty"
    assert builder.build_input_type("Body", {"type": "string"}).name == "Body_ScalarInput"
    assert builder.build_input_type("Body", _ref("Missing")).name == "MissingInput_Unresolved"


def test_parameter_types() -> None:
    builder, _ = _builder()

    required = builder.map_parameter_type({"name": "id", "required": True, "schema": {"type": "integer"}}, "id")
    optional = builder.map_parameter_type({"name": "q"}, "q")

    assert isinstance(required, GraphQLNonNull)
    assert required.of_type is GraphQLInt
    assert optional is GraphQLString
