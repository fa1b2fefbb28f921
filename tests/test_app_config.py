"""Tests for routing config generation."""

from __future__ import annotations

from typing import Any

import pytest
import yaml

from openapi_to_graphql_generator.app_config import CONFIG_PLACEHOLDER, generate_app_config_yaml
from openapi_to_graphql_generator.selection import EndpointSelection

from .fixture_helpers import load_fixture_document


@pytest.fixture(name="petstore")
def petstore_fixture() -> dict[str, Any]:
    return load_fixture_document("petstore.yaml")


def _endpoint(method: str, path: str) -> EndpointSelection:
    return EndpointSelection(path=path, method=method, type_name="Any", selected_attrs={})


def test_placeholder_without_document_or_endpoints(petstore: dict[str, Any]) -> None:
    assert generate_app_config_yaml(None, [_endpoint("GET", "/pets")]) == CONFIG_PLACEHOLDER
    assert generate_app_config_yaml(petstore, []) == CONFIG_PLACEHOLDER


def test_config_document_shape(petstore: dict[str, Any]) -> None:
    text = generate_app_config_yaml(
        petstore,
        [_endpoint("GET", "/pets"), _endpoint("GET", "/pets/{id}")],
    )

    assert text.startswith("---\nversion: 1\nendpoints:\n")
    config = yaml.safe_load(text)
    assert config == {
        "version": 1,
        "endpoints": {
            "pets/listPets": {
                "http": {
                    "method": "GET",
                    "url": {"template": "/pets", "path_params": []},
                }
            },
            "Api/getPetById": {
                "http": {
                    "method": "GET",
                    "url": {"template": "/pets/{id}", "path_params": ["id"]},
                }
            },
        },
    }
    assert "path_params: []" in text
    assert "- id" in text


def test_missing_operation_id_uses_fallback_name(petstore: dict[str, Any]) -> None:
    text = generate_app_config_yaml(petstore, [_endpoint("get", "/pets/{id}/photos")])

    config = yaml.safe_load(text)
    assert list(config["endpoints"]) == ["Api/GET__pets_id_photos"]
    assert config["endpoints"]["Api/GET__pets_id_photos"]["http"]["method"] == "GET"


def test_endpoints_missing_from_document_are_skipped(petstore: dict[str, Any]) -> None:
    text = generate_app_config_yaml(
        petstore,
        [_endpoint("DELETE", "/pets"), _endpoint("GET", "/nowhere"), _endpoint("GET", "/health")],
    )

    assert list(yaml.safe_load(text)["endpoints"]) == ["Api/health"]


def test_referenced_path_parameters_are_listed() -> None:
    blog = load_fixture_document("blog.yaml")

    text = generate_app_config_yaml(blog, [_endpoint("GET", "/users/{userId}/posts/{postId}")])

    endpoint = yaml.safe_load(text)["endpoints"]["Api/GET__users_userId_posts_postId_"]
    assert endpoint["http"]["url"]["path_params"] == ["userId", "postId"]
