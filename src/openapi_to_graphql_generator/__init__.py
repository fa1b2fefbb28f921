"""OpenAPI to GraphQL generator package."""

from __future__ import annotations

from .cli import main
from .generator import (
    GenerationRun,
    generate_app_config,
    generate_graphql_schema,
    generate_graphql_schema_from_selections,
    run_generation,
)

__all__ = [
    "GenerationRun",
    "generate_app_config",
    "generate_graphql_schema",
    "generate_graphql_schema_from_selections",
    "main",
    "run_generation",
]
