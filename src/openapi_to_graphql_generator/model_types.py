"""Internal datatypes for schema generation."""

from __future__ import annotations

from dataclasses import dataclass, field

from graphql import GraphQLArgument, GraphQLInputType, GraphQLOutputType


@dataclass
class TypeMaps:
    """Per-pass memo of constructed GraphQL types.

    ``output`` and ``input`` keep one type instance per name so that repeated
    references resolve to the identical object. ``descriptions`` records the
    OpenAPI description of every printed object type and ``building`` holds the
    reference names whose construction is in progress.
    """

    output: dict[str, GraphQLOutputType] = field(default_factory=dict)
    input: dict[str, GraphQLInputType] = field(default_factory=dict)
    descriptions: dict[str, str] = field(default_factory=dict)
    building: set[str] = field(default_factory=set)


@dataclass(frozen=True)
class DataSourceDirective:
    """REST routing metadata attached to a Query field."""

    path: str
    method: str
    selection: tuple[str, ...]


@dataclass(frozen=True)
class OperationResult:
    """GraphQL field material produced for one REST operation."""

    operation_id: str
    gql_type: GraphQLOutputType
    args: dict[str, GraphQLArgument]
    description: str
    directive: DataSourceDirective
