"""Textual rewriting of printed SDL: description comments and custom directives.

``graphql-core`` prints schemas without custom directive usages, so the
``@dataSource`` and ``@requiredScopes`` annotations are added line by line to
the printed text. Lines that belong to ``\"\"\"`` description blocks are never
rewritten.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator, Mapping, Sequence
from typing import Optional

from .model_types import DataSourceDirective

QUERY_TYPE_NAME = "Query"

DATA_SOURCE_DEFINITION = (
    "directive @dataSource(path: String!, method: String!, selection: [String!]!) "
    "on FIELD_DEFINITION"
)
REQUIRED_SCOPES_DEFINITION = "directive @requiredScopes(scopes: [[String!]!]!) on OBJECT"

_BLOCK_QUOTE = '"""'
_TYPE_LINE_RE = re.compile(r"^type (?P<name>[_A-Za-z][_0-9A-Za-z]*)(?P<rest>.*)$")
_FIELD_LINE_RE = re.compile(
    r"^(?P<indent>\s+)(?P<name>[_A-Za-z][_0-9A-Za-z]*)(?P<args>\(.*\))?: (?P<type>\S.*)$"
)


def render_data_source(directive: DataSourceDirective) -> str:
    """Render a ``@dataSource(...)`` usage."""
    return (
        f"@dataSource(path: {_string_literal(directive.path)}, "
        f"method: {_string_literal(directive.method)}, "
        f"selection: {_list_literal(directive.selection)})"
    )


def render_required_scopes(scopes: Sequence[Sequence[str]]) -> str:
    """Render a ``@requiredScopes(...)`` usage, e.g. ``@requiredScopes(scopes: [["test"]])``."""
    groups = ", ".join(_list_literal(group) for group in scopes)
    return f"@requiredScopes(scopes: [{groups}])"


def annotate_type_descriptions(sdl: str, descriptions: Mapping[str, str]) -> str:
    """Insert a ``# TypeName: description`` comment above described type definitions.

    The comment goes above the printed description block, if any, so that the
    block stays attached to its definition. Newlines in descriptions become
    spaces and the Query type is never annotated.
    """
    output: list[str] = []
    block_start: Optional[int] = None
    for line, in_description in _classify_lines(sdl):
        if in_description:
            if block_start is None:
                block_start = len(output)
            output.append(line)
            continue

        match = _TYPE_LINE_RE.match(line)
        name = match.group("name") if match else None
        description = descriptions.get(name) if name and name != QUERY_TYPE_NAME else None
        if description:
            comment = f"# {name}: {' '.join(description.split())}"
            output.insert(block_start if block_start is not None else len(output), comment)
        output.append(line)
        block_start = None
    return "\n".join(output)


def inject_data_sources(sdl: str, directives: Mapping[str, DataSourceDirective]) -> str:
    """Append ``@dataSource`` to every Query field that has routing metadata."""
    output: list[str] = []
    in_query = False
    for line, in_description in _classify_lines(sdl):
        if in_description:
            output.append(line)
            continue
        if not in_query:
            in_query = line.startswith(f"type {QUERY_TYPE_NAME} {{")
            output.append(line)
            continue
        if line == "}":
            in_query = False
            output.append(line)
            continue

        match = _FIELD_LINE_RE.match(line)
        directive = directives.get(match.group("name")) if match else None
        if directive is not None:
            line = f"{line} {render_data_source(directive)}"
        output.append(line)
    return "\n".join(output)


def inject_required_scopes(sdl: str, scopes: Sequence[Sequence[str]]) -> str:
    """Append ``@requiredScopes`` to every object type definition except Query."""
    usage = render_required_scopes(scopes)
    output: list[str] = []
    for line, in_description in _classify_lines(sdl):
        match = None if in_description else _TYPE_LINE_RE.match(line)
        if match and match.group("name") != QUERY_TYPE_NAME:
            name, rest = match.group("name"), match.group("rest")
            if rest.startswith(" {"):
                line = f"type {name} {usage}{rest}"
            elif not rest:
                line = f"type {name} {usage}"
        output.append(line)
    return "\n".join(output)


def append_directive_definitions(sdl: str) -> str:
    """Append the directive definitions that are not declared yet."""
    result = sdl.rstrip("\n")
    for definition in (DATA_SOURCE_DEFINITION, REQUIRED_SCOPES_DEFINITION):
        declaration = definition.split("(", 1)[0]
        if declaration not in result:
            result = f"{result}\n\n{definition}"
    return f"{result}\n"


def _classify_lines(sdl: str) -> Iterator[tuple[str, bool]]:
    """Yield each line with a flag telling whether it is part of a description block."""
    in_block = False
    for line in sdl.split("\n"):
        stripped = line.strip()
        if in_block:
            in_block = not stripped.endswith(_BLOCK_QUOTE)
            yield line, True
        elif stripped.startswith(_BLOCK_QUOTE):
            closed = len(stripped) >= 2 * len(_BLOCK_QUOTE) and stripped.endswith(_BLOCK_QUOTE)
            in_block = not closed
            yield line, True
        else:
            yield line, False


def _string_literal(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def _list_literal(values: Sequence[str]) -> str:
    return json.dumps(list(values), ensure_ascii=False)
