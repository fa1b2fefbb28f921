"""Command line interface for OpenAPI to GraphQL generation."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .gen_logging import configure_logging
from .generator import run_generation
from .loader import OpenAPILoadError, SelectionLoadError
from .settings import SettingsError
from .writer import WriteError


class CLIError(RuntimeError):
    """Raised when CLI execution fails."""


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    parser = argparse.ArgumentParser(
        prog="openapi-to-graphql-generator",
        description=(
            "Generate a GraphQL SDL schema and a routing config from an OpenAPI "
            "document and selected endpoints"
        ),
    )
    parser.add_argument("--input", required=True, help="Path to an OpenAPI YAML or JSON file")
    parser.add_argument(
        "--selections",
        required=True,
        help="Path to a YAML file with the selected endpoints keyed METHOD_path",
    )
    parser.add_argument("--settings", help="Path to a YAML settings file")
    parser.add_argument(
        "--scope",
        action="append",
        default=[],
        help="Required scope group, comma separated (AND); repeat for alternatives (OR)",
    )
    parser.add_argument("--schema-output", help="Write the GraphQL SDL to this file")
    parser.add_argument("--config-output", help="Write the application config YAML to this file")
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate the OpenAPI document against the OpenAPI 3 model before generating",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", action="store_true", help="Log debug details")
    verbosity.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    try:
        if any(not value.strip(" ,") for value in args.scope):
            raise CLIError("--scope values must name at least one scope")
        run = run_generation(
            input_path=Path(args.input),
            selections_path=Path(args.selections),
            settings_path=_optional_path(args.settings),
            scopes=tuple(args.scope),
            schema_output=_optional_path(args.schema_output),
            config_output=_optional_path(args.config_output),
            validate=bool(args.validate),
        )
    except (OpenAPILoadError, SelectionLoadError, SettingsError, WriteError, CLIError) as exc:
        parser.error(str(exc))
        return 2

    for warning in run.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    if args.schema_output is None:
        sys.stdout.write(run.schema_sdl)
    if args.config_output is None:
        sys.stdout.write(run.app_config_yaml)
    return 0


def _optional_path(value: Optional[str]) -> Optional[Path]:
    return Path(value) if value else None


if __name__ == "__main__":
    raise SystemExit(main())
