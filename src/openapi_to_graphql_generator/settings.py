"""Generator settings: default authorization scopes for generated types."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .loader import read_yaml_file

DEFAULT_REQUIRED_SCOPES: tuple[tuple[str, ...], ...] = (("test",),)


class SettingsError(RuntimeError):
    """Raised when a settings file cannot be loaded."""


def _default_scopes() -> list[list[str]]:
    return [list(group) for group in DEFAULT_REQUIRED_SCOPES]


class GeneratorSettings(BaseModel):
    """User settings applied to every generation pass.

    ``required_scopes`` is a list of OR groups; every scope within a group is
    required (AND).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    required_scopes: list[list[str]] = Field(
        default_factory=_default_scopes,
        alias="requiredScopes",
    )

    @field_validator("required_scopes")
    @classmethod
    def _clean_scopes(cls, value: list[list[str]]) -> list[list[str]]:
        groups = [[scope.strip() for scope in group if scope.strip()] for group in value]
        groups = [group for group in groups if group]
        if not groups:
            raise ValueError("requiredScopes must contain at least one non-empty scope group")
        return groups


def load_settings(path: Optional[Path]) -> GeneratorSettings:
    """Load settings from YAML, falling back to defaults when no file is given."""
    if path is None:
        return GeneratorSettings()
    payload = read_yaml_file(path, error_type=SettingsError)
    if payload is None:
        return GeneratorSettings()
    if not isinstance(payload, dict):
        raise SettingsError(f"Settings file {path} must deserialize to a mapping")
    try:
        return GeneratorSettings.model_validate(payload)
    except ValidationError as exc:
        raise SettingsError(f"Invalid settings in {path}: {exc}") from exc


def parse_scope_options(values: Sequence[str]) -> list[list[str]]:
    """Turn ``--scope`` values into scope groups; commas separate scopes within a group."""
    return [[scope.strip() for scope in value.split(",") if scope.strip()] for value in values]


def apply_scope_override(settings: GeneratorSettings, values: Sequence[str]) -> GeneratorSettings:
    """Replace the configured scopes by the ones given on the command line, if any."""
    if not values:
        return settings
    try:
        return GeneratorSettings(required_scopes=parse_scope_options(values))
    except ValidationError as exc:
        raise SettingsError(f"Invalid --scope values: {exc}") from exc
