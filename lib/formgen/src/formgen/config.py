"""Scope configuration for formgen.

A module opts into generation with a literal ``__actions__`` mapping, and/or
a YAML file passed to the CLI. Schema:

- state: type expression of the shared state (optional)
- starlette: generate a Starlette handler function (``true`` or a mapping)
  - handler: function name, default ``actions_handler``
- microdot: generate a Microdot handler class (``true`` or a mapping)
  - path_parameters: ordered type expressions of the route's URL arguments
  - handler: class name, default ``ActionsHandler``
"""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from formgen.errors import ConfigurationError


def _check_identifier(value: str) -> str:
    if not value.isidentifier():
        raise ValueError(f"{value!r} is not a valid Python identifier")
    return value


def _check_expression(value: str) -> str:
    try:
        ast.parse(value, mode="eval")
    except SyntaxError as exc:
        raise ValueError(f"{value!r} is not a valid type expression") from exc
    return value


class StarletteConfig(BaseModel):
    """Starlette (handler function) integration."""

    model_config = {"extra": "forbid"}

    handler: str = Field(
        default="actions_handler", description="Name of the generated handler"
    )

    @field_validator("handler")
    @classmethod
    def validate_handler(cls, value: str) -> str:
        return _check_identifier(value)


class MicrodotConfig(BaseModel):
    """Microdot (handler class) integration."""

    model_config = {"extra": "forbid"}

    path_parameters: list[str] = Field(
        default_factory=list, description="Types of the route's URL arguments"
    )
    handler: str = Field(
        default="ActionsHandler", description="Name of the generated class"
    )

    @field_validator("handler")
    @classmethod
    def validate_handler(cls, value: str) -> str:
        return _check_identifier(value)

    @field_validator("path_parameters")
    @classmethod
    def validate_path_parameters(cls, value: list[str]) -> list[str]:
        return [_check_expression(item) for item in value]


class ScopeConfig(BaseModel):
    """Configuration of one actions module."""

    model_config = {"extra": "forbid"}

    state: str | None = Field(default=None, description="Shared state type")
    starlette: StarletteConfig | None = Field(
        default=None, description="Starlette integration"
    )
    microdot: MicrodotConfig | None = Field(
        default=None, description="Microdot integration"
    )

    @field_validator("state")
    @classmethod
    def validate_state(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _check_expression(value)

    @field_validator("starlette", "microdot", mode="before")
    @classmethod
    def enable_with_defaults(cls, value: Any) -> Any:
        """Accept ``true`` as shorthand for the default sub-config."""
        if value is True:
            return {}
        if value is False:
            return None
        return value

    @property
    def backends(self) -> dict[str, BaseModel]:
        """Requested integrations, in emission order."""
        backends: dict[str, BaseModel] = {}
        if self.starlette is not None:
            backends["starlette"] = self.starlette
        if self.microdot is not None:
            backends["microdot"] = self.microdot
        return backends


def _format_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        where = ".".join(str(part) for part in item["loc"]) or "<root>"
        problems.append(f"{where}: {item['msg']}")
    return "invalid actions configuration: " + "; ".join(problems)


def parse_scope_config(
    data: Any,
    *,
    filename: str = "<unknown>",
    node: ast.AST | None = None,
) -> ScopeConfig:
    """Validate raw configuration data into a `ScopeConfig`.

    Raises:
        ConfigurationError: located at ``node`` when given.
    """
    if data is None:
        return ScopeConfig()

    if not isinstance(data, dict):
        message = "actions configuration must be a mapping"
        if node is not None:
            raise ConfigurationError.at(node, message, filename)
        raise ConfigurationError(message, filename=filename, lineno=1)

    try:
        return ScopeConfig.model_validate(data)
    except ValidationError as exc:
        message = _format_validation_error(exc)
        if node is not None:
            raise ConfigurationError.at(node, message, filename) from exc
        raise ConfigurationError(message, filename=filename, lineno=1) from exc


def load_config_file(path: Path) -> dict[str, Any]:
    """Load raw configuration from a YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"failed to parse YAML: {exc}", filename=str(path), lineno=1
        ) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            "actions configuration must be a mapping", filename=str(path), lineno=1
        )
    return data


def merge_config(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge file overrides into the module's own configuration.

    Integration sub-mappings are merged key by key; ``true`` keeps an
    integration the base already configures.
    """
    merged = dict(base)

    for key, value in overrides.items():
        current = merged.get(key)
        if key in ("starlette", "microdot"):
            if value is True and current not in (None, False):
                continue
            if isinstance(value, dict) and isinstance(current, dict):
                merged[key] = {**current, **value}
                continue
        merged[key] = value

    return merged
