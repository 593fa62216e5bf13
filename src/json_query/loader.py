"""Configuration loading and JSON Schema validation."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from pydantic import ValidationError as PydanticValidationError

from json_query.errors import ConfigError
from json_query.models import ProcessorConfig, Specification
from json_query.specification import specification


def parameters_schema(spec: Specification) -> dict[str, Any]:
    """Build a JSON Schema for a configuration mapping from *spec*."""
    properties: dict[str, Any] = {}
    required: list[str] = []
    for name, param in spec.parameters.items():
        prop: dict[str, Any] = {"type": param.type, "description": param.description}
        if param.required:
            required.append(name)
            prop["minLength"] = 1
        if param.allowed_values is not None:
            prop["enum"] = list(param.allowed_values)
        properties[name] = prop
    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }


def _describe(error: jsonschema.ValidationError) -> str:
    if error.path:
        return f"parameter {error.path[0]!r}: {error.message}"
    return error.message


def parse_config(
    raw: Mapping[str, Any], spec: Specification | None = None
) -> ProcessorConfig:
    """Validate a raw configuration mapping and build a ProcessorConfig.

    Raises:
        ConfigError: If a required key is missing, a key is unknown, or a
            value falls outside its allowed set.
    """
    if spec is None:
        spec = specification()

    data = dict(raw)
    try:
        jsonschema.validate(instance=data, schema=parameters_schema(spec))
    except jsonschema.ValidationError as e:
        raise ConfigError(f"failed to parse config: {_describe(e)}") from e

    try:
        return ProcessorConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(f"failed to parse config: {e}") from e


def load_config(path: str | Path) -> dict[str, Any]:
    """Load a configuration mapping from a YAML file.

    Raises:
        ConfigError: If the file doesn't exist, YAML is invalid, or the
            document is not a mapping.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(
            f"Config YAML must be a mapping, got {type(raw).__name__}"
        )
    return raw
