"""Environment variable resolution helpers for configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping

import yaml
from pydantic import ValidationError
from result import Err, Ok, Result

from dirmark.constants import CONFIG_ENV_PREFIX

from .models import ConfigValidationError, DirmarkConfig


def apply_env_overrides(config: DirmarkConfig) -> Result[DirmarkConfig, ConfigValidationError]:
    """Apply DIRMARK_CONFIG__SECTION__KEY environment overrides to config."""
    override_data: dict[str, object] = {}

    for key, value in os.environ.items():
        if not key.upper().startswith(CONFIG_ENV_PREFIX):
            continue
        path = key[len(CONFIG_ENV_PREFIX) :].strip("_")
        if not path:
            continue
        segments = [segment.lower() for segment in path.split("__") if segment]
        _insert_override(override_data, segments, _parse_env_value(value))

    if not override_data:
        return Ok(config)

    merged = deep_merge(config.model_dump(), override_data)
    try:
        return Ok(DirmarkConfig.model_validate(merged))
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc") or ()) or None
        return Err(ConfigValidationError(field=field, message=f"Invalid environment override: {first['msg']}"))


def deep_merge(base: Mapping[str, object], override: Mapping[str, object]) -> dict[str, object]:
    """Recursively merge two mappings, giving precedence to override."""
    result: dict[str, object] = dict(base)

    for key, override_value in override.items():
        existing_value = result.get(key)
        if isinstance(existing_value, Mapping) and isinstance(override_value, Mapping):
            result[key] = deep_merge(existing_value, override_value)
        else:
            result[key] = override_value

    return result


def _insert_override(data: dict[str, object], path: list[str], value: object) -> None:
    cursor = data
    *parents, leaf = path
    for segment in parents:
        child = cursor.get(segment)
        if not isinstance(child, dict):
            child = {}
            cursor[segment] = child
        cursor = child
    cursor[leaf] = value


def _parse_env_value(raw: str) -> object:
    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    return parsed
