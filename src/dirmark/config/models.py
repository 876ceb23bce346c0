"""Pydantic models for dirmark configuration and its errors."""

from __future__ import annotations

from pathlib import Path
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from dirmark.common import LoggingConfig


class ConfigYamlError(BaseModel):
    """YAML parsing error in configuration file."""

    model_config = ConfigDict(extra="forbid")

    path: Path
    line: int | None = None
    column: int | None = None
    message: str


class ConfigValidationError(BaseModel):
    """Schema validation error in configuration."""

    model_config = ConfigDict(extra="forbid")

    path: Path | None = None
    field: str | None = None
    message: str


class ConfigIOError(BaseModel):
    """Filesystem error while reading configuration."""

    model_config = ConfigDict(extra="forbid")

    path: Path
    message: str


ConfigError: TypeAlias = ConfigYamlError | ConfigValidationError | ConfigIOError


class DirmarkConfig(BaseModel):
    """Effective configuration (~/.config/dirmark/config.yaml plus env overrides)."""

    model_config = ConfigDict(extra="allow")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
