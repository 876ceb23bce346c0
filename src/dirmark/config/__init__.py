"""Public configuration API for dirmark."""

from __future__ import annotations

from .models import ConfigError, ConfigIOError, ConfigValidationError, ConfigYamlError, DirmarkConfig
from .store import FileConfigStore

__all__ = [
    "ConfigError",
    "ConfigIOError",
    "ConfigValidationError",
    "ConfigYamlError",
    "DirmarkConfig",
    "FileConfigStore",
]
