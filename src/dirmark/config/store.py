"""File-based configuration store implementation."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError
from result import Err, Ok, Result

from dirmark.common import AppPaths, create_logger, get_global_config_file

from .models import ConfigError, ConfigIOError, ConfigValidationError, ConfigYamlError, DirmarkConfig
from .resolver import apply_env_overrides

logger = create_logger("config")


class FileConfigStore:
    def __init__(self, paths: AppPaths, config_file: Path | None = None) -> None:
        self.paths = paths
        self.config_file = config_file or get_global_config_file(paths)

    def load(self) -> Result[DirmarkConfig, ConfigError]:
        logger.debug("Loading config", path=str(self.config_file))

        return (
            self._load_file(self.config_file)
            .and_then(apply_env_overrides)
            .inspect_err(lambda error: logger.error("Config load failed", error=error.message))
        )

    def _load_file(self, path: Path) -> Result[DirmarkConfig, ConfigError]:
        """Load and validate config from YAML file; a missing file yields defaults."""
        if not path.is_file():
            logger.debug("Config file not found, using defaults", path=str(path))
            return Ok(DirmarkConfig())

        try:
            raw_text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Config file read error", path=str(path), error=str(exc))
            return Err(ConfigIOError(path=path, message=str(exc)))

        try:
            data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            mark = getattr(exc, "problem_mark", None)
            line = getattr(mark, "line", None)
            column = getattr(mark, "column", None)
            logger.error("Config YAML parse error", path=str(path), line=line, column=column, error=str(exc))
            return Err(
                ConfigYamlError(
                    path=path,
                    line=(line + 1) if line is not None else None,
                    column=(column + 1) if column is not None else None,
                    message=str(exc),
                ),
            )

        if data is None:
            data = {}

        if not isinstance(data, dict):
            logger.error("Config must be a mapping", path=str(path))
            return Err(
                ConfigValidationError(
                    path=path,
                    message="Configuration root must be a mapping of keys to values.",
                ),
            )

        try:
            model = DirmarkConfig.model_validate(data)
        except ValidationError as exc:
            error_details = exc.errors()
            field = None
            message = str(exc)
            if error_details:
                first = error_details[0]
                loc = first.get("loc") or ()
                field = ".".join(str(part) for part in loc) or None
                message = first.get("msg", message)
            logger.error("Config validation error", path=str(path), field=field, error=message)
            return Err(ConfigValidationError(path=path, field=field, message=message))

        logger.debug("Config validated", path=str(path))
        return Ok(model)
