"""Loguru setup for dirmark.

The CLI writes a rotating log file under the XDG data directory and never logs
to the terminal, because `to jump` prints the destination on stdout for a shell
wrapper to `cd` into. When dirmark is imported as a library its records are
dropped until `enable_library_logging` is called.
"""

import sys
from pathlib import Path
from typing import Any, Literal, TypeAlias

import loguru
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from dirmark.constants import APP_NAME

from .models import AppInfo, AppPaths
from .paths import get_data_directory

LogLevel: TypeAlias = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]

TEXT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[scope]}:{function}:{line} - {message} | {extra}"


class LoggingConfig(BaseModel):
    """`logging:` section of config.yaml."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(default=True)
    log_level: LogLevel = Field(default="INFO")
    log_file: str | None = Field(default=None)
    rotation: str = Field(default="1 MB")
    retention: str = Field(default="7 days")
    format: Literal["json", "text"] = Field(default="text")


def setup_cli_logging(app_info: AppInfo, config: LoggingConfig, paths: AppPaths) -> int | None:
    """Route dirmark records to the log file.

    Returns the handler id, or None when the log file cannot be opened; a
    shortcut command never fails because its log is unavailable.
    """
    logger.enable(APP_NAME)
    logger.remove()
    logger.configure(extra={"scope": "cli", "env": app_info.environment})

    log_file = cli_log_file(config, paths)
    sink_options: dict[str, Any] = {
        "level": config.log_level,
        "rotation": config.rotation,
        "retention": config.retention,
        "diagnose": app_info.environment == "dev",
    }
    if config.format == "json":
        sink_options["serialize"] = True
    else:
        sink_options["format"] = TEXT_FORMAT + "\n{exception}"

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler_id = logger.add(log_file, **sink_options)
    except OSError:
        logger.disable(APP_NAME)
        return None

    return handler_id


def cli_log_file(config: LoggingConfig, paths: AppPaths) -> Path:
    if config.log_file:
        return Path(config.log_file).expanduser()
    return get_data_directory(paths) / paths.logs_dir_name / paths.log_filename


def disable_library_logging() -> None:
    logger.disable(APP_NAME)


def enable_library_logging(level: LogLevel = "INFO") -> int:
    """Opt in to dirmark records on stderr when used as a library."""
    logger.enable(APP_NAME)
    logger.remove()
    logger.configure(extra={"scope": APP_NAME})
    return logger.add(sys.stderr, level=level, format=TEXT_FORMAT, colorize=False)


def create_logger(scope: str) -> "loguru.Logger":
    return logger.bind(scope=scope)
