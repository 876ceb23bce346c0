"""Common models and helpers used across dirmark modules."""

from .logging import (
    LoggingConfig,
    cli_log_file,
    create_logger,
    disable_library_logging,
    enable_library_logging,
    setup_cli_logging,
)
from .models import AppInfo, AppPaths
from .paths import get_data_directory, get_global_config_file, get_global_config_root

__all__ = [
    "AppInfo",
    "AppPaths",
    "LoggingConfig",
    "cli_log_file",
    "create_logger",
    "disable_library_logging",
    "enable_library_logging",
    "get_data_directory",
    "get_global_config_file",
    "get_global_config_root",
    "setup_cli_logging",
]
