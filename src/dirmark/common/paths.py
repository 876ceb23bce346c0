"""XDG path discovery utilities for dirmark."""

from __future__ import annotations

import os
from pathlib import Path

from .models import AppPaths


def get_global_config_root(paths: AppPaths) -> Path:
    """Get global config root directory.

    Returns ~/.config/{app_name} (or XDG_CONFIG_HOME/{app_name} if set).
    """
    xdg_base = os.getenv("XDG_CONFIG_HOME")
    base_dir = Path(xdg_base).expanduser() if xdg_base else Path.home() / ".config"
    return base_dir / paths.config_dir_name


def get_global_config_file(paths: AppPaths) -> Path:
    return get_global_config_root(paths) / paths.global_config_filename


def get_data_directory(paths: AppPaths) -> Path:
    """Get XDG data directory.

    Returns ~/.local/share/{app_name} (or XDG_DATA_HOME/{app_name} if set).
    """
    xdg_data = os.getenv("XDG_DATA_HOME")
    base_dir = Path(xdg_data).expanduser() if xdg_data else Path.home() / ".local" / "share"
    return base_dir / paths.data_dir_name
