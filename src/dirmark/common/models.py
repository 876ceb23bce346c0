"""Common models used across dirmark."""

from typing import Literal

from pydantic import BaseModel

from dirmark.constants import APP_NAME


class AppInfo(BaseModel):
    project_name: str = APP_NAME
    version: str = "0.1.0"
    environment: Literal["test", "dev", "prod"] = "prod"


class AppPaths(BaseModel):
    config_dir_name: str = APP_NAME
    data_dir_name: str = APP_NAME
    global_config_filename: str = "config.yaml"
    logs_dir_name: str = "logs"
    log_filename: str = f"{APP_NAME}.log"
