from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dirmark.common import AppInfo, AppPaths
from dirmark.constants import ENV_PREFIX

_TRUTHY = {"1", "true", "yes", "y", "on"}


class Settings(BaseSettings):
    app: AppInfo = AppInfo()
    paths: AppPaths = AppPaths()

    home: str | None = Field(default=None, validation_alias=AliasChoices("HOME"))
    config_file: str | None = Field(default=None, validation_alias=AliasChoices("TO_CONFIG_FILE"))
    meta_file: str | None = Field(default=None, validation_alias=AliasChoices("TO_CONFIG_META_FILE"))
    user_config_file: str | None = Field(default=None, validation_alias=AliasChoices("TO_USER_CONFIG_FILE"))
    recent_file: str | None = Field(default=None, validation_alias=AliasChoices("TO_RECENT_FILE"))

    assume_yes: bool = Field(default=False, validation_alias=AliasChoices("GOTO_ASSUME_YES"))
    no_color: bool = Field(default=False, validation_alias=AliasChoices("NO_COLOR"))

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        nested_model_default_partial_update=True,
    )

    @field_validator("assume_yes", mode="before")
    @classmethod
    def _parse_assume_yes(cls, value: object) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        return bool(value)

    @field_validator("no_color", mode="before")
    @classmethod
    def _parse_no_color(cls, value: object) -> bool:
        # NO_COLOR disables color when present with any non-empty value
        if isinstance(value, str):
            return value != ""
        return bool(value)


def get_settings(*, reload: bool = False) -> Settings:
    global _settings
    if _settings is None or reload:
        _settings = Settings()
    return _settings


# Private singleton instance
_settings: Settings | None = None


__all__ = [
    "AppInfo",
    "AppPaths",
    "Settings",
    "get_settings",
]
