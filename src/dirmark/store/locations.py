"""Resolution of the four files backing the shortcut store."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from result import Err, Ok, Result

from dirmark.constants import DEFAULT_STORE_DIR_NAME
from dirmark.settings import Settings

from .models import StoreConfigError


@dataclass(frozen=True, slots=True)
class StoreLocations:
    """Files backing the store.

    Attributes:
        entries_file: keyword=path records, in insertion order
        expiry_file: keyword=epoch_seconds expiration instants
        preference_file: user preferences, including sort_order
        recency_file: keyword=epoch_seconds of the last jump
    """

    entries_file: Path
    expiry_file: Path
    preference_file: Path
    recency_file: Path

    def all_files(self) -> tuple[Path, Path, Path, Path]:
        return (self.entries_file, self.expiry_file, self.preference_file, self.recency_file)


def resolve_store_locations(settings: Settings) -> Result[StoreLocations, StoreConfigError]:
    if not settings.home:
        return Err(StoreConfigError(variable="HOME", message="HOME is not set"))

    root = Path(settings.home) / DEFAULT_STORE_DIR_NAME

    return Ok(
        StoreLocations(
            entries_file=_override_or_default(settings.config_file, root / "to_dirs"),
            expiry_file=_override_or_default(settings.meta_file, root / "to_dirs_meta"),
            preference_file=_override_or_default(settings.user_config_file, root / "to_zsh_config"),
            recency_file=_override_or_default(settings.recent_file, root / "to_dirs_recent"),
        )
    )


def _override_or_default(value: str | None, default: Path) -> Path:
    return Path(value).expanduser() if value else default
