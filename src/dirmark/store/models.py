"""Data and error models for the shortcut store."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict


class SortMode(str, Enum):
    """Ordering used when listing keywords."""

    ADDED = "added"
    ALPHA = "alpha"
    RECENT = "recent"


DEFAULT_SORT_MODE = SortMode.ALPHA


@dataclass(slots=True)
class ShortcutEntry:
    keyword: str
    path: Path


@dataclass(frozen=True, slots=True)
class AddBehavior:
    """How an add resolves conflicts.

    Attributes:
        force: Overwrite a keyword that points elsewhere and skip duplicate-path confirmation
        assume_yes: Skip duplicate-path confirmation only
    """

    force: bool = False
    assume_yes: bool = False


class ShortcutAdded(BaseModel):
    """A new keyword was appended to the store."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    keyword: str
    path: Path
    expiry: int | None = None
    duplicate_keywords: list[str] = []


class ShortcutAlreadyPresent(BaseModel):
    """The keyword already pointed at the requested path."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    keyword: str
    path: Path
    expiry: int | None = None
    expiry_changed: bool = False


class ShortcutReplaced(BaseModel):
    """The keyword was re-pointed at a new path in place."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    keyword: str
    previous_path: Path
    new_path: Path
    expiry: int | None = None


AddOutcome: TypeAlias = ShortcutAdded | ShortcutAlreadyPresent | ShortcutReplaced


class SearchResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    keyword: str
    path: Path
    expiry: int | None = None


class ResolvedJump(BaseModel):
    """Outcome of resolving `keyword[/sub/path]` input."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    keyword: str
    base_path: Path
    target_path: Path


class BaseShortcutError(BaseModel):
    """Base store error model."""

    model_config = ConfigDict(extra="forbid")

    message: str


class ShortcutNotFoundError(BaseShortcutError):
    """Unknown keyword."""

    keyword: str


class InvalidPathError(BaseShortcutError):
    """Target missing, not a directory, or not canonicalizable."""

    path: str


class InvalidKeywordError(BaseShortcutError):
    """Keyword that cannot be stored as a `keyword=path` record."""

    keyword: str


class ShortcutAlreadyExistsError(BaseShortcutError):
    """Keyword already maps to a different path and force was not set."""

    keyword: str
    existing_path: Path
    requested_path: Path


class AbortedByUserError(BaseShortcutError):
    """Duplicate-path confirmation was declined or unavailable."""

    keyword: str
    path: Path
    existing_keywords: list[str]


class InvalidSortModeError(BaseShortcutError):
    value: str


class PatternError(BaseShortcutError):
    """Malformed glob or regular expression."""

    pattern: str


class StoreIOError(BaseShortcutError):
    """Filesystem or lock failure."""

    path: Path


class StoreConfigError(BaseShortcutError):
    """Required environment is missing."""

    variable: str


ShortcutError: TypeAlias = (
    ShortcutNotFoundError
    | InvalidPathError
    | InvalidKeywordError
    | ShortcutAlreadyExistsError
    | AbortedByUserError
    | InvalidSortModeError
    | PatternError
    | StoreIOError
    | StoreConfigError
)


__all__ = [
    "DEFAULT_SORT_MODE",
    "AbortedByUserError",
    "AddBehavior",
    "AddOutcome",
    "BaseShortcutError",
    "InvalidKeywordError",
    "InvalidPathError",
    "InvalidSortModeError",
    "PatternError",
    "ResolvedJump",
    "SearchResult",
    "ShortcutAdded",
    "ShortcutAlreadyExistsError",
    "ShortcutAlreadyPresent",
    "ShortcutEntry",
    "ShortcutError",
    "ShortcutNotFoundError",
    "ShortcutReplaced",
    "SortMode",
    "StoreConfigError",
    "StoreIOError",
]
