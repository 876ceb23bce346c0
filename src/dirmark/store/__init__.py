"""Persistent shortcut store: load/save, conflict-aware mutation, search and jump resolution."""

from .locations import StoreLocations, resolve_store_locations
from .matching import MatchKind, SearchMode, SearchOptions, build_search_mode
from .models import (
    AbortedByUserError,
    AddBehavior,
    AddOutcome,
    InvalidKeywordError,
    InvalidPathError,
    InvalidSortModeError,
    PatternError,
    ResolvedJump,
    SearchResult,
    ShortcutAdded,
    ShortcutAlreadyExistsError,
    ShortcutAlreadyPresent,
    ShortcutEntry,
    ShortcutError,
    ShortcutNotFoundError,
    ShortcutReplaced,
    SortMode,
    StoreConfigError,
    StoreIOError,
)
from .store import ConfirmCallback, ShortcutStore, canonicalize_directory, decline

__all__ = [
    "AbortedByUserError",
    "AddBehavior",
    "AddOutcome",
    "ConfirmCallback",
    "InvalidKeywordError",
    "InvalidPathError",
    "InvalidSortModeError",
    "MatchKind",
    "PatternError",
    "ResolvedJump",
    "SearchMode",
    "SearchOptions",
    "SearchResult",
    "ShortcutAdded",
    "ShortcutAlreadyExistsError",
    "ShortcutAlreadyPresent",
    "ShortcutEntry",
    "ShortcutError",
    "ShortcutNotFoundError",
    "ShortcutReplaced",
    "ShortcutStore",
    "SortMode",
    "StoreConfigError",
    "StoreIOError",
    "StoreLocations",
    "build_search_mode",
    "canonicalize_directory",
    "decline",
    "resolve_store_locations",
]
