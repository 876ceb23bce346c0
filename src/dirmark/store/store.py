"""In-memory shortcut store with durable, whole-file persistence.

A store is loaded once per invocation, mutated in place, and every successful
mutation is written back before it reports success. Writers lock each file for
the duration of its rewrite, but a load-mutate-save cycle is not atomic across
processes: two invocations saving concurrently can lose one of the updates.
"""

from __future__ import annotations

import glob
import os
import time
from collections.abc import Callable
from copy import deepcopy
from pathlib import Path
from typing import TypeAlias

from natsort import natsorted
from result import Err, Ok, Result, is_err

from dirmark.common import create_logger

from . import files
from .locations import StoreLocations
from .matching import SearchOptions, compile_glob, match_record
from .models import (
    AbortedByUserError,
    AddBehavior,
    AddOutcome,
    InvalidKeywordError,
    InvalidPathError,
    InvalidSortModeError,
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
    StoreIOError,
)

logger = create_logger("store")

ConfirmCallback: TypeAlias = Callable[[str], bool]
Clock: TypeAlias = Callable[[], int]


def current_epoch() -> int:
    return int(time.time())


def decline(_prompt: str) -> bool:
    """Confirmation callback for non-interactive use."""
    return False


class ShortcutStore:
    """Keyword to directory shortcuts plus expiry and recency metadata."""

    def __init__(
        self,
        locations: StoreLocations,
        entries: list[ShortcutEntry],
        *,
        expiries: dict[str, int] | None = None,
        recents: dict[str, int] | None = None,
        sort_mode: SortMode = SortMode.ALPHA,
        confirm: ConfirmCallback = decline,
        clock: Clock = current_epoch,
    ) -> None:
        self._locations = locations
        self._entries = entries
        self._expiries = expiries or {}
        self._recents = recents or {}
        self._sort_mode = sort_mode
        self._confirm = confirm
        self._clock = clock
        self._index: dict[str, int] = {}
        self._rebuild_index()

    @classmethod
    def load(
        cls,
        locations: StoreLocations,
        *,
        confirm: ConfirmCallback = decline,
        clock: Clock = current_epoch,
    ) -> Result[ShortcutStore, StoreIOError]:
        """Read all backing files and purge expired entries.

        Expiry records without a live entry are dropped as well. When anything
        was purged, the entries and expiry files are rewritten before
        returning so the purge is durable.
        """
        ensured = files.ensure_files(locations)
        if is_err(ensured):
            return ensured

        expiries_result = files.read_number_map(locations.expiry_file)
        recents_result = files.read_number_map(locations.recency_file)
        entries_result = files.read_entries(locations.entries_file)
        sort_result = files.read_sort_mode(locations.preference_file)
        for loaded in (expiries_result, recents_result, entries_result, sort_result):
            if is_err(loaded):
                return loaded

        expiries = expiries_result.unwrap()
        now = clock()
        kept: list[ShortcutEntry] = []
        purged: list[str] = []
        for entry in entries_result.unwrap():
            expiry = expiries.get(entry.keyword)
            if expiry is not None and expiry <= now:
                expiries.pop(entry.keyword)
                purged.append(entry.keyword)
                continue
            kept.append(entry)

        kept_keywords = {entry.keyword for entry in kept}
        orphaned = [keyword for keyword in expiries if keyword not in kept_keywords]
        for keyword in orphaned:
            expiries.pop(keyword)

        store = cls(
            locations,
            kept,
            expiries=expiries,
            recents=recents_result.unwrap(),
            sort_mode=sort_result.unwrap(),
            confirm=confirm,
            clock=clock,
        )

        if purged or orphaned:
            logger.info("Purged expired shortcuts", keywords=purged, orphaned_expiries=orphaned)
            persisted = store._write_entries_and_expiries()
            if is_err(persisted):
                return persisted

        logger.debug("Store loaded", entries=len(kept), sort_mode=store.sort_mode.value)
        return Ok(store)

    @property
    def locations(self) -> StoreLocations:
        return self._locations

    @property
    def entries(self) -> tuple[ShortcutEntry, ...]:
        return tuple(self._entries)

    @property
    def expiries(self) -> dict[str, int]:
        return dict(self._expiries)

    @property
    def recents(self) -> dict[str, int]:
        return dict(self._recents)

    @property
    def sort_mode(self) -> SortMode:
        return self._sort_mode

    def entry(self, keyword: str) -> ShortcutEntry | None:
        position = self._index.get(keyword)
        return None if position is None else self._entries[position]

    def expiry_for(self, keyword: str) -> int | None:
        return self._expiries.get(keyword)

    def set_sort_mode(self, raw: str) -> Result[SortMode, InvalidSortModeError | StoreIOError]:
        try:
            mode = SortMode(raw)
        except ValueError:
            message = f"Invalid sort mode '{raw}'. Use added, alpha, or recent."
            return Err(InvalidSortModeError(value=raw, message=message))

        written = files.write_sort_mode(self._locations.preference_file, mode)
        if is_err(written):
            return written

        self._sort_mode = mode
        logger.info("Sort mode changed", sort_mode=mode.value)
        return Ok(mode)

    def sorted_keywords(self) -> list[str]:
        keywords = [entry.keyword for entry in self._entries]

        match self._sort_mode:
            case SortMode.ADDED:
                return keywords
            case SortMode.ALPHA:
                return natsorted(keywords)
            case SortMode.RECENT:
                return sorted(keywords, key=lambda keyword: self._recents.get(keyword, 0), reverse=True)

    def search(self, options: SearchOptions) -> list[SearchResult]:
        """Entries matching `options`, in the current sort order, stopping at `limit`."""
        results: list[SearchResult] = []
        if options.limit is not None and options.limit <= 0:
            return results

        root = Path(os.path.realpath(options.within)) if options.within is not None else None

        for keyword in self.sorted_keywords():
            entry = self._entries[self._index[keyword]]

            if root is not None and not self._is_within(entry.path, root, options.max_depth):
                continue

            if not match_record(options, entry.keyword, str(entry.path)):
                continue

            results.append(SearchResult(keyword=entry.keyword, path=entry.path, expiry=self._expiries.get(keyword)))
            if options.limit is not None and len(results) >= options.limit:
                break

        return results

    def add_shortcut(
        self,
        keyword: str,
        target_path: Path,
        expire: int | None = None,
        behavior: AddBehavior = AddBehavior(),
    ) -> Result[AddOutcome, ShortcutError]:
        invalid = validate_keyword(keyword)
        if invalid is not None:
            return Err(invalid)

        canonical_result = canonicalize_directory(target_path)
        if is_err(canonical_result):
            return canonical_result
        path = canonical_result.unwrap()

        duplicates = [entry.keyword for entry in self._entries if entry.path == path and entry.keyword != keyword]

        position = self._index.get(keyword)
        if position is not None:
            return self._update_existing(position, path, expire, behavior)

        if duplicates and not behavior.force and not behavior.assume_yes:
            prompt = (
                f"Path '{path}' is already saved under keyword(s): {', '.join(duplicates)}. "
                f"Add keyword '{keyword}' for the same path?"
            )
            if not self._confirm(prompt):
                logger.info("Duplicate path add declined", keyword=keyword, path=str(path))
                return Err(
                    AbortedByUserError(
                        keyword=keyword,
                        path=path,
                        existing_keywords=duplicates,
                        message=f"Aborted adding '{keyword}'. Use --force or set GOTO_ASSUME_YES=1 to proceed.",
                    )
                )

        snapshot = self._snapshot()
        self._append(keyword, path)
        expiry, _ = self._apply_expiry(keyword, expire)

        persisted = self._write_entries_and_expiries()
        if is_err(persisted):
            self._restore(snapshot)
            return persisted

        logger.info("Shortcut added", keyword=keyword, path=str(path), expiry=expiry, duplicates=duplicates)
        return Ok(ShortcutAdded(keyword=keyword, path=path, expiry=expiry, duplicate_keywords=duplicates))

    def add_bulk(self, pattern: str, behavior: AddBehavior = AddBehavior()) -> Result[list[str], ShortcutError]:
        """Add every directory matching `pattern` under its basename.

        Basenames that are already keywords are skipped. Paths already saved
        under another keyword are added without confirmation.
        """
        compiled = compile_glob(pattern)
        if is_err(compiled):
            return compiled

        snapshot = self._snapshot()
        added: list[str] = []
        for match in sorted(glob.glob(os.path.expanduser(pattern), recursive=True)):
            candidate = Path(match)
            keyword = candidate.name
            if validate_keyword(keyword) is not None or keyword in self._index or not candidate.is_dir():
                continue

            canonical = canonicalize_directory(candidate)
            if is_err(canonical):
                self._restore(snapshot)
                return canonical

            self._append(keyword, canonical.unwrap())
            self._apply_expiry(keyword, None)
            added.append(keyword)

        if added:
            persisted = self._write_entries_and_expiries()
            if is_err(persisted):
                self._restore(snapshot)
                return persisted

        logger.info("Bulk add finished", pattern=pattern, added=added, force=behavior.force)
        return Ok(added)

    def copy_shortcut(
        self,
        existing: str,
        new_value: str,
        behavior: AddBehavior = AddBehavior(),
    ) -> Result[AddOutcome, ShortcutError]:
        """Duplicate `existing` under a new keyword, or point a path's basename at it.

        An absolute `new_value` or one naming an existing directory is a path:
        the new keyword is its basename. Anything else is a keyword that
        reuses the existing entry's path.
        """
        source = self.entry(existing)
        if source is None:
            return Err(_not_found(existing))

        candidate = Path(new_value)
        if candidate.is_absolute() or candidate.is_dir():
            keyword = candidate.name
            if not keyword:
                return Err(InvalidPathError(path=new_value, message=f"Unable to derive keyword from '{new_value}'"))
            return self.add_shortcut(keyword, candidate, None, behavior)

        return self.add_shortcut(new_value, source.path, None, behavior)

    def remove_shortcut(self, keyword: str) -> Result[None, ShortcutError]:
        position = self._index.get(keyword)
        if position is None:
            return Err(_not_found(keyword))

        snapshot = self._snapshot()
        del self._entries[position]
        self._rebuild_index()
        self._expiries.pop(keyword, None)
        self._recents.pop(keyword, None)

        persisted = self._write_entries_and_expiries().and_then(
            lambda _: files.write_number_map(self._locations.recency_file, self._recents)
        )
        if is_err(persisted):
            self._restore(snapshot)
            return persisted

        logger.info("Shortcut removed", keyword=keyword)
        return Ok(None)

    def resolve_jump(self, target: str) -> Result[ResolvedJump, ShortcutNotFoundError]:
        """Resolve `keyword[/sub/path]`, preferring the longest registered prefix.

        Keywords may themselves contain slashes; whatever follows the matched
        keyword is appended to its stored path.
        """
        parts = target.split("/")
        prefixes = ("/".join(parts[:count]) for count in range(len(parts), 0, -1))

        for prefix in prefixes:
            if not prefix or prefix not in self._index:
                continue

            entry = self._entries[self._index[prefix]]
            remainder = target[len(prefix) :].lstrip("/")
            target_path = entry.path / remainder if remainder else entry.path
            return Ok(ResolvedJump(keyword=entry.keyword, base_path=entry.path, target_path=target_path))

        return Err(ShortcutNotFoundError(keyword=target, message=f"Shortcut or path '{target}' not found."))

    def update_recent_usage(self, keyword: str) -> Result[None, StoreIOError]:
        previous = self._recents.get(keyword)
        self._recents[keyword] = self._clock()

        written = files.write_number_map(self._locations.recency_file, self._recents)
        if is_err(written):
            if previous is None:
                self._recents.pop(keyword, None)
            else:
                self._recents[keyword] = previous
            return written

        logger.debug("Recent usage recorded", keyword=keyword)
        return Ok(None)

    def _update_existing(
        self,
        position: int,
        path: Path,
        expire: int | None,
        behavior: AddBehavior,
    ) -> Result[AddOutcome, ShortcutError]:
        entry = self._entries[position]
        keyword = entry.keyword

        if entry.path == path:
            previous = self._expiries.get(keyword)
            expiry, changed = self._apply_expiry(keyword, expire)
            if changed:
                written = files.write_number_map(self._locations.expiry_file, self._expiries)
                if is_err(written):
                    self._apply_expiry(keyword, previous)
                    return written
            return Ok(ShortcutAlreadyPresent(keyword=keyword, path=path, expiry=expiry, expiry_changed=changed))

        if not behavior.force:
            return Err(
                ShortcutAlreadyExistsError(
                    keyword=keyword,
                    existing_path=entry.path,
                    requested_path=path,
                    message=(
                        f"Keyword '{keyword}' already exists for '{entry.path}'. "
                        f"Re-run with --force to replace it with '{path}'."
                    ),
                )
            )

        snapshot = self._snapshot()
        previous_path = entry.path
        entry.path = path
        expiry, _ = self._apply_expiry(keyword, expire)

        persisted = self._write_entries_and_expiries()
        if is_err(persisted):
            self._restore(snapshot)
            return persisted

        logger.info("Shortcut replaced", keyword=keyword, previous_path=str(previous_path), new_path=str(path))
        return Ok(ShortcutReplaced(keyword=keyword, previous_path=previous_path, new_path=path, expiry=expiry))

    def _append(self, keyword: str, path: Path) -> None:
        self._index[keyword] = len(self._entries)
        self._entries.append(ShortcutEntry(keyword=keyword, path=path))

    def _apply_expiry(self, keyword: str, expire: int | None) -> tuple[int | None, bool]:
        previous = self._expiries.get(keyword)
        if expire is None:
            self._expiries.pop(keyword, None)
        else:
            self._expiries[keyword] = expire
        return expire, previous != expire

    def _write_entries_and_expiries(self) -> Result[None, StoreIOError]:
        return files.write_entries(self._locations.entries_file, self._entries).and_then(
            lambda _: files.write_number_map(self._locations.expiry_file, self._expiries)
        )

    def _snapshot(self) -> tuple[list[ShortcutEntry], dict[str, int], dict[str, int]]:
        return deepcopy(self._entries), dict(self._expiries), dict(self._recents)

    def _restore(self, snapshot: tuple[list[ShortcutEntry], dict[str, int], dict[str, int]]) -> None:
        self._entries, self._expiries, self._recents = snapshot
        self._rebuild_index()
        logger.warning("In-memory store rolled back after failed write")

    def _rebuild_index(self) -> None:
        self._index = {entry.keyword: position for position, entry in enumerate(self._entries)}

    @staticmethod
    def _is_within(path: Path, root: Path, max_depth: int | None) -> bool:
        try:
            canonical = path.resolve(strict=True)
        except OSError:
            return False

        if not canonical.is_relative_to(root):
            return False

        if max_depth is not None and len(canonical.relative_to(root).parts) > max_depth:
            return False

        return True


def canonicalize_directory(target: Path) -> Result[Path, InvalidPathError]:
    """Absolute, symlink-free form of an existing directory."""
    try:
        target = target.expanduser()
    except RuntimeError as e:
        return Err(InvalidPathError(path=str(target), message=f"Failed to expand '{target}': {e}"))
    if not target.exists():
        return Err(InvalidPathError(path=str(target), message=f"Path '{target}' does not exist."))
    if not target.is_dir():
        return Err(InvalidPathError(path=str(target), message=f"Path '{target}' exists but is not a directory."))
    try:
        return Ok(target.resolve(strict=True))
    except (OSError, RuntimeError) as e:
        return Err(InvalidPathError(path=str(target), message=f"Failed to resolve '{target}': {e}"))


def _not_found(keyword: str) -> ShortcutNotFoundError:
    return ShortcutNotFoundError(keyword=keyword, message=f"Keyword '{keyword}' not found.")


def validate_keyword(keyword: str) -> InvalidKeywordError | None:
    """Error for keywords that would not survive a `keyword=path` round trip."""
    if not keyword.strip():
        return InvalidKeywordError(keyword=keyword, message="Keyword must not be empty.")
    if "=" in keyword or "\n" in keyword or "\r" in keyword:
        return InvalidKeywordError(
            keyword=keyword,
            message=f"Keyword {keyword!r} must not contain '=' or line breaks.",
        )
    return None
