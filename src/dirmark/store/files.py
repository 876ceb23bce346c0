"""Flat `key=value` files backing the shortcut store.

Every write opens the target read/write (creating it when absent), holds an
exclusive advisory lock on it for the whole rewrite, truncates it and writes
the full contents back. Readers treat a missing file as an empty mapping.
"""

from __future__ import annotations

import fcntl
import os
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import IO, TypeVar

from result import Err, Ok, Result

from dirmark.common import create_logger

from .locations import StoreLocations
from .models import DEFAULT_SORT_MODE, ShortcutEntry, SortMode, StoreIOError

logger = create_logger("store.files")

SORT_ORDER_KEY = "sort_order"

T = TypeVar("T")


def ensure_files(locations: StoreLocations) -> Result[None, StoreIOError]:
    """Create missing parent directories and the three data files.

    The preference file is only created on the first sort mode change.
    """
    for path in locations.all_files():
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(StoreIOError(path=path.parent, message=f"Failed to create directory: {e}"))

    for path in (locations.entries_file, locations.expiry_file, locations.recency_file):
        try:
            path.touch(exist_ok=True)
        except OSError as e:
            return Err(StoreIOError(path=path, message=f"Failed to create file: {e}"))

    return Ok(None)


def read_entries(path: Path) -> Result[list[ShortcutEntry], StoreIOError]:
    def collect() -> list[ShortcutEntry]:
        return [
            ShortcutEntry(keyword=key, path=Path(value))
            for key, value in _iter_records(path)
            if key.strip() and value.strip()
        ]

    return _guard_read(path, collect)


def read_number_map(path: Path) -> Result[dict[str, int], StoreIOError]:
    def collect() -> dict[str, int]:
        numbers: dict[str, int] = {}
        for key, value in _iter_records(path):
            try:
                numbers[key] = int(value.strip())
            except ValueError:
                logger.warning("Skipping malformed timestamp", path=str(path), keyword=key, value=value)
        return numbers

    return _guard_read(path, collect)


def read_sort_mode(path: Path) -> Result[SortMode, StoreIOError]:
    def find() -> SortMode:
        for key, value in _iter_records(path):
            if key.strip() == SORT_ORDER_KEY:
                try:
                    return SortMode(value.strip())
                except ValueError:
                    logger.warning("Unrecognized sort preference, using default", value=value)
                    return DEFAULT_SORT_MODE
        return DEFAULT_SORT_MODE

    return _guard_read(path, find)


def write_entries(path: Path, entries: Iterable[ShortcutEntry]) -> Result[None, StoreIOError]:
    return _rewrite(path, [f"{entry.keyword}={entry.path}" for entry in entries])


def write_number_map(path: Path, numbers: Mapping[str, int]) -> Result[None, StoreIOError]:
    return _rewrite(path, [f"{key}={numbers[key]}" for key in sorted(numbers)])


def write_sort_mode(path: Path, mode: SortMode) -> Result[None, StoreIOError]:
    """Rewrite the sort_order line, keeping every other preference line verbatim."""
    try:
        existing = path.read_text(encoding="utf-8").splitlines() if path.exists() else []
    except (OSError, UnicodeDecodeError) as e:
        return Err(StoreIOError(path=path, message=f"Failed to read preferences: {e}"))

    kept = [line for line in existing if not line.startswith(f"{SORT_ORDER_KEY}=")]
    return _rewrite(path, [*kept, f"{SORT_ORDER_KEY}={mode.value}"])


def _iter_records(path: Path) -> Iterator[tuple[str, str]]:
    if not path.exists():
        return
    with path.open(encoding="utf-8") as handle:
        for line in handle:
            key, sep, value = line.rstrip("\n").partition("=")
            if sep:
                yield key, value


def _guard_read(path: Path, read: Callable[[], T]) -> Result[T, StoreIOError]:
    try:
        return Ok(read())
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Failed to read store file", path=str(path), error=str(e))
        return Err(StoreIOError(path=path, message=f"Failed to read '{path}': {e}"))


def _rewrite(path: Path, lines: list[str]) -> Result[None, StoreIOError]:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with _locked_for_write(path) as handle:
            handle.seek(0)
            handle.truncate()
            handle.writelines(f"{line}\n" for line in lines)
            handle.flush()
            os.fsync(handle.fileno())
    except OSError as e:
        logger.error("Failed to write store file", path=str(path), error=str(e))
        return Err(StoreIOError(path=path, message=f"Failed to write '{path}': {e}"))

    logger.trace("Store file rewritten", path=str(path), records=len(lines))
    return Ok(None)


@contextmanager
def _locked_for_write(path: Path) -> Iterator[IO[str]]:
    fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
    with os.fdopen(fd, "r+", encoding="utf-8") as handle:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
        try:
            yield handle
        finally:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
