from __future__ import annotations

from pathlib import Path

import pytest

from dirmark.store import ShortcutStore, StoreLocations

NOW = 1_700_000_000


@pytest.fixture
def locations(tmp_path: Path) -> StoreLocations:
    root = tmp_path / ".goto"
    return StoreLocations(
        entries_file=root / "to_dirs",
        expiry_file=root / "to_dirs_meta",
        preference_file=root / "to_zsh_config",
        recency_file=root / "to_dirs_recent",
    )


@pytest.fixture
def make_dir(tmp_path: Path):
    def _make(name: str) -> Path:
        path = tmp_path / "dirs" / name
        path.mkdir(parents=True, exist_ok=True)
        return path.resolve()

    return _make


@pytest.fixture
def load_store(locations: StoreLocations):
    def _load(now: int = NOW, confirm=lambda _prompt: False) -> ShortcutStore:
        return ShortcutStore.load(locations, confirm=confirm, clock=lambda: now).unwrap()

    return _load
