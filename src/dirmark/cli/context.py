"""Per-invocation state shared by CLI commands."""

from __future__ import annotations

import sys
from dataclasses import dataclass

import typer
from result import Err, Ok

from dirmark.settings import Settings
from dirmark.store import ConfirmCallback, ShortcutStore, decline, resolve_store_locations

from .errors import handle_error


@dataclass(frozen=True)
class CliContext:
    settings: Settings
    color: bool = True


def confirm_callback() -> ConfirmCallback:
    """Prompt on the terminal, or refuse when stdin is not interactive."""
    if not sys.stdin.isatty():
        return decline

    def ask(prompt: str) -> bool:
        return typer.confirm(prompt, default=False, err=True)

    return ask


def open_store(context: CliContext, *, quiet: bool = False) -> ShortcutStore | None:
    """Load the store, reporting failures unless `quiet`."""
    loaded = resolve_store_locations(context.settings).and_then(
        lambda locations: ShortcutStore.load(locations, confirm=confirm_callback())
    )
    match loaded:
        case Ok(store):
            return store
        case Err(error):
            if not quiet:
                handle_error(error)
            return None


def require_store(ctx: typer.Context) -> ShortcutStore:
    store = open_store(ctx.obj)
    if store is None:
        raise typer.Exit(code=1)
    return store
