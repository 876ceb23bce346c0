"""Terminal output for shortcut commands."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from dirmark.store import (
    AddOutcome,
    SearchResult,
    ShortcutAdded,
    ShortcutAlreadyPresent,
    ShortcutReplaced,
    ShortcutStore,
    SortMode,
)

PREVIEW_LIMIT = 30
PREVIEW_COLUMNS = 3


def print_saved_shortcuts(store: ShortcutStore) -> None:
    keywords = store.sorted_keywords()
    if not keywords:
        typer.secho("No shortcuts saved.", fg=typer.colors.RED, bold=True)
        return

    total = len(keywords)
    shown = keywords[:PREVIEW_LIMIT]
    width = max(len(keyword) for keyword in shown) + 2

    title = "Saved shortcuts:" if total <= PREVIEW_LIMIT else f"Saved shortcuts (showing {len(shown)} of {total}):"
    typer.secho(f"\n{title}", fg=typer.colors.MAGENTA)

    rows = (len(shown) + PREVIEW_COLUMNS - 1) // PREVIEW_COLUMNS
    for row in range(rows):
        cells = []
        for col in range(PREVIEW_COLUMNS):
            idx = col * rows + row
            if idx < len(shown):
                name = typer.style(shown[idx].ljust(width), fg=typer.colors.CYAN, bold=True)
                cells.append(f"  {idx + 1:>2}. {name}")
        typer.echo("".join(cells))

    if total > len(shown):
        typer.echo(f"  … and {total - len(shown)} more")

    typer.echo(f"\nCurrent sorting mode: {store.sort_mode.value}")


def print_results(results: list[SearchResult], *, as_json: bool, empty_message: str = "No shortcuts saved.") -> None:
    if as_json:
        typer.echo(json.dumps([result.model_dump(mode="json") for result in results], indent=2))
        return

    if not results:
        typer.secho(empty_message, fg=typer.colors.RED, bold=True)
        return

    for result in results:
        keyword = typer.style(result.keyword, fg=typer.colors.CYAN, bold=True)
        line = f"{keyword} → {typer.style(str(result.path), dim=True)}"
        if result.expiry is not None:
            line = f"{line} (expires {result.expiry})"
        typer.echo(line)


def print_add_outcome(outcome: AddOutcome) -> None:
    match outcome:
        case ShortcutAdded(keyword=keyword, path=path, expiry=expiry, duplicate_keywords=duplicates):
            _print_change("Added", keyword, path, expiry)
            if duplicates:
                typer.secho(f"  also saved as: {', '.join(duplicates)}", fg=typer.colors.YELLOW)
        case ShortcutAlreadyPresent(keyword=keyword, path=path, expiry=expiry, expiry_changed=changed):
            _print_change("Already saved", keyword, path, expiry)
            if changed:
                message = "  expiry cleared" if expiry is None else "  expiry updated"
                typer.secho(message, fg=typer.colors.YELLOW)
        case ShortcutReplaced(keyword=keyword, previous_path=previous_path, new_path=new_path, expiry=expiry):
            _print_change("Replaced", keyword, new_path, expiry)
            typer.echo(f"  was {typer.style(str(previous_path), dim=True)}")


def print_bulk_added(keywords: list[str]) -> None:
    if not keywords:
        typer.secho("No directories matched.", fg=typer.colors.YELLOW)
        return
    for keyword in keywords:
        added = typer.style("Added", fg=typer.colors.GREEN)
        typer.echo(f"{added} {typer.style(keyword, fg=typer.colors.CYAN, bold=True)}")


def print_sort_mode(mode: SortMode, *, changed: bool) -> None:
    label = typer.style(mode.value, fg=typer.colors.CYAN, bold=True)
    typer.echo(f"Sorting mode set to {label}" if changed else f"Current sorting mode: {label}")


def _print_change(verb: str, keyword: str, path: Path, expiry: int | None) -> None:
    line = (
        f"{typer.style(verb, fg=typer.colors.GREEN)} "
        f"{typer.style(keyword, fg=typer.colors.CYAN, bold=True)} → {typer.style(str(path), dim=True)}"
    )
    if expiry is not None:
        line = f"{line} (expires {expiry})"
    typer.echo(line)
