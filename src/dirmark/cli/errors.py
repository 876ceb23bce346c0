from __future__ import annotations

import typer

from dirmark.store import (
    AbortedByUserError,
    InvalidKeywordError,
    InvalidPathError,
    InvalidSortModeError,
    PatternError,
    ShortcutAlreadyExistsError,
    ShortcutError,
    ShortcutNotFoundError,
    StoreConfigError,
    StoreIOError,
)


def handle_error(error: ShortcutError) -> None:
    """Report store errors with user-friendly messages."""
    match error:
        case ShortcutNotFoundError(keyword=keyword):
            typer.secho(f"error: {error.message}", err=True, fg=typer.colors.RED)
            if "/" not in keyword:
                typer.secho("hint: use 'to list' to see saved shortcuts", err=True, fg=typer.colors.CYAN)
        case ShortcutAlreadyExistsError(keyword=keyword, existing_path=existing_path, requested_path=requested_path):
            message = f"error: keyword '{keyword}' already exists for '{existing_path}'"
            typer.secho(message, err=True, fg=typer.colors.RED)
            hint = f"hint: re-run with --force to replace it with '{requested_path}'"
            typer.secho(hint, err=True, fg=typer.colors.CYAN)
        case AbortedByUserError(message=message):
            typer.secho(f"error: {message}", err=True, fg=typer.colors.RED)
        case InvalidKeywordError(message=message):
            typer.secho(f"error: {message}", err=True, fg=typer.colors.RED)
        case InvalidPathError(message=message):
            typer.secho(f"error: {message}", err=True, fg=typer.colors.RED)
        case InvalidSortModeError(message=message):
            typer.secho(f"error: {message}", err=True, fg=typer.colors.RED)
        case PatternError(message=message):
            typer.secho(f"error: {message}", err=True, fg=typer.colors.RED)
        case StoreIOError(path=path, message=message):
            typer.secho("error: failed to access shortcut files", err=True, fg=typer.colors.RED)
            typer.secho(f"  {message}", err=True)
            typer.secho(f"hint: check permissions on '{path.parent}'", err=True, fg=typer.colors.CYAN)
        case StoreConfigError(variable=variable, message=message):
            typer.secho(f"error: {message}", err=True, fg=typer.colors.RED)
            typer.secho(f"hint: set {variable} in the environment", err=True, fg=typer.colors.CYAN)
        case _:  # pragma: no cover - fallback for unexpected subclasses
            typer.secho(f"error: {error.message}", err=True, fg=typer.colors.RED)
