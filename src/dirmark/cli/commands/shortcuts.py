"""CLI commands for saving, searching and resolving shortcuts."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from result import Err, Ok

from dirmark.store import (
    AddBehavior,
    InvalidPathError,
    MatchKind,
    SearchOptions,
    ShortcutStore,
    build_search_mode,
)

from ..context import require_store
from ..errors import handle_error
from ..render import print_add_outcome, print_bulk_added, print_results, print_sort_mode

ForceOption = Annotated[
    bool,
    typer.Option("--force", "-f", help="Replace an existing keyword and skip duplicate-path confirmation."),
]
YesOption = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Save a path that is already saved under another keyword without asking."),
]
TargetArgument = Annotated[
    str,
    typer.Argument(metavar="KEYWORD[/SUBDIR]", help="Shortcut, optionally followed by a sub-path"),
]


def register(app: typer.Typer) -> None:
    app.command("add")(add)
    app.command("add-bulk")(add_bulk)
    app.command("copy")(copy)
    app.command("rm")(remove)
    app.command("list")(search)
    app.command("search")(search)
    app.command("s", hidden=True)(search)
    app.command("path")(print_path)
    app.command("jump")(jump)
    app.command("sort")(sort)
    app.command("complete", hidden=True)(complete)


def add(
    ctx: typer.Context,
    first: Annotated[str, typer.Argument(metavar="KEYWORD|PATH", help="Keyword, or the path when used alone")],
    second: Annotated[str | None, typer.Argument(metavar="[PATH]", help="Path to save under KEYWORD")] = None,
    expire: Annotated[
        int | None,
        typer.Option("--expire", help="Expiration timestamp (seconds since epoch)."),
    ] = None,
    force: ForceOption = False,
    yes: YesOption = False,
) -> None:
    """Save a shortcut.

    Examples:

        # Save a directory under an explicit keyword
        to add proj ~/code/project

        # Use the directory name as keyword
        to add ~/code/project
    """
    store = require_store(ctx)

    if second is None:
        path = _expand(first)
        keyword = _basename_keyword(path)
    else:
        keyword, path = first, _expand(second)

    match store.add_shortcut(keyword, path, expire, _behavior(ctx, force, yes)):
        case Ok(outcome):
            print_add_outcome(outcome)
        case Err(error):
            handle_error(error)
            raise typer.Exit(code=1)


def add_bulk(
    ctx: typer.Context,
    pattern: Annotated[str, typer.Argument(help="Glob pattern; every matching directory is saved under its name")],
) -> None:
    """Add shortcuts for each directory matching PATTERN."""
    store = require_store(ctx)

    match store.add_bulk(pattern, _behavior(ctx, False, False)):
        case Ok(added):
            print_bulk_added(added)
        case Err(error):
            handle_error(error)
            raise typer.Exit(code=1)


def copy(
    ctx: typer.Context,
    existing: Annotated[str, typer.Argument(help="Saved keyword to copy")],
    new: Annotated[str, typer.Argument(help="New keyword, or a path whose name becomes the keyword")],
    force: ForceOption = False,
    yes: YesOption = False,
) -> None:
    """Duplicate an existing shortcut under a new keyword or path."""
    store = require_store(ctx)

    match store.copy_shortcut(existing, new, _behavior(ctx, force, yes)):
        case Ok(_):
            typer.echo(
                f"{typer.style('Copied', fg=typer.colors.GREEN)} "
                f"{typer.style(existing, fg=typer.colors.CYAN, bold=True)} → "
                f"{typer.style(new, fg=typer.colors.CYAN, bold=True)}"
            )
        case Err(error):
            handle_error(error)
            raise typer.Exit(code=1)


def remove(
    ctx: typer.Context,
    keyword: Annotated[str, typer.Argument(help="Saved keyword to remove")],
) -> None:
    """Remove a saved shortcut."""
    store = require_store(ctx)

    match store.remove_shortcut(keyword):
        case Ok(_):
            removed = typer.style("Removed", fg=typer.colors.GREEN)
            typer.echo(f"{removed} {typer.style(keyword, fg=typer.colors.CYAN, bold=True)}")
        case Err(error):
            handle_error(error)
            raise typer.Exit(code=1)


def search(
    ctx: typer.Context,
    query: Annotated[str | None, typer.Argument(help="Text to look for; lists everything when omitted")] = None,
    keyword: Annotated[bool, typer.Option("--keyword", "-k", help="Search keywords only.")] = False,
    path: Annotated[bool, typer.Option("--path", "-p", help="Search paths only.")] = False,
    require_both: Annotated[
        bool,
        typer.Option("--and", "-A", help="Require matches on both keyword and path when both are searched."),
    ] = False,
    glob: Annotated[bool, typer.Option("--glob", "-g", help="Treat query as a glob pattern.")] = False,
    regex: Annotated[bool, typer.Option("--regex", "-r", help="Treat query as a regular expression.")] = False,
    as_json: Annotated[bool, typer.Option("--json", "-j", help="Return results as JSON.")] = False,
    limit: Annotated[int | None, typer.Option("--limit", "-n", min=1, help="Limit number of results.")] = None,
    within: Annotated[Path | None, typer.Option("--within", help="Only shortcuts under this directory.")] = None,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", min=0, help="With --within, maximum depth below that directory."),
    ] = None,
) -> None:
    """Search saved shortcuts; with no query, list them all."""
    if glob and regex:
        raise typer.BadParameter("--glob and --regex cannot be used together")

    kind = MatchKind.GLOB if glob else MatchKind.REGEX if regex else MatchKind.SUBSTRING
    query = query or ""
    if kind is not MatchKind.SUBSTRING and not query:
        kind = MatchKind.SUBSTRING

    match build_search_mode(query, kind):
        case Ok(search_mode):
            pass
        case Err(error):
            handle_error(error)
            raise typer.Exit(code=1)

    store = require_store(ctx)
    options = SearchOptions(
        mode=search_mode,
        match_keyword=keyword,
        match_path=path,
        require_both=require_both,
        limit=limit,
        within=_expand(str(within)) if within else None,
        max_depth=max_depth,
    )
    empty_message = "No matching shortcuts." if query else "No shortcuts saved."
    print_results(store.search(options), as_json=as_json, empty_message=empty_message)


def print_path(
    ctx: typer.Context,
    target: TargetArgument,
) -> None:
    """Print the resolved path for TARGET without changing directory."""
    store = require_store(ctx)

    match store.resolve_jump(target):
        case Ok(resolved):
            typer.echo(str(resolved.target_path))
        case Err(error):
            handle_error(error)
            raise typer.Exit(code=1)


def jump(
    ctx: typer.Context,
    target: TargetArgument,
    no_create: Annotated[
        bool,
        typer.Option("--no-create", help="Fail instead of creating missing directories."),
    ] = False,
) -> None:
    """Resolve TARGET, record the visit and print the directory for the shell to enter.

    The path is the only thing written to stdout so a shell function can do:

        cd "$(to jump "$1")"
    """
    store = require_store(ctx)

    match store.resolve_jump(target):
        case Ok(resolved):
            destination = resolved.target_path
        case Err(error):
            handle_error(error)
            raise typer.Exit(code=1)

    if not destination.exists():
        if no_create:
            _fail_path(destination, f"Resolved path '{destination}' does not exist.")
            raise typer.Exit(code=1)
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            _fail_path(destination, f"Failed to create '{destination}': {e}")
            raise typer.Exit(code=1) from e
        typer.secho(f"Created {destination}", err=True, fg=typer.colors.GREEN)
    elif not destination.is_dir():
        _fail_path(destination, f"Resolved path '{destination}' is not a directory.")
        raise typer.Exit(code=1)

    match store.update_recent_usage(resolved.keyword):
        case Ok(_):
            typer.echo(str(destination))
        case Err(error):
            handle_error(error)
            raise typer.Exit(code=1)


def sort(
    ctx: typer.Context,
    mode: Annotated[
        str | None,
        typer.Argument(help="added | alpha | recent; prints the current mode when omitted"),
    ] = None,
) -> None:
    """Show or set the sorting mode."""
    store = require_store(ctx)

    if mode is None:
        print_sort_mode(store.sort_mode, changed=False)
        return

    match store.set_sort_mode(mode.lower()):
        case Ok(selected):
            print_sort_mode(selected, changed=True)
        case Err(error):
            handle_error(error)
            raise typer.Exit(code=1)


def complete(
    ctx: typer.Context,
    mode: Annotated[str, typer.Argument(help="keywords | targets")],
    text: Annotated[str, typer.Argument(help="Text typed so far")] = "",
) -> None:
    """Print completion candidates, one per line."""
    store = require_store(ctx)

    match mode:
        case "keywords":
            candidates = _keyword_candidates(store, text)
        case "targets":
            candidates = _target_candidates(store, text)
        case _:
            raise typer.BadParameter("Invalid completion mode", param_hint="MODE")

    for candidate in candidates:
        typer.echo(candidate)


def _behavior(ctx: typer.Context, force: bool, yes: bool) -> AddBehavior:
    return AddBehavior(force=force, assume_yes=yes or ctx.obj.settings.assume_yes)


def _fail_path(path: Path, message: str) -> None:
    handle_error(InvalidPathError(path=str(path), message=message))


def _expand(raw: str) -> Path:
    try:
        return Path(raw).expanduser()
    except RuntimeError as e:
        _fail_path(Path(raw), f"Failed to expand '{raw}': {e}")
        raise typer.Exit(code=1) from e


def _basename_keyword(path: Path) -> str:
    keyword = path.resolve(strict=False).name if path.name in ("", ".", "..") else path.name
    if not keyword:
        handle_error(InvalidPathError(path=str(path), message=f"Unable to derive keyword from '{path}'"))
        raise typer.Exit(code=1)
    return keyword


def _keyword_candidates(store: ShortcutStore, text: str) -> list[str]:
    return [keyword for keyword in store.sorted_keywords() if keyword.startswith(text)]


def _target_candidates(store: ShortcutStore, text: str) -> list[str]:
    keyword, sep, remainder = text.partition("/")
    entry = store.entry(keyword) if sep else None
    if entry is None:
        return _keyword_candidates(store, text)

    parent, _, prefix = remainder.rpartition("/")
    search_root = entry.path / parent if parent else entry.path
    if not search_root.is_dir():
        return _keyword_candidates(store, text)

    stem = f"{keyword}/{parent}/" if parent else f"{keyword}/"
    candidates = []
    for child in sorted(search_root.iterdir()):
        if not child.name.startswith(prefix):
            continue
        candidates.append(f"{stem}{child.name}/" if child.is_dir() else f"{stem}{child.name}")
    return candidates
