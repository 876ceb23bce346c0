from __future__ import annotations

import json
from typing import Annotated, Literal

import typer
import yaml
from result import Err, Ok

from dirmark.common import get_global_config_file
from dirmark.config import ConfigError, FileConfigStore
from dirmark.store import resolve_store_locations

FormatOption = Annotated[
    Literal["yaml", "json"],
    typer.Option("--format", "-f", show_default=True, case_sensitive=False, help="Output format (yaml or json)."),
]

app = typer.Typer(help="Inspect dirmark configuration.")


@app.callback(invoke_without_command=True)
def _config_root(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("show")
def show(ctx: typer.Context, format: FormatOption = "yaml") -> None:
    """Print the effective configuration and where the shortcut files live."""
    settings = ctx.obj.settings
    store = FileConfigStore(paths=settings.paths)

    match store.load():
        case Ok(config):
            payload = config.model_dump(mode="json")
        case Err(error):
            _handle_error(error)
            raise typer.Exit(code=1)

    match resolve_store_locations(settings):
        case Ok(locations):
            payload["files"] = {
                "config": str(get_global_config_file(settings.paths)),
                "entries": str(locations.entries_file),
                "expiry": str(locations.expiry_file),
                "preferences": str(locations.preference_file),
                "recency": str(locations.recency_file),
            }
        case Err(_):
            payload["files"] = {"config": str(get_global_config_file(settings.paths))}
    typer.echo(_format_payload(payload, format.lower()))


def _format_payload(payload: dict[str, object], format: str) -> str:
    if format == "json":
        return json.dumps(payload, indent=2, sort_keys=True)
    return yaml.safe_dump(payload, sort_keys=True)


def _handle_error(error: ConfigError) -> None:
    message = f"error: {error.message}"
    error_path = getattr(error, "path", None)
    if error_path is not None:
        message = f"{message} ({error_path})"
    field = getattr(error, "field", None)
    if field:
        message = f"{message} [field: {field}]"

    typer.secho(message, err=True, fg=typer.colors.RED)
