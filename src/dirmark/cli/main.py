from __future__ import annotations

from typing import Annotated

import typer

from dirmark.common import LoggingConfig, create_logger, setup_cli_logging
from dirmark.config import FileConfigStore
from dirmark.settings import Settings, get_settings

from .commands import config as config_commands
from .commands import shortcuts as shortcut_commands
from .context import CliContext, open_store
from .render import print_saved_shortcuts

logger = create_logger("cli")

app = typer.Typer(
    help="Persistent directory shortcuts.",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=False,
)
app.add_typer(config_commands.app, name="config")
shortcut_commands.register(app)


@app.callback(invoke_without_command=True)
def _root_callback(
    ctx: typer.Context,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable colored output")] = False,
) -> None:
    settings = Settings()
    color = not (no_color or settings.no_color)
    # Respect NO_COLOR environment variable and --no-color flag
    if not color:
        ctx.color = False
    ctx.obj = CliContext(settings=settings, color=color)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        store = open_store(ctx.obj, quiet=True)
        if store is not None:
            print_saved_shortcuts(store)
        raise typer.Exit()


def _setup_logging() -> None:
    settings = get_settings()
    config = FileConfigStore(paths=settings.paths).load().unwrap_or(None)
    logging_config = config.logging if config else LoggingConfig()

    if not logging_config.enabled:
        return

    handler_id = setup_cli_logging(app_info=settings.app, config=logging_config, paths=settings.paths)
    if handler_id is not None:
        logger.debug("CLI logging initialized", level=logging_config.log_level, format=logging_config.format)


def main() -> None:
    """Entrypoint for the dirmark CLI."""
    _setup_logging()
    app()
