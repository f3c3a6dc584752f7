"""Typer application and command routing."""

import logging
from pathlib import Path

import typer
from typing_extensions import Annotated

from cli import setup_logging
from cli.commands import (
    add,
    cancel,
    cleanup,
    config,
    feeds,
    import_file,
    remove,
    render,
    serve,
    show,
)
from cli.context import CLIContext, set_context
from cli.utils import handle_feed_errors

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="feedcal",
    help="Activity feed calendars: schedule, inspect and serve ICS feeds.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show info messages")
    ] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Only show errors")
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="JSON configuration file"),
    ] = None,
) -> None:
    """Activity feed calendars."""
    ctx = CLIContext(verbose=verbose, quiet=quiet, config_path=config_path)
    set_context(ctx)
    with handle_feed_errors():
        cfg = ctx.config
    setup_logging(verbose=verbose, quiet=quiet, config=cfg)


app.command("feeds")(feeds)
app.command("show")(show)
app.command("render")(render)
app.command("add")(add)
app.command("cancel")(cancel)
app.command("remove")(remove)
app.command("cleanup")(cleanup)
app.command("import")(import_file)
app.command("serve")(serve)
app.command("config")(config)
