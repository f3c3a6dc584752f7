"""Import events from a third-party ICS file."""

import logging
from pathlib import Path

import typer
from typing_extensions import Annotated

from cli.context import get_context
from cli.display import console
from cli.utils import handle_feed_errors
from feedcal.ics.importer import ICSImporter

logger = logging.getLogger(__name__)


def import_file(
    file: Annotated[Path, typer.Argument(help="ICS file to import")],
    source: Annotated[
        str | None,
        typer.Option("--source", "-s", help="Source id assigned to every event"),
    ] = None,
) -> None:
    """Import events from an ICS file into the feeds."""
    ctx = get_context()
    with handle_feed_errors():
        events = ICSImporter().read(file, source=source)
        for event in events:
            ctx.router.add_event(event)

    logger.info(f"Imported {len(events)} events from {file}")
    console.print(f"Imported {len(events)} event(s) from {file}")
