"""Cancel or remove events."""

import logging

import typer
from typing_extensions import Annotated

from cli.context import get_context
from cli.display import console
from cli.utils import handle_feed_errors

logger = logging.getLogger(__name__)


def cancel(uid: Annotated[str, typer.Argument(help="Event uid")]) -> None:
    """Mark an event cancelled. It stays in the feeds with cancelled status."""
    ctx = get_context()
    with handle_feed_errors():
        event = ctx.router.cancel_event(uid)
    if event is None:
        logger.error(f"Event not found: {uid}")
        raise typer.Exit(1)
    console.print(f"Cancelled [bold]{event.title}[/bold] (sequence {event.sequence})")


def remove(uid: Annotated[str, typer.Argument(help="Event uid")]) -> None:
    """Delete an event from every feed."""
    ctx = get_context()
    with handle_feed_errors():
        removed = ctx.router.remove_event(uid)
    if not removed:
        logger.error(f"Event not found: {uid}")
        raise typer.Exit(1)
    console.print(f"Removed {uid}")
