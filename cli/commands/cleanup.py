"""Evict old completed events."""

import typer
from typing_extensions import Annotated

from cli.context import get_context
from cli.display import console
from cli.utils import handle_feed_errors


def cleanup(
    retention_days: Annotated[
        int | None,
        typer.Option("--retention-days", help="Keep completed events this many days"),
    ] = None,
    max_events: Annotated[
        int | None,
        typer.Option("--max-events", help="Cap on events per feed"),
    ] = None,
) -> None:
    """Remove completed events past retention, then trim feeds over the cap."""
    ctx = get_context()
    settings = ctx.config.cleanup
    with handle_feed_errors():
        removed = ctx.router.cleanup(
            retention_days if retention_days is not None else settings.retention_days,
            max_events if max_events is not None else settings.max_past_events,
        )
    console.print(f"Removed {removed} event(s)")
