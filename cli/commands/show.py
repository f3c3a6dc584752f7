"""Display the events in a feed."""

import typer
from typing_extensions import Annotated

from cli.context import get_context
from cli.display import TableRenderer
from cli.utils import handle_feed_errors


def show(
    source: Annotated[
        str | None,
        typer.Argument(help="Source id (omit for the combined feed)"),
    ] = None,
) -> None:
    """Display events in the combined feed or one source's feed.

    Examples:
        feedcal show             # Combined feed
        feedcal show marketing   # Feed for source "marketing"
    """
    ctx = get_context()
    with handle_feed_errors():
        store = ctx.router.get_store(source)
        events = store.all_events()

    TableRenderer().render_event_list(events, title=store.calendar_name)
