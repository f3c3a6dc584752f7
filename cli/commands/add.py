"""Schedule an event from the command line."""

import logging

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from cli.context import get_context
from cli.display import console, format_event_time
from cli.utils import handle_feed_errors, parse_iso_datetime
from feedcal.models.notifications import ScheduleRequest
from feedcal.processing.event_mapper import from_tool_call

logger = logging.getLogger(__name__)


def add(
    title: Annotated[str, typer.Argument(help="Event title")],
    date: Annotated[
        str,
        typer.Option("--date", "-d", help="ISO 8601 date or date/time"),
    ],
    duration: Annotated[
        int | None,
        typer.Option("--duration", help="Duration in minutes (default 15)"),
    ] = None,
    category: Annotated[
        str | None,
        typer.Option(
            "--category",
            "-c",
            help="post, launch, review, task, automation, draft or reminder",
        ),
    ] = None,
    description: Annotated[
        str | None,
        typer.Option("--description", help="Long-form description"),
    ] = None,
    all_day: Annotated[
        bool,
        typer.Option("--all-day", help="Create an all-day event"),
    ] = False,
    source: Annotated[
        str | None,
        typer.Option("--source", "-s", help="Source id (adds a per-source feed)"),
    ] = None,
    project: Annotated[
        str | None,
        typer.Option("--project", help="Project tag"),
    ] = None,
    url: Annotated[
        str | None,
        typer.Option("--url", help="Link attached to the event"),
    ] = None,
    alert: Annotated[
        int | None,
        typer.Option("--alert", help="Alert this many minutes before start"),
    ] = None,
) -> None:
    """Add an event to the feeds."""
    ctx = get_context()
    start = parse_iso_datetime(date)

    try:
        request = ScheduleRequest(
            title=title,
            date=start,
            duration=duration,
            category=category,
            description=description,
            all_day=all_day,
            agent=source,
            project=project,
            url=url,
            alert_minutes=alert,
        )
    except ValidationError as e:
        logger.error(f"Invalid event: {e}")
        raise typer.Exit(1)

    with handle_feed_errors():
        event = ctx.router.add_event(from_tool_call(request, ctx.config.defaults))

    console.print(
        f"[green]✓[/green] Added [bold]{event.title}[/bold] "
        f"at {format_event_time(event)} (uid {event.uid})"
    )
