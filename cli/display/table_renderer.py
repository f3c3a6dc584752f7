"""Table renderer for feed and event lists."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from rich.markup import escape
from rich.table import Table

from cli.display.console import console
from cli.display.formatters import (
    format_event_time,
    format_file_size,
    format_relative_time,
)
from feedcal.models.event import CalendarEvent, EventStatus

STATUS_STYLES = {
    EventStatus.PLANNED: "yellow",
    EventStatus.IN_PROGRESS: "blue",
    EventStatus.COMPLETED: "green",
    EventStatus.CANCELLED: "dim strike",
}


@dataclass
class FeedInfo:
    """Information about a feed for display."""

    name: str
    event_count: int
    path: Path
    size: int | None = None
    updated: datetime | None = None


class TableRenderer:
    """Render tables for feed and event lists.

    Uses Rich's Table class for consistent, well-formatted output.
    """

    def render_feed_list(self, feeds: list[FeedInfo], feed_dir: Path) -> None:
        """Render the known feeds as a table."""
        if not feeds:
            console.print("No feeds found")
            return

        console.print(f"Listing feeds at {feed_dir.resolve()}:")
        console.print()

        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("NAME", style="cyan")
        table.add_column("EVENTS", justify="right")
        table.add_column("SIZE", justify="right", style="dim")
        table.add_column("UPDATED", style="dim")
        table.add_column("PATH", style="dim")

        for feed in feeds:
            table.add_row(
                escape(feed.name),
                str(feed.event_count),
                format_file_size(feed.size) if feed.size is not None else "-",
                format_relative_time(feed.updated) if feed.updated else "-",
                str(feed.path),
            )

        console.print(table)

    def render_event_list(self, events: list[CalendarEvent], title: str) -> None:
        """Render events as a table, ordered by start."""
        if not events:
            self.render_empty(f"No events in {title}")
            return

        console.print(f"[bold]{escape(title)}[/bold] ({len(events)} events)")
        console.print()

        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("START", style="dim", no_wrap=True)
        table.add_column("TITLE")
        table.add_column("STATUS")
        table.add_column("SOURCE", style="cyan")
        table.add_column("SEQ", justify="right", style="dim")
        table.add_column("UID", style="dim")

        for event in sorted(events, key=lambda e: e.start):
            style = STATUS_STYLES.get(event.status, "")
            status = event.status.value.lower()
            if event.is_recurring:
                status += " ↻"
            table.add_row(
                format_event_time(event),
                escape(event.title),
                f"[{style}]{status}[/{style}]" if style else status,
                escape(event.agent or "-"),
                str(event.sequence),
                escape(event.uid),
            )

        console.print(table)

    def render_empty(self, message: str) -> None:
        """Render an empty state message."""
        console.print(f"[dim]{escape(message)}[/dim]")
