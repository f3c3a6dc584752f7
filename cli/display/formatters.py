"""Pure formatting functions for display output."""

from datetime import datetime, timezone

from feedcal.models.event import CalendarEvent


def format_relative_time(dt: datetime, now: datetime | None = None) -> str:
    """Format datetime relative to now.

    Args:
        dt: Datetime to format.
        now: Reference time (defaults to current UTC time).

    Returns:
        Formatted time string (e.g., "2h ago", "in 3d", "just now").
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)

    delta = now - dt
    future = delta.total_seconds() < 0
    seconds = int(abs(delta.total_seconds()))

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        amount = f"{seconds // 60}m"
    elif seconds < 86400:
        amount = f"{seconds // 3600}h"
    elif seconds < 7 * 86400:
        amount = f"{seconds // 86400}d"
    elif seconds < 30 * 86400:
        amount = f"{seconds // (7 * 86400)}w"
    elif seconds < 365 * 86400:
        amount = f"{seconds // (30 * 86400)}mo"
    else:
        amount = f"{seconds // (365 * 86400)}y"
    return f"in {amount}" if future else f"{amount} ago"


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format (e.g., "1.5KB")."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.1f}{unit}"
        size /= 1024.0
    return f"{size:.1f}TB"


def format_event_time(event: CalendarEvent) -> str:
    """Start of an event: date only for all-day events, else UTC time."""
    if event.all_day:
        return event.start.strftime("%Y-%m-%d")
    return event.start.strftime("%Y-%m-%d %H:%M UTC")
