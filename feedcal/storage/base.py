"""Base protocol for anything that accepts calendar events."""

from typing import Any, Mapping, Protocol

from feedcal.models.event import CalendarEvent


class EventSink(Protocol):
    """Protocol implemented by EventStore and FeedRouter."""

    def add_event(self, event: CalendarEvent) -> CalendarEvent:
        """Insert or overwrite an event by uid."""
        ...

    def update_event(
        self, uid: str, changes: Mapping[str, Any]
    ) -> CalendarEvent | None:
        """Merge changes into an existing event, bumping its sequence."""
        ...

    def cancel_event(self, uid: str) -> CalendarEvent | None:
        """Mark an event cancelled."""
        ...

    def get_event(self, uid: str) -> CalendarEvent | None:
        """Get an event by uid."""
        ...
