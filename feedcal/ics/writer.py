"""ICS document writer for feed stores."""

from datetime import datetime, timezone
from typing import Iterable

from feedcal.constants import PRODUCT_ID, TIMEZONE_HINT, UID_DOMAIN
from feedcal.ics.codec import (
    CRLF,
    content_line,
    escape_text,
    format_date,
    format_datetime,
    status_to_ics,
)
from feedcal.models.event import CalendarEvent

X_SOURCE = "X-FEEDCAL-SOURCE"
X_PROJECT = "X-FEEDCAL-PROJECT"
X_EVENT_ID = "X-FEEDCAL-EVENT-ID"
X_DEFAULT_MESSAGE = "X-FEEDCAL-DEFAULT-MESSAGE"


class ICSWriter:
    """Writer for feed documents.

    Produces the exact text form of a store: CRLF line endings, every line
    folded at 75 octets, one VEVENT per event in iteration order.
    """

    def render(
        self,
        calendar_name: str,
        events: Iterable[CalendarEvent],
        now: datetime | None = None,
    ) -> str:
        """Render a complete calendar document.

        Args:
            calendar_name: Display name placed in X-WR-CALNAME
            events: Events to serialize, in document order
            now: Generation timestamp for DTSTAMP (defaults to current UTC time)

        Returns:
            Document text, terminated by CRLF
        """
        stamp = format_datetime(now or datetime.now(timezone.utc))

        lines = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            content_line("PRODID", PRODUCT_ID),
            "CALSCALE:GREGORIAN",
            "METHOD:PUBLISH",
            content_line("X-WR-CALNAME", escape_text(calendar_name)),
            f"X-WR-TIMEZONE:{TIMEZONE_HINT}",
        ]

        for event in events:
            lines.extend(self.event_lines(event, stamp))

        lines.append("END:VCALENDAR")
        return CRLF.join(lines) + CRLF

    def event_lines(self, event: CalendarEvent, stamp: str) -> list[str]:
        """Serialize one event as VEVENT content lines."""
        lines = ["BEGIN:VEVENT"]

        lines.append(content_line("UID", f"{event.uid}@{UID_DOMAIN}"))
        lines.append(f"DTSTAMP:{stamp}")

        if event.all_day:
            lines.append(f"DTSTART;VALUE=DATE:{format_date(event.start)}")
            if event.end is not None:
                lines.append(f"DTEND;VALUE=DATE:{format_date(event.end)}")
        else:
            lines.append(f"DTSTART:{format_datetime(event.start)}")
            if event.end is not None:
                lines.append(f"DTEND:{format_datetime(event.end)}")
            elif event.duration:
                lines.append(f"DURATION:PT{event.duration}M")
            else:
                # Default length
                lines.append(f"DTEND:{format_datetime(event.effective_end)}")

        lines.append(content_line("SUMMARY", escape_text(event.title)))

        if event.description:
            lines.append(content_line("DESCRIPTION", escape_text(event.description)))

        if event.category:
            lines.append(content_line("CATEGORIES", escape_text(event.category)))

        lines.append(f"STATUS:{status_to_ics(event.status)}")
        lines.append(f"SEQUENCE:{event.sequence}")

        if event.rrule:
            lines.append(content_line("RRULE", event.rrule))

        if event.agent:
            lines.append(content_line(X_SOURCE, escape_text(event.agent)))

        if event.project:
            lines.append(content_line(X_PROJECT, escape_text(event.project)))

        if event.url:
            lines.append(content_line("URL", event.url))

        # Visible in the raw document even when clients drop unknown properties
        lines.append(content_line(X_EVENT_ID, escape_text(event.uid)))

        for alert in event.alerts:
            lines.append("BEGIN:VALARM")
            lines.append("ACTION:DISPLAY")
            lines.append(
                content_line("DESCRIPTION", escape_text(alert.message or event.title))
            )
            lines.append(f"TRIGGER:-PT{alert.minutes_before}M")
            if not alert.message:
                # DESCRIPTION above is the title fallback, not a custom message
                lines.append(f"{X_DEFAULT_MESSAGE}:TRUE")
            lines.append("END:VALARM")

        lines.append("END:VEVENT")
        return lines

    def get_extension(self) -> str:
        """Returns file extension."""
        return "ics"
