"""ICS document reader for feed stores."""

import logging
import re
from pathlib import Path

from feedcal.constants import UID_DOMAIN
from feedcal.exceptions import DocumentParseError
from feedcal.ics.codec import (
    parse_date,
    parse_datetime,
    parse_duration_minutes,
    status_from_ics,
    unescape_text,
    unfold,
)
from feedcal.ics.writer import X_DEFAULT_MESSAGE, X_EVENT_ID, X_PROJECT, X_SOURCE
from feedcal.models.event import CalendarEvent, EventAlert

logger = logging.getLogger(__name__)

_LINE_SPLIT_RE = re.compile(r"\r?\n")


class ContentLine:
    """One unfolded NAME;PARAM=VALUE:value line."""

    __slots__ = ("name", "params", "value")

    def __init__(self, name: str, params: dict[str, str], value: str):
        self.name = name
        self.params = params
        self.value = value

    @classmethod
    def parse(cls, line: str) -> "ContentLine | None":
        """Split a content line; returns None for lines without a colon."""
        key, sep, value = line.partition(":")
        if not sep:
            return None

        name, *raw_params = key.split(";")
        params = {}
        for raw in raw_params:
            param_name, _, param_value = raw.partition("=")
            params[param_name.upper()] = param_value.strip('"')
        return cls(name.upper(), params, value)


class ICSReader:
    """Reader for feed documents written by ICSWriter.

    Malformed VEVENT blocks are skipped with a warning so a single bad block
    never prevents the rest of the document from loading.
    """

    def __init__(self):
        self.skipped = 0

    def read(self, path: Path) -> list[CalendarEvent]:
        """Read events from a feed document on disk."""
        logger.debug(f"Reading feed document: {path}")
        return self.parse(path.read_text(encoding="utf-8"))

    def parse(self, text: str) -> list[CalendarEvent]:
        """Parse document text into events, in document order."""
        self.skipped = 0
        events: list[CalendarEvent] = []

        current: list[ContentLine] | None = None
        alarms: list[list[ContentLine]] = []
        alarm: list[ContentLine] | None = None

        for line in _LINE_SPLIT_RE.split(unfold(text)):
            if line == "BEGIN:VEVENT":
                if current is not None:
                    logger.warning("Unterminated VEVENT block skipped")
                    self.skipped += 1
                current, alarms, alarm = [], [], None
                continue

            if current is None:
                continue

            if line == "END:VEVENT":
                try:
                    events.append(self._build_event(current, alarms))
                except (DocumentParseError, ValueError) as e:
                    logger.warning(f"Skipping malformed event block: {e}")
                    self.skipped += 1
                current, alarms, alarm = None, [], None
                continue

            if line == "BEGIN:VALARM":
                alarm = []
                continue

            if line == "END:VALARM":
                if alarm is not None:
                    alarms.append(alarm)
                alarm = None
                continue

            content = ContentLine.parse(line)
            if content is None:
                continue
            if alarm is not None:
                alarm.append(content)
            else:
                current.append(content)

        if current is not None:
            logger.warning("Document ended inside a VEVENT block")
            self.skipped += 1

        return events

    def _build_event(
        self, lines: list[ContentLine], alarms: list[list[ContentLine]]
    ) -> CalendarEvent:
        """Convert the content lines of one VEVENT into an event."""
        fields: dict = {}
        source_id = None

        for content in lines:
            name, value = content.name, content.value
            is_date = content.params.get("VALUE") == "DATE"

            if name == "UID":
                fields["uid"] = value.removesuffix(f"@{UID_DOMAIN}")
            elif name == X_EVENT_ID:
                source_id = unescape_text(value)
            elif name == "SUMMARY":
                fields["title"] = unescape_text(value)
            elif name == "DESCRIPTION":
                fields["description"] = unescape_text(value)
            elif name == "DTSTART":
                fields["start"] = parse_date(value) if is_date else parse_datetime(value)
                fields["all_day"] = is_date
            elif name == "DTEND":
                fields["end"] = parse_date(value) if is_date else parse_datetime(value)
            elif name == "DURATION":
                fields["duration"] = parse_duration_minutes(value)
            elif name == "CATEGORIES":
                fields["category"] = unescape_text(value)
            elif name == "STATUS":
                fields["status"] = status_from_ics(value)
            elif name == "SEQUENCE":
                fields["sequence"] = int(value)
            elif name == "RRULE":
                fields["rrule"] = value
            elif name == X_SOURCE:
                fields["agent"] = unescape_text(value)
            elif name == X_PROJECT:
                fields["project"] = unescape_text(value)
            elif name == "URL":
                fields["url"] = value

        if "uid" not in fields:
            if not source_id:
                raise DocumentParseError("event block has no UID")
            fields["uid"] = source_id
        if "start" not in fields:
            raise DocumentParseError(f"event {fields['uid']} has no DTSTART")
        fields.setdefault("title", "")

        fields["alerts"] = [
            alert
            for alert in (self._build_alert(a) for a in alarms)
            if alert is not None
        ]
        return CalendarEvent.model_validate(fields)

    def _build_alert(self, lines: list[ContentLine]) -> EventAlert | None:
        """Convert one VALARM block; alarms without a trigger are dropped."""
        minutes = None
        message = None
        default_message = False
        for content in lines:
            if content.name == "TRIGGER":
                minutes = parse_duration_minutes(content.value)
            elif content.name == "DESCRIPTION":
                message = unescape_text(content.value)
            elif content.name == X_DEFAULT_MESSAGE:
                default_message = content.value.upper() == "TRUE"

        if minutes is None:
            return None
        if default_message:
            message = None
        return EventAlert(minutes_before=minutes, message=message)
