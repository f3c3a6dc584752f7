"""Text codec for calendar documents.

Pure functions converting Event Model scalars to and from their calendar
text representation: dates, text escaping, octet-aware line folding, status
mapping and input sanitization.
"""

import re
from datetime import date, datetime, timezone

from feedcal.models.event import CalendarEvent, EventStatus, to_utc

MAX_LINE_OCTETS = 75
CONTINUATION_OCTETS = MAX_LINE_OCTETS - 1  # after the leading space
CRLF = "\r\n"

_DATETIME_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})T(\d{2})(\d{2})(\d{2})Z?$")
_DATE_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
_DURATION_RE = re.compile(
    r"^[+-]?P(?:(\d+)W)?(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$"
)
_ESCAPE_RE = re.compile(r"\\([\\;,nN])")
_FOLD_RE = re.compile(r"\r?\n[ \t]")

# Structural fields: every control character, including line separators
_STRUCTURAL_CONTROL_RE = re.compile("[\x00-\x1f\x7f\u2028\u2029]")
# Content fields: control characters other than newline
_CONTENT_CONTROL_RE = re.compile("[\x00-\x09\x0b-\x1f\x7f]")

_UNESCAPED = {"\\": "\\", ";": ";", ",": ",", "n": "\n", "N": "\n"}

STATUS_TO_ICS = {
    EventStatus.PLANNED: "TENTATIVE",
    EventStatus.IN_PROGRESS: "CONFIRMED",
    EventStatus.COMPLETED: "CONFIRMED",
    EventStatus.CANCELLED: "CANCELLED",
}

# CONFIRMED is ambiguous between IN_PROGRESS and COMPLETED; it reads back as COMPLETED
ICS_TO_STATUS = {
    "TENTATIVE": EventStatus.PLANNED,
    "CONFIRMED": EventStatus.COMPLETED,
    "CANCELLED": EventStatus.CANCELLED,
}


# --- Dates ---


def format_datetime(value: datetime) -> str:
    """Format an instant as YYYYMMDDTHHMMSSZ in UTC."""
    return to_utc(value).strftime("%Y%m%dT%H%M%SZ")


def format_date(value: datetime | date) -> str:
    """Format the UTC calendar date of a value as YYYYMMDD."""
    return to_utc(value).strftime("%Y%m%d")


def parse_datetime(text: str) -> datetime:
    """Parse YYYYMMDDTHHMMSSZ into an aware UTC datetime.

    Other input falls back to ISO-8601 parsing; ValueError is raised when
    that also fails.
    """
    match = _DATETIME_RE.match(text.strip())
    if not match:
        return _parse_generic(text)
    year, month, day, hour, minute, second = (int(g) for g in match.groups())
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


def parse_date(text: str) -> datetime:
    """Parse YYYYMMDD into UTC midnight of that date."""
    match = _DATE_RE.match(text.strip())
    if not match:
        return _parse_generic(text)
    year, month, day = (int(g) for g in match.groups())
    return datetime(year, month, day, tzinfo=timezone.utc)


def parse_duration_minutes(text: str) -> int:
    """Parse a duration such as PT15M, -PT1H30M or P1D into whole minutes.

    The sign is ignored: alarm triggers are always read as minutes before
    the start.
    """
    match = _DURATION_RE.match(text.strip().upper())
    if not match or not any(match.groups()):
        raise ValueError(f"Unrecognized duration: {text!r}")
    weeks, days, hours, minutes, seconds = (int(g or 0) for g in match.groups())
    return ((weeks * 7 + days) * 24 + hours) * 60 + minutes + seconds // 60


def _parse_generic(text: str) -> datetime:
    try:
        return to_utc(datetime.fromisoformat(text.strip().replace("Z", "+00:00")))
    except ValueError as e:
        raise ValueError(f"Unrecognized calendar date: {text!r}") from e


# --- Text ---


def escape_text(text: str) -> str:
    """Escape backslash, semicolon, comma and newline for a property value."""
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def unescape_text(text: str) -> str:
    """Reverse escape_text in a single left-to-right pass.

    A single pass keeps an escaped backslash from being read as the start of
    another escape. Unknown escapes are left untouched.
    """
    return _ESCAPE_RE.sub(lambda m: _UNESCAPED[m.group(1)], text)


def fold_line(prefix: str, value: str) -> str:
    """Fold value so that prefix + value fits 75-octet lines.

    The first segment holds up to 75 - len(prefix) octets; continuation
    segments start with one space and hold up to 74 octets. Characters are
    never split across a boundary. Returns the folded value, without prefix.
    """
    max_first = max(MAX_LINE_OCTETS - len(prefix.encode("utf-8")), 0)
    if len(value.encode("utf-8")) <= max_first:
        return value

    segments = []
    pos = 0

    chunk = _cut_at_octet_boundary(value, pos, max_first)
    segments.append(chunk)
    pos += len(chunk)

    while pos < len(value):
        chunk = _cut_at_octet_boundary(value, pos, CONTINUATION_OCTETS)
        segments.append(" " + chunk)
        pos += len(chunk)

    return CRLF.join(segments)


def _cut_at_octet_boundary(text: str, start: int, max_octets: int) -> str:
    end = start
    octets = 0
    while end < len(text):
        char_octets = len(text[end].encode("utf-8"))
        if octets + char_octets > max_octets:
            break
        octets += char_octets
        end += 1
    return text[start:end]


def unfold(text: str) -> str:
    """Join continuation lines (a line break followed by space or tab)."""
    return _FOLD_RE.sub("", text)


def content_line(name: str, value: str) -> str:
    """Build a folded NAME:value content line."""
    prefix = f"{name}:"
    return prefix + fold_line(prefix, value)


# --- Status ---


def status_to_ics(status: EventStatus) -> str:
    return STATUS_TO_ICS.get(status, "TENTATIVE")


def status_from_ics(value: str) -> EventStatus:
    return ICS_TO_STATUS.get(value.strip().upper(), EventStatus.PLANNED)


# --- Sanitization ---


def strip_control(value: str) -> str:
    """Strip every control character from a structural field."""
    return _STRUCTURAL_CONTROL_RE.sub("", value).strip()


def sanitize_content(value: str) -> str:
    """Sanitize a content field, keeping newlines.

    CRLF, CR and Unicode line/paragraph separators become plain newlines;
    other control characters are removed.
    """
    value = value.replace("\r\n", "\n").replace("\r", "\n")
    value = value.replace("\u2028", "\n").replace("\u2029", "\n")
    return _CONTENT_CONTROL_RE.sub("", value).strip()


def _optional(value: str | None, clean) -> str | None:
    if value is None:
        return None
    return clean(value) or None


def sanitize_event(event: CalendarEvent) -> CalendarEvent:
    """Return a copy of event with all text fields sanitized."""
    alerts = [
        alert.model_copy(update={"message": _optional(alert.message, strip_control)})
        for alert in event.alerts
    ]
    return event.model_copy(
        update={
            "title": strip_control(event.title),
            "description": _optional(event.description, sanitize_content),
            "category": _optional(event.category, strip_control),
            "agent": _optional(event.agent, strip_control),
            "project": _optional(event.project, strip_control),
            "url": _optional(event.url, strip_control),
            "rrule": _optional(event.rrule, strip_control),
            "alerts": alerts,
        }
    )
