"""Inert push requests for the native-calendar side channel."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from feedcal.constants import SOURCE_CALENDAR_PREFIX
from feedcal.models.event import CalendarEvent


class PushAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class PushRequest:
    """Everything a dispatcher needs to mirror one event change."""

    action: PushAction
    calendar_name: str
    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    description: Optional[str] = None
    alert_minutes: tuple[int, ...] = field(default_factory=tuple)


def push_calendar_name(source_id: str) -> str:
    """Name of the native calendar mirroring one source."""
    return f"{SOURCE_CALENDAR_PREFIX} — {source_id}"


def build_push_request(
    action: PushAction, event: CalendarEvent
) -> Optional[PushRequest]:
    """
    Describe an event change for the side channel.

    Returns None for events without a source (no calendar to mirror into)
    and for recurring events, which the scripting surface cannot represent.
    """
    if not event.agent or event.rrule:
        return None
    return PushRequest(
        action=action,
        calendar_name=push_calendar_name(event.agent),
        title=event.title,
        start=event.start,
        end=event.effective_end,
        all_day=event.all_day,
        description=event.description,
        alert_minutes=tuple(alert.minutes_before for alert in event.alerts),
    )
