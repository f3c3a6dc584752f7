"""Event model with Pydantic v2 validation."""

import secrets
import time
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from feedcal.constants import DEFAULT_EVENT_MINUTES


class EventStatus(str, Enum):
    """Event status enumeration."""

    PLANNED = "PLANNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


def generate_uid() -> str:
    """Generate a uid for events created without one."""
    return f"fc-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def to_utc(value: datetime | date) -> datetime:
    """Coerce a date or datetime to an aware UTC datetime.

    Naive datetimes are taken to already be UTC. Plain dates become UTC
    midnight.
    """
    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_midnight(value: datetime) -> datetime:
    """Truncate an aware datetime to midnight of its UTC date."""
    value = to_utc(value)
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


class EventAlert(BaseModel):
    """Reminder shown before an event starts."""

    minutes_before: int = Field(ge=0)
    message: Optional[str] = None  # falls back to the event title


class CalendarEvent(BaseModel):
    """A calendar-visible activity record."""

    uid: str = Field(default_factory=generate_uid, min_length=1)
    title: str
    description: Optional[str] = None
    start: datetime
    end: Optional[datetime] = None
    duration: Optional[int] = Field(default=None, ge=0)  # minutes
    all_day: bool = False
    category: Optional[str] = None
    agent: Optional[str] = None  # source identifier
    project: Optional[str] = None
    status: EventStatus = EventStatus.PLANNED
    sequence: int = Field(default=0, ge=0)
    rrule: Optional[str] = None
    alerts: list[EventAlert] = Field(default_factory=list)
    url: Optional[str] = None

    @field_validator("uid")
    @classmethod
    def reject_control_characters(cls, v: str) -> str:
        """UIDs are written verbatim, so they cannot carry line breaks."""
        if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in v):
            raise ValueError("uid must not contain control characters")
        return v

    @field_validator("start", "end", mode="before")
    @classmethod
    def coerce_utc(cls, v):
        """Accept dates, naive and aware datetimes, and ISO strings."""
        if v is None:
            return None
        if isinstance(v, str):
            v = datetime.fromisoformat(v.replace("Z", "+00:00"))
        if isinstance(v, (date, datetime)):
            return to_utc(v)
        return v

    @model_validator(mode="after")
    def normalize_all_day(self):
        """All-day events carry no clock time."""
        if self.all_day:
            self.start = utc_midnight(self.start)
            if self.end is not None:
                self.end = utc_midnight(self.end)
        return self

    @computed_field
    @property
    def is_recurring(self) -> bool:
        """True if the event carries a recurrence rule."""
        return bool(self.rrule)

    @property
    def effective_end(self) -> datetime:
        """End instant, derived from duration or the default length."""
        if self.end is not None:
            return self.end
        if self.duration:
            return self.start + timedelta(minutes=self.duration)
        return self.start + timedelta(minutes=DEFAULT_EVENT_MINUTES)
