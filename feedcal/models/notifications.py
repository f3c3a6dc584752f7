"""Upstream activity notifications consumed by the mapper.

Field names are snake_case; camelCase aliases are accepted so payloads from
JavaScript producers validate unchanged.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from feedcal.models.event import EventStatus, to_utc


class NotificationKind(str, Enum):
    """Notification kinds delivered by the event bus."""

    SCHEDULE = "schedule"
    SCHEDULE_UPDATE = "schedule.update"
    SCHEDULE_CANCEL = "schedule.cancel"
    TASK_COMPLETE = "task.complete"
    CRON_REGISTER = "cron.register"


class Notification(BaseModel):
    """Base for notification payloads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("*", mode="after")
    @classmethod
    def instants_to_utc(cls, v):
        if isinstance(v, datetime):
            return to_utc(v)
        return v


class ScheduleNotification(Notification):
    """A source scheduled a future action."""

    id: str
    type: str = "post"
    scheduled_at: datetime
    estimated_duration: Optional[int] = Field(default=None, ge=0)
    summary: str
    description: Optional[str] = None
    agent_id: Optional[str] = None
    workspace: Optional[str] = None


class ScheduleUpdateNotification(Notification):
    """A source moved or re-stated a scheduled action."""

    id: str
    new_time: Optional[datetime] = None
    status: Optional[EventStatus] = None


class ScheduleCancelNotification(Notification):
    """A source cancelled a scheduled action."""

    id: str


class TaskCompleteNotification(Notification):
    """A source completed a task."""

    id: str
    summary: str
    description: Optional[str] = None
    completed_at: datetime
    agent_id: Optional[str] = None
    workspace: Optional[str] = None


class CronRegisterNotification(Notification):
    """A recurring job was registered."""

    id: str
    name: str
    description: Optional[str] = None
    schedule: str  # cron expression
    agent_id: Optional[str] = None


class ScheduleRequest(Notification):
    """Parameters of the schedule tool exposed to sources."""

    title: str = Field(min_length=1)
    date: datetime
    duration: Optional[int] = Field(default=None, ge=1)  # minutes
    category: Optional[str] = None
    description: Optional[str] = None
    all_day: bool = False
    agent: Optional[str] = None
    project: Optional[str] = None
    url: Optional[str] = None
    alert_minutes: Optional[int] = Field(default=None, ge=0)
