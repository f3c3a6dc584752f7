"""Pydantic models for activity feeds."""

from feedcal.models.event import CalendarEvent, EventAlert, EventStatus
from feedcal.models.notifications import (
    CronRegisterNotification,
    NotificationKind,
    ScheduleCancelNotification,
    ScheduleNotification,
    ScheduleRequest,
    ScheduleUpdateNotification,
    TaskCompleteNotification,
)

__all__ = [
    "CalendarEvent",
    "EventAlert",
    "EventStatus",
    "NotificationKind",
    "ScheduleNotification",
    "ScheduleUpdateNotification",
    "ScheduleCancelNotification",
    "TaskCompleteNotification",
    "CronRegisterNotification",
    "ScheduleRequest",
]
