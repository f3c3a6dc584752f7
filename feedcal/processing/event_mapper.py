"""Map upstream notifications to calendar events."""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from feedcal.config import DefaultsConfig
from feedcal.models.event import CalendarEvent, EventAlert, EventStatus, generate_uid
from feedcal.models.notifications import (
    CronRegisterNotification,
    ScheduleNotification,
    ScheduleRequest,
    TaskCompleteNotification,
)
from feedcal.processing.recurrence import cron_to_rrule

logger = logging.getLogger(__name__)

EMOJI = {
    "post": "🐦",
    "launch": "📣",
    "task": "✅",
    "review": "📊",
    "automation": "🔄",
    "draft": "📝",
    "reminder": "💬",
}

# Event category -> AlertDefaults field
CATEGORY_ALERTS = {
    "post": "scheduled_posts",
    "launch": "launch_sequences",
    "review": "analytics_checkins",
    "automation": "cron_automations",
    "draft": "content_drafts",
    "reminder": "reminders",
    "completed": "task_completions",
}

_OFFSET_RE = re.compile(r"^(\d+)([mhd])$")
_OFFSET_UNITS = {"m": "minutes", "h": "hours", "d": "days"}


def parse_offset(offset: str) -> timedelta:
    """Parse "30m", "24h" or "7d"; anything else is a zero offset."""
    match = _OFFSET_RE.match(offset.strip())
    if not match:
        logger.warning(f"Unrecognized offset {offset!r}, using 0")
        return timedelta(0)
    value, unit = match.groups()
    return timedelta(**{_OFFSET_UNITS[unit]: int(value)})


def alerts_for_category(
    category: Optional[str], defaults: Optional[DefaultsConfig]
) -> list[EventAlert]:
    """Configured default alerts for an event category."""
    if defaults is None or category not in CATEGORY_ALERTS:
        return []
    minutes = getattr(defaults.alerts, CATEGORY_ALERTS[category])
    return [EventAlert(minutes_before=m) for m in minutes]


def format_description(
    description: Optional[str],
    agent_id: Optional[str] = None,
    workspace: Optional[str] = None,
) -> str:
    """Description text followed by Source and Project lines."""
    parts = []
    if description:
        parts.append(description)
    if agent_id:
        parts.append(f"Source: {agent_id}")
    if workspace:
        parts.append(f"Project: {workspace}")
    return "\n".join(parts)


def from_schedule_notification(
    notification: ScheduleNotification, defaults: DefaultsConfig
) -> CalendarEvent:
    """Scheduled action -> planned timed event."""
    emoji = EMOJI.get(notification.type, EMOJI["post"])
    return CalendarEvent(
        uid=notification.id,
        title=f"{emoji} {notification.summary}",
        description=format_description(
            notification.description, notification.agent_id, notification.workspace
        )
        or None,
        start=notification.scheduled_at,
        duration=notification.estimated_duration or defaults.event_duration_minutes,
        category=notification.type,
        agent=notification.agent_id,
        project=notification.workspace,
        status=EventStatus.PLANNED,
        alerts=alerts_for_category(notification.type, defaults),
    )


def from_task_complete(
    notification: TaskCompleteNotification,
    defaults: Optional[DefaultsConfig] = None,
    timed: bool = False,
) -> CalendarEvent:
    """Task completion -> completed event, all-day unless timed."""
    duration = defaults.event_duration_minutes if defaults else 15
    return CalendarEvent(
        uid=notification.id,
        title=f"{EMOJI['task']} {notification.summary}",
        description=format_description(
            notification.description, notification.agent_id, notification.workspace
        )
        or None,
        start=notification.completed_at,
        all_day=not timed,
        duration=duration if timed else None,
        category="completed",
        agent=notification.agent_id,
        project=notification.workspace,
        status=EventStatus.COMPLETED,
        alerts=alerts_for_category("completed", defaults),
    )


def from_cron(
    notification: CronRegisterNotification,
    defaults: Optional[DefaultsConfig] = None,
    now: Optional[datetime] = None,
) -> CalendarEvent:
    """Cron registration -> recurring event starting now."""
    return CalendarEvent(
        uid=notification.id,
        title=f"{EMOJI['automation']} {notification.name}",
        description=notification.description,
        start=now or datetime.now(timezone.utc),
        duration=15,
        category="automation",
        agent=notification.agent_id,
        rrule=cron_to_rrule(notification.schedule) or None,
        status=EventStatus.PLANNED,
        alerts=alerts_for_category("automation", defaults),
    )


def create_checkin_events(
    launch_id: str,
    launch_title: str,
    launch_time: datetime,
    offsets: list[str],
    project: Optional[str] = None,
    agent: Optional[str] = None,
    defaults: Optional[DefaultsConfig] = None,
) -> list[CalendarEvent]:
    """
    Analytics check-in events following a launch.

    One event per offset at launch_time + offset. The uid is derived from the
    launch id and the offset's position, so reprocessing the same launch
    overwrites rather than duplicates.
    """
    return [
        CalendarEvent(
            uid=f"{launch_id}-checkin-{i}",
            title=f"{EMOJI['review']} Check analytics — {launch_title}",
            description=(
                f"Review metrics {offset} after launch.\n"
                "Look at traffic sources, attribution data, and engagement."
            ),
            start=launch_time + parse_offset(offset),
            duration=15,
            category="review",
            agent=agent,
            project=project,
            status=EventStatus.PLANNED,
            alerts=alerts_for_category("review", defaults),
        )
        for i, offset in enumerate(offsets)
    ]


def from_tool_call(
    request: ScheduleRequest, defaults: Optional[DefaultsConfig] = None
) -> CalendarEvent:
    """Schedule tool request -> planned event with a generated uid."""
    emoji = EMOJI.get(request.category, "") if request.category else ""
    title = f"{emoji} {request.title}" if emoji else request.title

    # Explicit alert_minutes overrides category defaults
    if request.alert_minutes is not None:
        alerts = [EventAlert(minutes_before=request.alert_minutes)]
    else:
        alerts = alerts_for_category(request.category, defaults)

    return CalendarEvent(
        uid=generate_uid(),
        title=title,
        description=request.description,
        start=request.date,
        duration=None if request.all_day else (request.duration or 15),
        all_day=request.all_day,
        category=request.category,
        agent=request.agent,
        project=request.project,
        url=request.url,
        status=EventStatus.PLANNED,
        alerts=alerts,
    )
