"""Tests for mapping notifications to events."""

from datetime import datetime, timedelta, timezone

import pytest

from feedcal.config import DefaultsConfig
from feedcal.models.event import EventAlert, EventStatus
from feedcal.models.notifications import (
    CronRegisterNotification,
    ScheduleNotification,
    ScheduleRequest,
    TaskCompleteNotification,
)
from feedcal.processing.event_mapper import (
    alerts_for_category,
    create_checkin_events,
    format_description,
    from_cron,
    from_schedule_notification,
    from_task_complete,
    from_tool_call,
    parse_offset,
)

LAUNCH = datetime(2025, 3, 1, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def defaults():
    return DefaultsConfig()


def test_schedule_notification_from_camel_case_payload(defaults):
    notification = ScheduleNotification.model_validate(
        {
            "id": "post-1",
            "type": "post",
            "scheduledAt": "2025-02-25T12:00:00Z",
            "summary": "Thread about launch",
            "agentId": "social",
            "workspace": "site",
        }
    )
    event = from_schedule_notification(notification, defaults)

    assert event.uid == "post-1"
    assert event.title == "🐦 Thread about launch"
    assert event.start == datetime(2025, 2, 25, 12, 0, tzinfo=timezone.utc)
    assert event.duration == 15
    assert event.status == EventStatus.PLANNED
    assert event.agent == "social"
    assert event.project == "site"
    assert event.description == "Source: social\nProject: site"
    assert event.alerts == [EventAlert(minutes_before=15)]


def test_schedule_launch_uses_launch_emoji_and_alerts(defaults):
    notification = ScheduleNotification(
        id="l1", type="launch", scheduled_at=LAUNCH, summary="v2", estimated_duration=60
    )
    event = from_schedule_notification(notification, defaults)

    assert event.title == "📣 v2"
    assert event.duration == 60
    assert [a.minutes_before for a in event.alerts] == [15, 60]


def test_unknown_schedule_type_uses_post_emoji(defaults):
    notification = ScheduleNotification(
        id="x", type="webinar", scheduled_at=LAUNCH, summary="Talk"
    )
    event = from_schedule_notification(notification, defaults)
    assert event.title == "🐦 Talk"
    assert event.alerts == []


def test_task_complete_is_all_day_completed():
    notification = TaskCompleteNotification(
        id="t1",
        summary="Fix bug",
        completed_at=datetime(2025, 2, 25, 18, 45, tzinfo=timezone.utc),
        agent_id="dev",
    )
    event = from_task_complete(notification)

    assert event.title == "✅ Fix bug"
    assert event.all_day is True
    assert event.start == datetime(2025, 2, 25, tzinfo=timezone.utc)
    assert event.status == EventStatus.COMPLETED
    assert event.category == "completed"


def test_task_complete_timed(defaults):
    completed = datetime(2025, 2, 25, 18, 45, tzinfo=timezone.utc)
    notification = TaskCompleteNotification(
        id="t1", summary="Fix bug", completed_at=completed
    )
    event = from_task_complete(notification, defaults, timed=True)

    assert event.all_day is False
    assert event.start == completed
    assert event.duration == 15


def test_cron_registration():
    now = datetime(2025, 2, 25, 9, 0, tzinfo=timezone.utc)
    notification = CronRegisterNotification(
        id="cron-1", name="Weekly report", schedule="0 8 * * 1,3,5", agent_id="ops"
    )
    event = from_cron(notification, now=now)

    assert event.title == "🔄 Weekly report"
    assert event.rrule == "FREQ=WEEKLY;BYDAY=MO,WE,FR"
    assert event.start == now
    assert event.category == "automation"


def test_cron_sub_hourly_has_no_rule():
    notification = CronRegisterNotification(id="c", name="Poll", schedule="*/5 * * * *")
    assert from_cron(notification).rrule is None


def test_checkin_events():
    checkins = create_checkin_events(
        "l1", "v2", LAUNCH, ["24h", "48h", "7d"], project="site", agent="social"
    )

    assert [c.uid for c in checkins] == ["l1-checkin-0", "l1-checkin-1", "l1-checkin-2"]
    assert [c.start - LAUNCH for c in checkins] == [
        timedelta(hours=24),
        timedelta(hours=48),
        timedelta(days=7),
    ]
    assert checkins[0].title == "📊 Check analytics — v2"
    assert checkins[0].category == "review"
    assert checkins[0].description.startswith("Review metrics 24h after launch.")


def test_checkin_ids_are_stable():
    first = create_checkin_events("l1", "v2", LAUNCH, ["24h"])
    second = create_checkin_events("l1", "v2", LAUNCH, ["24h"])
    assert first[0].uid == second[0].uid


@pytest.mark.parametrize(
    "offset,delta",
    [
        ("30m", timedelta(minutes=30)),
        ("24h", timedelta(hours=24)),
        ("7d", timedelta(days=7)),
        ("soon", timedelta(0)),
        ("5w", timedelta(0)),
    ],
)
def test_parse_offset(offset, delta):
    assert parse_offset(offset) == delta


def test_alerts_for_category(defaults):
    assert alerts_for_category("review", defaults) == [EventAlert(minutes_before=0)]
    assert alerts_for_category("completed", defaults) == []
    assert alerts_for_category("unknown", defaults) == []
    assert alerts_for_category("post", None) == []


def test_format_description():
    assert format_description("Body", "dev", "site") == "Body\nSource: dev\nProject: site"
    assert format_description(None) == ""


def test_tool_call_with_category(defaults):
    request = ScheduleRequest(title="Launch post", date=LAUNCH, category="launch")
    event = from_tool_call(request, defaults)

    assert event.uid.startswith("fc-")
    assert event.title == "📣 Launch post"
    assert event.duration == 15
    assert [a.minutes_before for a in event.alerts] == [15, 60]


def test_tool_call_explicit_alert_overrides_defaults(defaults):
    request = ScheduleRequest(
        title="Launch post", date=LAUNCH, category="launch", alert_minutes=5
    )
    event = from_tool_call(request, defaults)
    assert event.alerts == [EventAlert(minutes_before=5)]


def test_tool_call_all_day_has_no_duration():
    request = ScheduleRequest.model_validate(
        {"title": "Offsite", "date": "2025-03-01T00:00:00Z", "allDay": True}
    )
    event = from_tool_call(request)

    assert event.title == "Offsite"
    assert event.all_day is True
    assert event.duration is None


def test_tool_call_generates_unique_uids():
    request = ScheduleRequest(title="x", date=LAUNCH)
    assert from_tool_call(request).uid != from_tool_call(request).uid
