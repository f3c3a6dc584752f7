"""Tests for rendering and re-parsing feed documents."""

from datetime import datetime, timezone

from icalendar import Calendar

from feedcal.ics.reader import ICSReader
from feedcal.ics.writer import ICSWriter
from feedcal.models.event import CalendarEvent, EventAlert, EventStatus

NOW = datetime(2025, 2, 25, 12, 0, tzinfo=timezone.utc)


def _render(*events, name="Test Feed"):
    return ICSWriter().render(name, events, NOW)


def test_render_scenario_event():
    event = CalendarEvent(
        uid="e1",
        title="Tweet",
        start=datetime(2025, 2, 25, 12, 0, tzinfo=timezone.utc),
        duration=15,
    )
    text = _render(event)

    assert "UID:e1@feedcal\r\n" in text
    assert "DTSTART:20250225T120000Z\r\n" in text
    assert "DURATION:PT15M\r\n" in text
    assert "STATUS:TENTATIVE\r\n" in text
    assert "SEQUENCE:0\r\n" in text
    assert "X-FEEDCAL-EVENT-ID:e1\r\n" in text


def test_document_header_and_line_endings():
    text = _render(name="Activity Feed — dev")

    assert text.startswith("BEGIN:VCALENDAR\r\nVERSION:2.0\r\n")
    assert "PRODID:-//FeedCal//Activity Feed//EN\r\n" in text
    assert "CALSCALE:GREGORIAN\r\n" in text
    assert "X-WR-CALNAME:Activity Feed — dev\r\n" in text
    assert "X-WR-TIMEZONE:UTC\r\n" in text
    assert text.endswith("END:VCALENDAR\r\n")
    assert "\n" not in text.replace("\r\n", "")


def test_default_end_is_fifteen_minutes():
    event = CalendarEvent(uid="e2", title="Note", start=NOW)
    assert "DTEND:20250225T121500Z\r\n" in _render(event)


def test_all_day_uses_date_values():
    event = CalendarEvent(
        uid="d1",
        title="Shipped",
        start=datetime(2025, 2, 25, 18, 30, tzinfo=timezone.utc),
        end=datetime(2025, 2, 26, tzinfo=timezone.utc),
        all_day=True,
    )
    text = _render(event)
    assert "DTSTART;VALUE=DATE:20250225\r\n" in text
    assert "DTEND;VALUE=DATE:20250226\r\n" in text


def test_alarm_falls_back_to_title():
    event = CalendarEvent(
        uid="a1",
        title="Launch",
        start=NOW,
        alerts=[EventAlert(minutes_before=15), EventAlert(minutes_before=60, message="Prep")],
    )
    text = _render(event)
    assert text.count("BEGIN:VALARM") == 2
    assert "DESCRIPTION:Launch\r\nTRIGGER:-PT15M" in text
    assert "DESCRIPTION:Prep\r\nTRIGGER:-PT60M" in text
    assert text.count("X-FEEDCAL-DEFAULT-MESSAGE:TRUE") == 1


def test_alarm_message_equal_to_title_survives_round_trip():
    event = CalendarEvent(
        uid="a2",
        title="Tweet",
        start=NOW,
        alerts=[EventAlert(minutes_before=10, message="Tweet"), EventAlert(minutes_before=5)],
    )
    (parsed,) = ICSReader().parse(_render(event))
    assert parsed.alerts == [
        EventAlert(minutes_before=10, message="Tweet"),
        EventAlert(minutes_before=5),
    ]


def test_round_trip_preserves_fields():
    event = CalendarEvent(
        uid="rt-1",
        title="📣 Launch, day; go \\o/",
        description="First line\nSecond line with ünïcödé " + "long " * 30,
        start=datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc),
        duration=45,
        category="launch",
        agent="marketing bot",
        project="site",
        status=EventStatus.CANCELLED,
        sequence=3,
        rrule="FREQ=WEEKLY;BYDAY=MO,WE,FR",
        alerts=[EventAlert(minutes_before=15), EventAlert(minutes_before=60, message="Prep")],
        url="https://example.com/launch?a=1&b=2",
    )

    (parsed,) = ICSReader().parse(_render(event))

    for field in (
        "uid",
        "title",
        "description",
        "start",
        "duration",
        "all_day",
        "category",
        "agent",
        "project",
        "status",
        "sequence",
        "rrule",
        "alerts",
        "url",
    ):
        assert getattr(parsed, field) == getattr(event, field), field


def test_round_trip_all_day():
    event = CalendarEvent(uid="d2", title="Day", start=NOW, all_day=True)
    (parsed,) = ICSReader().parse(_render(event))

    assert parsed.all_day is True
    assert parsed.start == datetime(2025, 2, 25, tzinfo=timezone.utc)


def test_in_progress_reads_back_as_completed():
    event = CalendarEvent(uid="p1", title="Busy", start=NOW, status=EventStatus.IN_PROGRESS)
    (parsed,) = ICSReader().parse(_render(event))
    assert parsed.status == EventStatus.COMPLETED


def test_reader_skips_malformed_blocks():
    good = _render(CalendarEvent(uid="ok", title="Fine", start=NOW))
    broken = (
        "BEGIN:VEVENT\r\nUID:nostart@feedcal\r\nSUMMARY:No start\r\nEND:VEVENT\r\n"
        "BEGIN:VEVENT\r\nUID:bad@feedcal\r\nDTSTART:tomorrow\r\nEND:VEVENT\r\n"
    )
    text = good.replace("END:VCALENDAR", broken + "END:VCALENDAR")

    reader = ICSReader()
    events = reader.parse(text)

    assert [e.uid for e in events] == ["ok"]
    assert reader.skipped == 2


def test_reader_falls_back_to_event_id_tag():
    text = (
        "BEGIN:VCALENDAR\r\nBEGIN:VEVENT\r\n"
        "X-FEEDCAL-EVENT-ID:tagged\r\nDTSTART:20250225T120000Z\r\nSUMMARY:Tagged\r\n"
        "END:VEVENT\r\nEND:VCALENDAR\r\n"
    )
    (event,) = ICSReader().parse(text)
    assert event.uid == "tagged"


def test_rendered_document_parses_with_icalendar():
    event = CalendarEvent(
        uid="ical-1",
        title="Launch, day; go",
        description="Line one\nLine two",
        start=datetime(2025, 2, 25, 12, 0, tzinfo=timezone.utc),
        duration=30,
        alerts=[EventAlert(minutes_before=10)],
    )
    cal = Calendar.from_ical(_render(event))
    (vevent,) = cal.walk("VEVENT")

    assert str(vevent["uid"]) == "ical-1@feedcal"
    assert str(vevent["summary"]) == "Launch, day; go"
    assert str(vevent["description"]) == "Line one\nLine two"
    assert vevent["dtstart"].dt == event.start
    assert len(vevent.walk("VALARM")) == 1
