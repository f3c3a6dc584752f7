"""Tests for importing third-party ICS files."""

from datetime import datetime, timezone

import pytest

from feedcal.exceptions import IngestionError
from feedcal.ics.importer import ICSImporter
from feedcal.models.event import EventStatus

THIRD_PARTY_ICS = "\r\n".join(
    [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//Example Corp//Planner//EN",
        "BEGIN:VTIMEZONE",
        "TZID:America/New_York",
        "BEGIN:STANDARD",
        "DTSTART:19701101T020000",
        "TZOFFSETFROM:-0400",
        "TZOFFSETTO:-0500",
        "RRULE:FREQ=YEARLY;BYMONTH=11;BYDAY=1SU",
        "END:STANDARD",
        "END:VTIMEZONE",
        "BEGIN:VEVENT",
        "UID:standup@example.com",
        "DTSTART;TZID=America/New_York:20250226T090000",
        "DTEND;TZID=America/New_York:20250226T093000",
        "SUMMARY:Standup",
        "DESCRIPTION:Daily sync\\, all hands",
        "CATEGORIES:meeting,team",
        "STATUS:CONFIRMED",
        "SEQUENCE:2",
        "RRULE:FREQ=WEEKLY;BYDAY=MO,WE,FR",
        "BEGIN:VALARM",
        "ACTION:DISPLAY",
        "DESCRIPTION:Standup soon",
        "TRIGGER:-PT10M",
        "END:VALARM",
        "END:VEVENT",
        "BEGIN:VEVENT",
        "UID:offsite@example.com",
        "DTSTART;VALUE=DATE:20250305",
        "SUMMARY:Offsite",
        "STATUS:CANCELLED",
        "END:VEVENT",
        "BEGIN:VEVENT",
        "UID:no-start@example.com",
        "SUMMARY:Missing start",
        "END:VEVENT",
        "END:VCALENDAR",
        "",
    ]
)


@pytest.fixture
def ics_file(tmp_path):
    path = tmp_path / "planner.ics"
    path.write_text(THIRD_PARTY_ICS, newline="")
    return path


def test_import_third_party_file(ics_file):
    events = ICSImporter().read(ics_file, source="planner")
    by_uid = {event.uid: event for event in events}

    assert set(by_uid) == {"standup@example.com", "offsite@example.com"}

    standup = by_uid["standup@example.com"]
    assert standup.title == "Standup"
    assert standup.start == datetime(2025, 2, 26, 14, 0, tzinfo=timezone.utc)
    assert standup.end == datetime(2025, 2, 26, 14, 30, tzinfo=timezone.utc)
    assert standup.description == "Daily sync, all hands"
    assert standup.category == "meeting"
    assert standup.status == EventStatus.PLANNED
    assert standup.sequence == 2
    assert standup.is_recurring
    assert "FREQ=WEEKLY" in standup.rrule
    assert standup.agent == "planner"
    assert [(a.minutes_before, a.message) for a in standup.alerts] == [
        (10, "Standup soon")
    ]

    offsite = by_uid["offsite@example.com"]
    assert offsite.all_day
    assert offsite.start == datetime(2025, 3, 5, tzinfo=timezone.utc)
    assert offsite.status == EventStatus.CANCELLED


def test_import_without_source(ics_file):
    events = ICSImporter().read(ics_file)
    assert all(event.agent is None for event in events)


def test_import_missing_file(tmp_path):
    with pytest.raises(IngestionError):
        ICSImporter().read(tmp_path / "missing.ics")


def test_import_empty_file(tmp_path):
    path = tmp_path / "empty.ics"
    path.write_text("")
    assert ICSImporter().read(path) == []


def test_import_garbage_file(tmp_path):
    path = tmp_path / "garbage.ics"
    path.write_text("this is not a calendar")
    with pytest.raises(IngestionError):
        ICSImporter().read(path)
