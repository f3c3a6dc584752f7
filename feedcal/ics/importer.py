"""Import events from third-party ICS files."""

import logging
from datetime import datetime, timedelta
from pathlib import Path

from icalendar import Calendar

from feedcal.exceptions import IngestionError
from feedcal.models.event import CalendarEvent, EventAlert, EventStatus

logger = logging.getLogger(__name__)

_STATUS_MAP = {
    "TENTATIVE": EventStatus.PLANNED,
    "CONFIRMED": EventStatus.PLANNED,
    "CANCELLED": EventStatus.CANCELLED,
}


class ICSImporter:
    """Importer for ICS files produced by other calendar applications.

    Unlike ICSReader, which only reads feed documents this package wrote,
    this goes through the icalendar library so timezone-qualified dates,
    quoted parameters and arbitrary property sets are handled.
    """

    def read(self, path: Path, source: str | None = None) -> list[CalendarEvent]:
        """Read events from an ICS file.

        Args:
            path: ICS file to import
            source: Source identifier assigned to every imported event

        Returns:
            Imported events (recurring masters keep their RRULE)

        Raises:
            IngestionError: If the file cannot be read or parsed
        """
        logger.info(f"Importing ICS file: {path}")
        try:
            if not path.exists():
                raise IngestionError(f"ICS file does not exist: {path}")

            content = path.read_bytes()
            if not content.strip():
                logger.warning(f"ICS file is empty: {path}")
                return []
            cal = Calendar.from_ical(content)
        except IngestionError:
            raise
        except Exception as e:
            raise IngestionError(f"Failed to read ICS file: {e}") from e

        events = []
        for component in cal.walk("VEVENT"):
            event_dict = self._ics_event_to_dict(component)
            if event_dict is None:
                continue
            if source:
                event_dict["agent"] = source
            try:
                events.append(CalendarEvent(**event_dict))
            except ValueError as e:
                logger.warning(f"Skipping event {event_dict.get('uid')}: {e}")

        logger.info(f"Imported {len(events)} events from {path}")
        return events

    def _ics_event_to_dict(self, vevent) -> dict | None:
        """Convert an ICS VEVENT component to event fields."""
        dtstart = vevent.get("dtstart")
        if not dtstart:
            return None

        event_dict: dict = {"title": str(vevent.get("summary", ""))}

        uid = vevent.get("uid")
        if uid:
            event_dict["uid"] = str(uid)

        start = dtstart.dt
        if isinstance(start, datetime):
            event_dict["start"] = start
        else:
            # It's a date (all-day event)
            event_dict["start"] = start
            event_dict["all_day"] = True

        dtend = vevent.get("dtend")
        duration = vevent.get("duration")
        if dtend:
            event_dict["end"] = dtend.dt
        elif duration and isinstance(duration.dt, timedelta):
            event_dict["duration"] = int(duration.dt.total_seconds() // 60)

        description = vevent.get("description")
        if description:
            event_dict["description"] = str(description)

        url = vevent.get("url")
        if url:
            event_dict["url"] = str(url)

        categories = vevent.get("categories")
        if categories:
            # A single CATEGORIES property or a list of them
            props = categories if isinstance(categories, list) else [categories]
            names = [str(c) for prop in props for c in getattr(prop, "cats", [prop])]
            if names:
                event_dict["category"] = names[0]

        status = vevent.get("status")
        if status:
            event_dict["status"] = _STATUS_MAP.get(
                str(status).upper(), EventStatus.PLANNED
            )

        sequence = vevent.get("sequence")
        if sequence is not None:
            try:
                event_dict["sequence"] = int(sequence)
            except (TypeError, ValueError):
                pass

        rrule = vevent.get("rrule")
        if rrule:
            event_dict["rrule"] = rrule.to_ical().decode("utf-8")

        event_dict["alerts"] = self._alarms(vevent)
        return event_dict

    def _alarms(self, vevent) -> list[EventAlert]:
        """Collect display alarms with relative triggers before the start."""
        alerts = []
        for alarm in vevent.walk("VALARM"):
            trigger = alarm.get("trigger")
            if trigger is None or not isinstance(trigger.dt, timedelta):
                continue
            minutes = int(-trigger.dt.total_seconds() // 60)
            if minutes < 0:
                continue
            description = alarm.get("description")
            alerts.append(
                EventAlert(
                    minutes_before=minutes,
                    message=str(description) if description else None,
                )
            )
        return alerts
