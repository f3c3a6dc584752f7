"""AppleScript builders for Calendar.app."""

import re
from datetime import datetime

from feedcal.push.descriptor import PushAction, PushRequest

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def esc(value: str) -> str:
    """Quote a string literal; control characters are stripped."""
    value = _CONTROL_RE.sub("", value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{value}"'


def set_date_components(var_name: str, value: datetime, all_day: bool) -> list[str]:
    """Assign a date field by field; `date "..."` literals depend on the locale."""
    # All-day events keep their UTC calendar date, timed events use local time
    local = value if all_day else value.astimezone()
    return [
        f"    set {var_name} to current date",
        f"    set day of {var_name} to 1",
        f"    set year of {var_name} to {local.year}",
        f"    set month of {var_name} to {local.month}",
        f"    set day of {var_name} to {local.day}",
        f"    set hours of {var_name} to {0 if all_day else local.hour}",
        f"    set minutes of {var_name} to {0 if all_day else local.minute}",
        f"    set seconds of {var_name} to {0 if all_day else local.second}",
    ]


def ensure_calendar_script(calendar_name: str, calendar_source: str) -> list[str]:
    return [
        'tell application "Calendar"',
        f"  set targetSource to first source whose name is {esc(calendar_source)}",
        f"  if not (exists calendar {esc(calendar_name)} of targetSource) then",
        "    make new calendar at targetSource with properties "
        f"{{name:{esc(calendar_name)}}}",
        "  end if",
        "end tell",
    ]


def create_event_script(request: PushRequest, calendar_source: str) -> list[str]:
    lines = [
        'tell application "Calendar"',
        f"  tell calendar {esc(request.calendar_name)} of source {esc(calendar_source)}",
    ]
    lines.extend(set_date_components("startDate", request.start, request.all_day))
    lines.extend(set_date_components("endDate", request.end, request.all_day))

    properties = f"summary:{esc(request.title)}, start date:startDate, end date:endDate"
    if request.all_day:
        properties += ", allday event:true"
    lines.append(f"    set newEvent to make new event with properties {{{properties}}}")

    if request.description:
        lines.append(f"    set description of newEvent to {esc(request.description)}")

    for minutes in request.alert_minutes:
        lines.append(
            "    make new display alarm at end of display alarms of newEvent "
            f"with properties {{trigger interval:{-minutes}}}"
        )

    lines.extend(["  end tell", "end tell"])
    return lines


def delete_event_script(request: PushRequest, calendar_source: str) -> list[str]:
    return [
        'tell application "Calendar"',
        f"  tell calendar {esc(request.calendar_name)} of source {esc(calendar_source)}",
        f"    set matchingEvents to (every event whose summary is {esc(request.title)})",
        "    repeat with evt in matchingEvents",
        "      delete evt",
        "    end repeat",
        "  end tell",
        "end tell",
    ]


def build_script(
    request: PushRequest, calendar_source: str, ensure_calendar: bool = True
) -> str:
    """
    Render the script for a push request.

    Calendar.app events cannot be modified in place, so updates delete
    matching events by title and create a fresh one.
    """
    lines: list[str] = []
    if ensure_calendar and request.action != PushAction.DELETE:
        lines.extend(ensure_calendar_script(request.calendar_name, calendar_source))
    if request.action in (PushAction.UPDATE, PushAction.DELETE):
        lines.extend(delete_event_script(request, calendar_source))
    if request.action in (PushAction.CREATE, PushAction.UPDATE):
        lines.extend(create_event_script(request, calendar_source))
    return "\n".join(lines)
