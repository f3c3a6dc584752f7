"""Cron expression to recurrence rule translation."""

import logging

logger = logging.getLogger(__name__)

WEEKDAYS = {
    "0": "SU",
    "1": "MO",
    "2": "TU",
    "3": "WE",
    "4": "TH",
    "5": "FR",
    "6": "SA",
    "7": "SU",
    "SUN": "SU",
    "MON": "MO",
    "TUE": "TU",
    "WED": "WE",
    "THU": "TH",
    "FRI": "FR",
    "SAT": "SA",
}


def cron_to_rrule(cron: str) -> str:
    """
    Translate common cron patterns to an RRULE value.

    Recognized: every day, a single weekday, a comma-separated weekday list and
    the Monday-Friday range. Sub-hourly and sub-daily patterns, and anything
    else, return "" rather than an approximation.

    Examples:
        "0 8 * * *"     -> "FREQ=DAILY"
        "0 8 * * 1"     -> "FREQ=WEEKLY;BYDAY=MO"
        "0 8 * * 1,3,5" -> "FREQ=WEEKLY;BYDAY=MO,WE,FR"
        "*/5 * * * *"   -> ""
    """
    parts = cron.split()
    if len(parts) < 5:
        return ""

    minute, hour, _, _, day_of_week = parts[:5]

    if "/" in minute or "," in minute or "/" in hour:
        logger.debug(f"Cron pattern {cron!r} repeats within a day, no RRULE")
        return ""

    if day_of_week == "*":
        return "FREQ=DAILY"

    single = WEEKDAYS.get(day_of_week.upper())
    if single:
        return f"FREQ=WEEKLY;BYDAY={single}"

    if "," in day_of_week:
        days = [
            WEEKDAYS[d.strip().upper()]
            for d in day_of_week.split(",")
            if d.strip().upper() in WEEKDAYS
        ]
        if days:
            return f"FREQ=WEEKLY;BYDAY={','.join(days)}"

    if day_of_week == "1-5":
        return "FREQ=WEEKLY;BYDAY=MO,TU,WE,TH,FR"

    logger.debug(f"Unsupported cron pattern {cron!r}")
    return ""
