"""Daily rollup of task completions."""

import logging
import re
from datetime import date, datetime

from feedcal.constants import (
    AGGREGATE_BULLET_PREFIX,
    AGGREGATE_MAX_BULLETS,
    AGGREGATE_UNKNOWN_SOURCE,
    AGGREGATE_UNTITLED_TASK,
)
from feedcal.models.event import CalendarEvent, EventStatus, to_utc, utc_midnight
from feedcal.models.notifications import TaskCompleteNotification
from feedcal.storage.base import EventSink

logger = logging.getLogger(__name__)

_MORE_RE = re.compile(r"^\+(\d+) more$")


def aggregate_uid(source: str, day: date) -> str:
    """Deterministic uid of the rollup for one source and UTC day."""
    return f"daily-tasks-{source}-{day.isoformat()}"


def build_daily_aggregate(
    source: str, day: datetime, summaries: list[str], hidden: int = 0
) -> CalendarEvent:
    """
    Build the rollup event for one source and day.

    Args:
        source: Source identifier
        day: Any instant on the UTC day being rolled up
        summaries: Task summaries to list, oldest first
        hidden: Earlier tasks already folded into the "+K more" line

    Returns:
        All-day completed event titled with the total task count
    """
    start = utc_midnight(to_utc(day))
    count = len(summaries) + hidden
    noun = "task" if count == 1 else "tasks"

    shown = summaries[:AGGREGATE_MAX_BULLETS]
    lines = [f"{AGGREGATE_BULLET_PREFIX}{summary}" for summary in shown]
    extra = count - len(shown)
    if extra > 0:
        lines.append(f"+{extra} more")

    return CalendarEvent(
        uid=aggregate_uid(source, start.date()),
        title=f"Shipped {count} {noun} — {source}",
        description="\n".join(lines),
        start=start,
        all_day=True,
        category="completed",
        agent=source,
        status=EventStatus.COMPLETED,
    )


def parse_aggregate_description(description: str | None) -> tuple[list[str], int]:
    """Recover (listed summaries, hidden count) from a rollup description."""
    summaries: list[str] = []
    hidden = 0
    for line in (description or "").split("\n"):
        if line.startswith(AGGREGATE_BULLET_PREFIX):
            summaries.append(line[len(AGGREGATE_BULLET_PREFIX) :])
            continue
        match = _MORE_RE.match(line)
        if match:
            hidden = int(match.group(1))
    return summaries, hidden


class DailyTaskAggregator:
    """Folds task completions into one rollup event per source and day.

    Prior tasks are recovered from the existing rollup's description, so no
    separate task history is kept. The first completion of a day adds the
    rollup; later ones update it, bumping its sequence.
    """

    def __init__(self, sink: EventSink):
        self.sink = sink

    def record(self, notification: TaskCompleteNotification) -> CalendarEvent | None:
        source = notification.agent_id or AGGREGATE_UNKNOWN_SOURCE
        day = to_utc(notification.completed_at)
        # A blank bullet would be stripped from the stored description
        summary = " ".join(notification.summary.split()) or AGGREGATE_UNTITLED_TASK
        uid = aggregate_uid(source, day.date())

        existing = self.sink.get_event(uid)
        if existing is None:
            logger.debug(f"Starting daily aggregate {uid}")
            return self.sink.add_event(build_daily_aggregate(source, day, [summary]))

        summaries, hidden = parse_aggregate_description(existing.description)
        if len(summaries) >= AGGREGATE_MAX_BULLETS:
            hidden += 1
        else:
            summaries.append(summary)
        rollup = build_daily_aggregate(source, day, summaries, hidden)
        logger.debug(f"Updating daily aggregate {uid}")
        return self.sink.update_event(
            uid, {"title": rollup.title, "description": rollup.description}
        )
