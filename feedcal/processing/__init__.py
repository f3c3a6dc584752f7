"""Processing layer: notification mapping, recurrence and aggregation."""

from feedcal.processing.aggregation import DailyTaskAggregator, build_daily_aggregate
from feedcal.processing.event_mapper import (
    create_checkin_events,
    from_cron,
    from_schedule_notification,
    from_task_complete,
    from_tool_call,
)
from feedcal.processing.recurrence import cron_to_rrule

__all__ = [
    "DailyTaskAggregator",
    "build_daily_aggregate",
    "create_checkin_events",
    "cron_to_rrule",
    "from_cron",
    "from_schedule_notification",
    "from_task_complete",
    "from_tool_call",
]
