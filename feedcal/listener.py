"""Subscribe notification handlers to an event bus."""

import logging
from typing import Any, Callable, Mapping, Protocol

from feedcal.config import FeedConfig
from feedcal.models.notifications import (
    CronRegisterNotification,
    NotificationKind,
    ScheduleCancelNotification,
    ScheduleNotification,
    ScheduleUpdateNotification,
    TaskCompleteNotification,
)
from feedcal.processing.aggregation import DailyTaskAggregator
from feedcal.processing.event_mapper import (
    create_checkin_events,
    from_cron,
    from_schedule_notification,
    from_task_complete,
)
from feedcal.storage.base import EventSink

logger = logging.getLogger(__name__)

# Schedule type -> EventTypesConfig flag; other types use scheduled_posts
SCHEDULE_TYPE_FLAGS = {
    "launch": "launch_sequences",
    "draft": "content_drafts",
    "reminder": "reminders",
}


class EventBus(Protocol):
    """Anything handlers can be subscribed to."""

    def subscribe(self, kind: str, handler: Callable[[Any], None]) -> None: ...


def _validate(model, payload):
    if isinstance(payload, model):
        return payload
    return model.model_validate(payload)


class NotificationHandler:
    """Applies notifications to an event sink according to the feed configuration.

    Handlers accept either a notification model or a plain mapping (camelCase
    or snake_case keys).
    """

    def __init__(self, sink: EventSink, config: FeedConfig | None = None):
        self.sink = sink
        self.config = config or FeedConfig()
        self.aggregator = DailyTaskAggregator(sink)

    def schedule_enabled(self, schedule_type: str) -> bool:
        flag = SCHEDULE_TYPE_FLAGS.get(schedule_type, "scheduled_posts")
        return getattr(self.config.events, flag)

    def on_schedule(self, payload: ScheduleNotification | Mapping) -> None:
        notification = _validate(ScheduleNotification, payload)
        if not self.schedule_enabled(notification.type):
            logger.debug(f"Ignoring {notification.type} schedule {notification.id}")
            return

        defaults = self.config.defaults
        self.sink.add_event(from_schedule_notification(notification, defaults))

        if notification.type == "launch" and self.config.events.analytics_checkins:
            for checkin in create_checkin_events(
                notification.id,
                notification.summary,
                notification.scheduled_at,
                defaults.analytics_checkin_offsets,
                project=notification.workspace,
                agent=notification.agent_id,
                defaults=defaults,
            ):
                self.sink.add_event(checkin)

    def on_schedule_update(self, payload: ScheduleUpdateNotification | Mapping) -> None:
        notification = _validate(ScheduleUpdateNotification, payload)
        changes: dict[str, Any] = {}
        if notification.new_time is not None:
            changes["start"] = notification.new_time
        if notification.status is not None:
            changes["status"] = notification.status
        if self.sink.update_event(notification.id, changes) is None:
            logger.debug(f"Update for unknown event {notification.id} ignored")

    def on_schedule_cancel(self, payload: ScheduleCancelNotification | Mapping) -> None:
        notification = _validate(ScheduleCancelNotification, payload)
        if self.sink.cancel_event(notification.id) is None:
            logger.debug(f"Cancel for unknown event {notification.id} ignored")

    def on_task_complete(self, payload: TaskCompleteNotification | Mapping) -> None:
        notification = _validate(TaskCompleteNotification, payload)
        if not self.config.events.task_completions:
            return

        settings = self.config.task_completions
        if settings.mode != "off":
            self.sink.add_event(
                from_task_complete(
                    notification, self.config.defaults, timed=settings.mode == "timed"
                )
            )
        if settings.aggregate == "daily":
            self.aggregator.record(notification)

    def on_cron_register(self, payload: CronRegisterNotification | Mapping) -> None:
        notification = _validate(CronRegisterNotification, payload)
        if not self.config.events.cron_automations:
            return
        self.sink.add_event(from_cron(notification, self.config.defaults))

    def handlers(self) -> dict[str, Callable[[Any], None]]:
        """Notification kind -> handler."""
        return {
            NotificationKind.SCHEDULE.value: self.on_schedule,
            NotificationKind.SCHEDULE_UPDATE.value: self.on_schedule_update,
            NotificationKind.SCHEDULE_CANCEL.value: self.on_schedule_cancel,
            NotificationKind.TASK_COMPLETE.value: self.on_task_complete,
            NotificationKind.CRON_REGISTER.value: self.on_cron_register,
        }


def register_listeners(
    bus: EventBus, sink: EventSink, config: FeedConfig | None = None
) -> NotificationHandler:
    """Subscribe a NotificationHandler for every notification kind.

    Nothing is subscribed when the integration is disabled.
    """
    handler = NotificationHandler(sink, config)
    if not handler.config.enabled:
        logger.info("Feeds disabled, not registering listeners")
        return handler
    for kind, callback in handler.handlers().items():
        bus.subscribe(kind, callback)
    logger.info("Registered notification listeners")
    return handler
