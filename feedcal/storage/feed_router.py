"""Fan events out to the combined feed and per-source feeds."""

import logging
import threading
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Mapping

from feedcal.config import FeedConfig
from feedcal.constants import COMBINED_CALENDAR_NAME, SOURCE_CALENDAR_PREFIX
from feedcal.exceptions import FeedNotFoundError
from feedcal.models.event import CalendarEvent
from feedcal.push.descriptor import PushAction, build_push_request
from feedcal.storage.event_store import EventStore, utc_now
from feedcal.storage.feed_paths import FeedPaths, safe_feed_name

if TYPE_CHECKING:
    from feedcal.push.dispatcher import LocalPushDispatcher

logger = logging.getLogger(__name__)


def source_calendar_name(source_id: str) -> str:
    """Display name of a per-source feed."""
    return f"{SOURCE_CALENDAR_PREFIX} — {source_id}"


class FeedRouter:
    """Routes event writes to one combined store and lazily created per-source stores.

    Per-source stores are keyed by their filesystem-safe feed name. Existing
    per-source documents in the feed directory are loaded on construction.
    """

    def __init__(
        self,
        config: FeedConfig | None = None,
        dispatcher: "LocalPushDispatcher | None" = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config or FeedConfig()
        self.paths = FeedPaths(self.config.feed_dir, self.config.legacy_file)
        self.dispatcher = dispatcher
        self._clock = clock
        self._lock = threading.RLock()

        self.combined: EventStore | None = None
        if self.config.feeds.combined:
            self.combined = EventStore(
                self.paths.combined, COMBINED_CALENDAR_NAME, clock=clock
            )

        self._sources: dict[str, EventStore] = {}
        self._source_ids: dict[str, str] = {}
        if self.config.feeds.per_source:
            self._discover()

    def _discover(self) -> None:
        """Load per-source documents already present in the feed directory."""
        for path in self.paths.discover_sources():
            store = EventStore(path, clock=self._clock)
            if len(store) == 0:
                logger.debug(f"Skipping empty feed document {path.name}")
                continue
            name = path.stem
            source_id = next(
                (event.agent for event in store.all_events() if event.agent), name
            )
            store.calendar_name = source_calendar_name(source_id)
            self._sources[name] = store
            self._source_ids[name] = source_id
        if self._sources:
            logger.info(f"Discovered {len(self._sources)} per-source feed(s)")

    def _source_store(self, source_id: str) -> EventStore:
        name = safe_feed_name(source_id)
        store = self._sources.get(name)
        if store is None:
            logger.info(f"Creating feed for source {source_id!r}")
            store = EventStore(
                self.paths.source(source_id),
                source_calendar_name(source_id),
                clock=self._clock,
            )
            self._sources[name] = store
            self._source_ids[name] = source_id
        return store

    def _stores(self) -> list[EventStore]:
        stores = [self.combined] if self.combined is not None else []
        return stores + list(self._sources.values())

    def _push(self, action: PushAction, event: CalendarEvent) -> None:
        if self.dispatcher is None:
            return
        request = build_push_request(action, event)
        if request is not None:
            self.dispatcher.dispatch(request)

    # --- Writes ---

    def add_event(self, event: CalendarEvent) -> CalendarEvent:
        """
        Add an event to the combined feed and to its source's feed.

        Returns:
            The stored (sanitized) event
        """
        with self._lock:
            stored = None
            if self.combined is not None:
                stored = self.combined.add(event)
            if event.agent and self.config.feeds.per_source:
                source_copy = self._source_store(event.agent).add(event)
                stored = stored or source_copy
            if stored is None:
                logger.warning(f"Event {event.uid} has no source and no combined feed")
                stored = event
        self._push(PushAction.CREATE, stored)
        return stored

    def update_event(
        self, uid: str, changes: Mapping[str, Any]
    ) -> CalendarEvent | None:
        """Update uid in every store that holds it. Returns None if none do."""
        with self._lock:
            results = [
                store.update(uid, changes) for store in self._stores() if uid in store
            ]
        updated = next((event for event in results if event is not None), None)
        if updated is not None:
            self._push(PushAction.UPDATE, updated)
        return updated

    def cancel_event(self, uid: str) -> CalendarEvent | None:
        """Cancel uid everywhere; it stays visible with cancelled status."""
        with self._lock:
            results = [store.cancel(uid) for store in self._stores() if uid in store]
        cancelled = next((event for event in results if event is not None), None)
        if cancelled is not None:
            self._push(PushAction.DELETE, cancelled)
        return cancelled

    def remove_event(self, uid: str) -> bool:
        """Remove uid from every store. Returns True if any store held it."""
        existing = self.get_event(uid)
        with self._lock:
            removed = [store.remove(uid) for store in self._stores()]
        if existing is not None:
            self._push(PushAction.DELETE, existing)
        return any(removed)

    def cleanup(
        self, retention_days: int, max_events: int, now: datetime | None = None
    ) -> int:
        """Run cleanup on every store; returns the total removed."""
        with self._lock:
            return sum(
                store.cleanup(retention_days, max_events, now)
                for store in self._stores()
            )

    # --- Reads ---

    def get_event(self, uid: str) -> CalendarEvent | None:
        """Look up uid, combined feed first."""
        with self._lock:
            for store in self._stores():
                event = store.get(uid)
                if event is not None:
                    return event
        return None

    def get_all_events(self) -> list[CalendarEvent]:
        """All events, from the combined feed or deduplicated across sources."""
        with self._lock:
            if self.combined is not None:
                return self.combined.all_events()
            merged: dict[str, CalendarEvent] = {}
            for store in self._sources.values():
                for event in store.all_events():
                    merged.setdefault(event.uid, event)
            return list(merged.values())

    def source_ids(self) -> list[str]:
        """Known per-source identifiers, sorted."""
        with self._lock:
            return sorted(self._source_ids.values())

    def get_store(self, source: str | None = None) -> EventStore:
        """
        Store for the combined feed (source=None) or one source.

        Raises:
            FeedNotFoundError: If the feed is disabled or unknown
        """
        with self._lock:
            if source is None:
                if self.combined is None:
                    raise FeedNotFoundError("Combined feed is disabled")
                return self.combined
            store = self._sources.get(safe_feed_name(source))
            if store is None:
                raise FeedNotFoundError(f"Feed not found: {source}")
            return store

    def render_feed(self, source: str | None = None, now: datetime | None = None) -> str:
        """Render the combined document or one per-source document."""
        return self.get_store(source).render(now)

    def feeds(self) -> list[tuple[str | None, EventStore]]:
        """(source id, store) pairs for listing, combined feed first as None."""
        with self._lock:
            pairs: list[tuple[str | None, EventStore]] = []
            if self.combined is not None:
                pairs.append((None, self.combined))
            pairs.extend(
                (self._source_ids[name], store)
                for name, store in sorted(self._sources.items())
            )
            return pairs
