"""Event store backed by a single calendar document."""

import logging
import os
import tempfile
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping

from feedcal.constants import DEFAULT_CALENDAR_NAME
from feedcal.exceptions import PersistenceError
from feedcal.ics.codec import sanitize_event
from feedcal.ics.reader import ICSReader
from feedcal.ics.writer import ICSWriter
from feedcal.models.event import CalendarEvent, EventStatus

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EventStore:
    """Keyed collection of events persisted as one calendar document.

    The document is the only persisted form: it is parsed on construction and
    fully rewritten after every mutation. Mutations are serialized by a
    per-store lock, and a failed write rolls the in-memory change back before
    PersistenceError is raised.
    """

    def __init__(
        self,
        path: Path,
        calendar_name: str = DEFAULT_CALENDAR_NAME,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the store and load any existing document.

        Args:
            path: Backing document location
            calendar_name: Display name written into the document header
            clock: Source of the current time (used for DTSTAMP and cleanup)
        """
        self.path = Path(path)
        self.calendar_name = calendar_name
        self._clock = clock
        self._lock = threading.RLock()
        self._writer = ICSWriter()
        self._events: dict[str, CalendarEvent] = {}
        self._load()

    def _load(self) -> None:
        """Parse the backing document; an unreadable location means an empty store."""
        reader = ICSReader()
        try:
            events = reader.read(self.path)
        except FileNotFoundError:
            return
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Could not read {self.path}, starting empty: {e}")
            return

        for event in events:
            self._events[event.uid] = event

        if reader.skipped:
            logger.warning(
                f"Skipped {reader.skipped} malformed event block(s) in {self.path}"
            )
        logger.info(f"Loaded {len(self._events)} events from {self.path}")

    # --- Accessors ---

    def get(self, uid: str) -> CalendarEvent | None:
        with self._lock:
            return self._events.get(uid)

    def all_events(self) -> list[CalendarEvent]:
        """Events in insertion order."""
        with self._lock:
            return list(self._events.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __contains__(self, uid: object) -> bool:
        with self._lock:
            return uid in self._events

    def __iter__(self) -> Iterator[CalendarEvent]:
        return iter(self.all_events())

    # --- Mutations ---

    def add(self, event: CalendarEvent) -> CalendarEvent:
        """Sanitize and insert (or overwrite) an event, then persist."""
        clean = sanitize_event(event)
        with self._lock:
            snapshot = dict(self._events)
            self._events[clean.uid] = clean
            self._persist(snapshot)
        logger.debug(f"Added event {clean.uid} to {self.path.name}")
        return clean

    def update(self, uid: str, changes: Mapping[str, Any]) -> CalendarEvent | None:
        """
        Merge changes into an existing event and bump its sequence.

        Args:
            uid: Event to update
            changes: Field values to merge; "uid" and "sequence" are ignored

        Returns:
            The updated event, or None if uid is not in the store
        """
        with self._lock:
            current = self._events.get(uid)
            if current is None:
                logger.debug(f"Update ignored, {uid} not in {self.path.name}")
                return None

            data = current.model_dump(exclude={"is_recurring"})
            data.update(
                {k: v for k, v in changes.items() if k not in ("uid", "sequence")}
            )
            data["sequence"] = current.sequence + 1
            updated = sanitize_event(CalendarEvent.model_validate(data))

            snapshot = dict(self._events)
            self._events[uid] = updated
            self._persist(snapshot)
            return updated

    def cancel(self, uid: str) -> CalendarEvent | None:
        """Mark an event cancelled; it stays in the document."""
        return self.update(uid, {"status": EventStatus.CANCELLED})

    def remove(self, uid: str) -> bool:
        """Delete an event entirely. Returns False if it was not present."""
        with self._lock:
            if uid not in self._events:
                return False
            snapshot = dict(self._events)
            del self._events[uid]
            self._persist(snapshot)
            return True

    def cleanup(
        self, retention_days: int, max_events: int, now: datetime | None = None
    ) -> int:
        """
        Evict completed events.

        Completed events that started more than retention_days ago are removed
        first. If the store still holds more than max_events events, the oldest
        remaining completed events are removed until it fits or none are left.
        Events in any other status are never removed.

        Returns:
            Number of events removed
        """
        now = now or self._clock()
        cutoff = now - timedelta(days=retention_days)

        with self._lock:
            expired = [
                uid
                for uid, event in self._events.items()
                if event.status == EventStatus.COMPLETED and event.start < cutoff
            ]
            remaining = len(self._events) - len(expired)

            if remaining > max_events:
                expired_set = set(expired)
                completed = sorted(
                    (
                        event
                        for event in self._events.values()
                        if event.status == EventStatus.COMPLETED
                        and event.uid not in expired_set
                    ),
                    key=lambda e: e.start,
                )
                overflow = completed[: remaining - max_events]
                expired.extend(event.uid for event in overflow)

            if not expired:
                return 0

            snapshot = dict(self._events)
            for uid in expired:
                del self._events[uid]
            self._persist(snapshot)

        logger.info(f"Cleanup removed {len(expired)} event(s) from {self.path.name}")
        return len(expired)

    # --- Rendering and persistence ---

    def render(self, now: datetime | None = None) -> str:
        """Render the document for the current in-memory state."""
        with self._lock:
            return self._writer.render(
                self.calendar_name, self._events.values(), now or self._clock()
            )

    def _persist(self, snapshot: dict[str, CalendarEvent]) -> None:
        """Write the document; on failure restore snapshot and raise."""
        try:
            self._write(self.render())
        except OSError as e:
            self._events = snapshot
            logger.error(f"Failed to write {self.path}: {e}")
            raise PersistenceError(f"Failed to write {self.path}: {e}") from e

    def _write(self, text: str) -> None:
        """Atomically replace the backing document."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    # EventSink
    add_event = add
    update_event = update
    cancel_event = cancel
    get_event = get
