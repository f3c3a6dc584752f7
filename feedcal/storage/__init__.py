"""Event storage: per-document stores and the feed router."""

from feedcal.storage.base import EventSink
from feedcal.storage.event_store import EventStore
from feedcal.storage.feed_paths import FeedPaths, safe_feed_name
from feedcal.storage.feed_router import FeedRouter

__all__ = ["EventSink", "EventStore", "FeedPaths", "FeedRouter", "safe_feed_name"]
