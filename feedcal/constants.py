"""Shared constants for activity feeds."""

# Calendar header
PRODUCT_ID = "-//FeedCal//Activity Feed//EN"
TIMEZONE_HINT = "UTC"

# Appended to every UID so clients can tell our events apart
UID_DOMAIN = "feedcal"

# Feed file naming
FEED_EXTENSION = ".ics"
COMBINED_FEED_NAME = "all-sources"
COMBINED_CALENDAR_NAME = "Activity Feed — All Sources"
SOURCE_CALENDAR_PREFIX = "Activity Feed"
DEFAULT_CALENDAR_NAME = "Activity Feed"

# Event defaults
DEFAULT_EVENT_MINUTES = 15

# Daily aggregate
AGGREGATE_BULLET_PREFIX = "- "
AGGREGATE_MAX_BULLETS = 25
AGGREGATE_UNKNOWN_SOURCE = "unknown"
AGGREGATE_UNTITLED_TASK = "(untitled)"
