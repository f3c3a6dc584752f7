"""Display module for rendering CLI output.

This module provides:
- console: Shared Rich console instance
- TableRenderer: Feed and event list tables
- Formatting functions for event times, relative times and file sizes
"""

from cli.display.console import console
from cli.display.formatters import (
    format_event_time,
    format_file_size,
    format_relative_time,
)
from cli.display.table_renderer import FeedInfo, TableRenderer

__all__ = [
    "console",
    "TableRenderer",
    "FeedInfo",
    "format_event_time",
    "format_file_size",
    "format_relative_time",
]
