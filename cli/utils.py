"""CLI utilities for error handling and argument parsing."""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator

import typer

from feedcal.exceptions import FeedError, FeedNotFoundError

logger = logging.getLogger(__name__)


@contextmanager
def handle_feed_errors() -> Iterator[None]:
    """Log FeedError subclasses and exit with status 1."""
    try:
        yield
    except FeedNotFoundError as e:
        logger.error(str(e))
        raise typer.Exit(1)
    except FeedError as e:
        logger.error(f"Feed error: {e}")
        raise typer.Exit(1)


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 date or datetime for a command option.

    Raises:
        typer.BadParameter: If the value is not ISO-8601.
    """
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise typer.BadParameter(
            f"Invalid date: {value}. Use ISO 8601, e.g. 2025-02-25T12:00:00Z."
        )
