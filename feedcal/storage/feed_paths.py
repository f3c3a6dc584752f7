"""Feed naming and file layout."""

import re
from dataclasses import dataclass
from pathlib import Path

from feedcal.constants import COMBINED_FEED_NAME, FEED_EXTENSION

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9_-]")


def safe_feed_name(source_id: str) -> str:
    """Derive a filesystem-safe feed name from a source identifier.

    Every character outside [A-Za-z0-9_-] becomes "-", so identifiers with
    path separators, dots or whitespace stay inside the feed directory.
    """
    return _UNSAFE_CHARS_RE.sub("-", source_id)


@dataclass(frozen=True)
class FeedPaths:
    """Paths for the feed documents in one directory.

    Always returns paths regardless of whether files exist.
    """

    directory: Path
    legacy_filename: str = "activity-calendar.ics"

    @property
    def combined(self) -> Path:
        """Path to the combined feed document."""
        return self.directory / f"{COMBINED_FEED_NAME}{FEED_EXTENSION}"

    def source(self, source_id: str) -> Path:
        """Path to the per-source feed document for a source identifier."""
        return self.directory / f"{safe_feed_name(source_id)}{FEED_EXTENSION}"

    def discover_sources(self) -> list[Path]:
        """Existing per-source documents, sorted by name."""
        if not self.directory.is_dir():
            return []
        reserved = {self.combined.name, self.legacy_filename}
        return sorted(
            path
            for path in self.directory.glob(f"*{FEED_EXTENSION}")
            if path.is_file() and path.name not in reserved
        )
