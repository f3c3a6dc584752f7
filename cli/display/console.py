"""Console shared by the feed and event renderers."""

from rich.console import Console

# No auto-highlighting: uids and timestamps would otherwise be colored piecemeal
console = Console(highlight=False)
