"""List the feeds in the feed directory."""

from datetime import datetime, timezone

from cli.context import get_context
from cli.display import FeedInfo, TableRenderer
from cli.utils import handle_feed_errors


def feeds() -> None:
    """List the combined feed and every per-source feed."""
    ctx = get_context()
    with handle_feed_errors():
        router = ctx.router
        infos = []
        for source, store in router.feeds():
            size = updated = None
            if store.path.exists():
                stat = store.path.stat()
                size = stat.st_size
                updated = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
            infos.append(
                FeedInfo(
                    name=source if source is not None else "(combined)",
                    event_count=len(store),
                    path=store.path,
                    size=size,
                    updated=updated,
                )
            )

    TableRenderer().render_feed_list(infos, ctx.config.feed_dir)
