"""Serve feeds over HTTP."""

import logging

import typer
from typing_extensions import Annotated

from cli.context import get_context
from feedcal import create_app
from feedcal.maintenance import PeriodicCleanup
from feedcal.push.dispatcher import LocalPushDispatcher
from feedcal.storage.feed_router import FeedRouter

logger = logging.getLogger(__name__)


def serve(
    host: Annotated[
        str | None, typer.Option("--host", help="Bind address")
    ] = None,
    port: Annotated[
        int | None, typer.Option("--port", "-p", help="Port")
    ] = None,
) -> None:
    """Run the HTTP transport with periodic cleanup."""
    ctx = get_context()
    config = ctx.config

    # Long-running: pushes go to the background worker
    dispatcher = LocalPushDispatcher(config.local_push)
    router = FeedRouter(config, dispatcher=dispatcher)
    app = create_app(router, config)

    cleaner = PeriodicCleanup(router, config.cleanup)
    cleaner.start()

    bind_host = host or config.server.host
    bind_port = port or config.server.port
    logger.info(f"Serving feeds on http://{bind_host}:{bind_port}{config.server.url_prefix}")
    try:
        app.run(host=bind_host, port=bind_port)
    finally:
        cleaner.stop()
        dispatcher.close()
