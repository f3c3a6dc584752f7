"""Render a feed document."""

import logging
import sys
from pathlib import Path

import typer
from typing_extensions import Annotated

from cli.context import get_context
from cli.utils import handle_feed_errors

logger = logging.getLogger(__name__)


def render(
    source: Annotated[
        str | None,
        typer.Argument(help="Source id (omit for the combined feed)"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the document to this file"),
    ] = None,
) -> None:
    """Print the current document, or write it to a file."""
    ctx = get_context()
    with handle_feed_errors():
        document = ctx.router.render_feed(source)

    if output is None:
        sys.stdout.write(document)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(document, encoding="utf-8", newline="")
    logger.info(f"Wrote {output}")
    print(f"Feed written to {output}")
