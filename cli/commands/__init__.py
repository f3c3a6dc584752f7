"""CLI commands package."""

from cli.commands.add import add
from cli.commands.cancel import cancel, remove
from cli.commands.cleanup import cleanup
from cli.commands.config import config
from cli.commands.feeds import feeds
from cli.commands.ingest import import_file
from cli.commands.render import render
from cli.commands.serve import serve
from cli.commands.show import show

__all__ = [
    "add",
    "cancel",
    "cleanup",
    "config",
    "feeds",
    "import_file",
    "remove",
    "render",
    "serve",
    "show",
]
