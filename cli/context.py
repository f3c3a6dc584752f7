"""Shared CLI context with lazy-initialized dependencies."""

from pathlib import Path

from feedcal.config import FeedConfig
from feedcal.push.dispatcher import LocalPushDispatcher
from feedcal.storage.feed_router import FeedRouter


class CLIContext:
    """Shared context with lazy-initialized dependencies for CLI commands.

    Usage:
        ctx = CLIContext()
        ctx.router.add_event(event)
    """

    def __init__(
        self,
        verbose: bool = False,
        quiet: bool = False,
        config_path: Path | None = None,
    ):
        """Initialize CLI context.

        Args:
            verbose: If True, enable info logging on the console
            quiet: If True, suppress non-error output
            config_path: Optional JSON configuration file
        """
        self.verbose = verbose
        self.quiet = quiet
        self.config_path = config_path

        # Lazy-loaded dependencies
        self._config: FeedConfig | None = None
        self._dispatcher: LocalPushDispatcher | None = None
        self._router: FeedRouter | None = None

    @property
    def config(self) -> FeedConfig:
        """Get configuration (lazy-loaded)."""
        if self._config is None:
            if self.config_path is not None:
                self._config = FeedConfig.load(self.config_path)
            else:
                self._config = FeedConfig.from_env()
        return self._config

    @property
    def dispatcher(self) -> LocalPushDispatcher:
        """Get native-calendar push dispatcher (lazy-loaded).

        Runs in the foreground so pushes finish before the command exits.
        """
        if self._dispatcher is None:
            self._dispatcher = LocalPushDispatcher(
                self.config.local_push, background=False
            )
        return self._dispatcher

    @property
    def router(self) -> FeedRouter:
        """Get feed router (lazy-loaded)."""
        if self._router is None:
            self._router = FeedRouter(self.config, dispatcher=self.dispatcher)
        return self._router


# Global context instance (set by Typer callback)
_ctx: CLIContext | None = None


def get_context() -> CLIContext:
    """Get the current CLI context.

    Raises:
        RuntimeError: If context not initialized
    """
    if _ctx is None:
        raise RuntimeError("CLI context not initialized. This should not happen.")
    return _ctx


def set_context(ctx: CLIContext) -> None:
    """Set the global CLI context."""
    global _ctx
    _ctx = ctx
