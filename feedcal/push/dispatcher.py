"""Run push requests through osascript."""

import logging
import subprocess
import sys
from concurrent.futures import ThreadPoolExecutor

from feedcal.config import LocalPushConfig
from feedcal.push.applescript import build_script
from feedcal.push.descriptor import PushAction, PushRequest

logger = logging.getLogger(__name__)


class LocalPushDispatcher:
    """Mirrors event changes into the macOS Calendar app.

    Scripts run with a bounded timeout on a single background worker so the
    feed write path never waits on them. Failures are logged and discarded.
    Does nothing unless enabled and running on macOS.
    """

    def __init__(self, config: LocalPushConfig | None = None, background: bool = True):
        self.config = config or LocalPushConfig()
        self._known_calendars: set[str] = set()
        self._executor = (
            ThreadPoolExecutor(max_workers=1, thread_name_prefix="feedcal-push")
            if background
            else None
        )

    @property
    def active(self) -> bool:
        return self.config.enabled and sys.platform == "darwin"

    def dispatch(self, request: PushRequest) -> None:
        if not self.active:
            return

        ensure = (
            request.action != PushAction.DELETE
            and request.calendar_name not in self._known_calendars
        )
        if ensure:
            self._known_calendars.add(request.calendar_name)
        script = build_script(request, self.config.calendar_source, ensure)

        if self._executor is None:
            self._run(script)
        else:
            self._executor.submit(self._run, script)

    def _run(self, script: str) -> None:
        try:
            result = subprocess.run(
                ["osascript", "-e", script],
                capture_output=True,
                text=True,
                timeout=self.config.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning(
                f"osascript timed out after {self.config.timeout_seconds}s"
            )
            return
        except OSError as e:
            logger.warning(f"osascript could not be started: {e}")
            return

        if result.returncode != 0:
            logger.warning(f"osascript failed: {result.stderr.strip()}")

    def close(self) -> None:
        """Wait for queued scripts to finish."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
