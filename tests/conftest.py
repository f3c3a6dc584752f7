from datetime import datetime, timezone

import pytest

from feedcal import create_app
from feedcal.config import FeedConfig
from feedcal.storage.feed_router import FeedRouter

FIXED_NOW = datetime(2025, 2, 25, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    """Clock pinned to 2025-02-25 12:00 UTC."""
    return lambda: FIXED_NOW


@pytest.fixture
def config(tmp_path):
    """Feed configuration writing under a temporary directory."""
    return FeedConfig(feed_dir=tmp_path / "feeds", log_dir=tmp_path / "logs")


@pytest.fixture
def router(config, fixed_clock):
    """Feed router with combined and per-source feeds."""
    return FeedRouter(config, clock=fixed_clock)


@pytest.fixture
def app(router, config):
    """Create and configure a Flask app for testing."""
    app = create_app(router, config)
    app.config["TESTING"] = True
    return app
