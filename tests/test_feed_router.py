"""Tests for routing events to combined and per-source feeds."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from feedcal.config import FeedConfig, FeedsConfig
from feedcal.exceptions import FeedNotFoundError, PersistenceError
from feedcal.models.event import CalendarEvent, EventStatus
from feedcal.push.descriptor import PushAction
from feedcal.storage.event_store import EventStore
from feedcal.storage.feed_paths import FeedPaths, safe_feed_name
from feedcal.storage.feed_router import FeedRouter

NOW = datetime(2025, 2, 25, 12, 0, tzinfo=timezone.utc)


def _event(uid="e1", agent="dev", **fields):
    fields.setdefault("title", "Tweet")
    fields.setdefault("start", NOW)
    return CalendarEvent(uid=uid, agent=agent, **fields)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("dev", "dev"),
        ("team/dev bot", "team-dev-bot"),
        ("../escape", "---escape"),
        ("all_sources-1", "all_sources-1"),
    ],
)
def test_safe_feed_name(source, expected):
    assert safe_feed_name(source) == expected


def test_feed_paths_stay_in_directory(tmp_path):
    paths = FeedPaths(tmp_path)
    assert paths.source("../../etc/passwd").parent == tmp_path
    assert paths.combined.name == "all-sources.ics"


def test_add_fans_out(router, config):
    router.add_event(_event())

    combined = router.get_store()
    source = router.get_store("dev")
    assert combined.get("e1") == source.get("e1")
    assert (config.feed_dir / "all-sources.ics").exists()
    assert (config.feed_dir / "dev.ics").exists()


def test_event_without_source_only_in_combined(router):
    router.add_event(_event(agent=None))
    assert router.source_ids() == []
    assert router.get_event("e1") is not None


def test_update_applies_to_every_store(router):
    router.add_event(_event())
    updated = router.update_event("e1", {"title": "Edited"})

    assert updated.sequence == 1
    assert router.get_store().get("e1").title == "Edited"
    assert router.get_store("dev").get("e1").title == "Edited"
    assert router.get_store("dev").get("e1").sequence == 1


def test_update_unknown_uid(router):
    assert router.update_event("missing", {"title": "x"}) is None


def test_cancel_stays_visible_everywhere(router):
    router.add_event(_event())
    router.cancel_event("e1")

    for source in (None, "dev"):
        event = router.get_store(source).get("e1")
        assert event.status == EventStatus.CANCELLED
        assert "STATUS:CANCELLED" in router.render_feed(source)


def test_remove_from_every_store(router):
    router.add_event(_event())
    assert router.remove_event("e1") is True
    assert router.get_event("e1") is None
    assert router.remove_event("e1") is False


def test_get_event_falls_back_to_source_stores(config, fixed_clock):
    config.feeds = FeedsConfig(combined=False, per_source=True)
    router = FeedRouter(config, clock=fixed_clock)
    router.add_event(_event())

    assert router.combined is None
    assert router.get_event("e1").title == "Tweet"


def test_get_all_events_deduplicates_without_combined(config, fixed_clock):
    config.feeds = FeedsConfig(combined=False, per_source=True)
    router = FeedRouter(config, clock=fixed_clock)
    router.add_event(_event("a", agent="dev"))
    router.add_event(_event("b", agent="ops"))

    assert sorted(e.uid for e in router.get_all_events()) == ["a", "b"]


def test_render_unknown_feed(router):
    with pytest.raises(FeedNotFoundError):
        router.render_feed("nobody")


def test_render_combined_when_disabled(config, fixed_clock):
    config.feeds = FeedsConfig(combined=False, per_source=True)
    router = FeedRouter(config, clock=fixed_clock)
    with pytest.raises(FeedNotFoundError):
        router.render_feed()


def test_per_source_disabled(config, fixed_clock):
    config.feeds = FeedsConfig(combined=True, per_source=False)
    router = FeedRouter(config, clock=fixed_clock)
    router.add_event(_event())
    assert router.source_ids() == []
    assert not (config.feed_dir / "dev.ics").exists()


def test_discovery_rehydrates_sources(config, fixed_clock):
    first = FeedRouter(config, clock=fixed_clock)
    first.add_event(_event("a", agent="team/dev bot"))
    first.add_event(_event("b", agent="ops"))

    # Files that are not per-source feeds
    (config.feed_dir / config.legacy_file).write_text("BEGIN:VCALENDAR\r\nEND:VCALENDAR\r\n")

    second = FeedRouter(config, clock=fixed_clock)

    assert second.source_ids() == ["ops", "team/dev bot"]
    assert second.get_store("team/dev bot").get("a").title == "Tweet"
    assert "X-WR-CALNAME:Activity Feed — team/dev bot" in second.render_feed("team/dev bot")


def test_update_after_restart_reaches_source_store(config, fixed_clock):
    FeedRouter(config, clock=fixed_clock).add_event(_event())
    router = FeedRouter(config, clock=fixed_clock)

    router.update_event("e1", {"title": "After restart"})
    assert router.get_store("dev").get("e1").title == "After restart"


def test_cleanup_runs_on_every_store(router):
    old = datetime(2024, 1, 1, tzinfo=timezone.utc)
    router.add_event(_event("old", start=old, status=EventStatus.COMPLETED))
    assert router.cleanup(retention_days=90, max_events=100) == 2
    assert router.get_event("old") is None


def test_dispatcher_receives_push_requests(config, fixed_clock):
    dispatcher = MagicMock()
    router = FeedRouter(config, dispatcher=dispatcher, clock=fixed_clock)

    router.add_event(_event())
    router.update_event("e1", {"title": "Edited"})
    router.cancel_event("e1")

    actions = [call.args[0].action for call in dispatcher.dispatch.call_args_list]
    assert actions == [PushAction.CREATE, PushAction.UPDATE, PushAction.DELETE]
    assert dispatcher.dispatch.call_args_list[1].args[0].title == "Edited"


def test_recurring_and_sourceless_events_are_not_pushed(config, fixed_clock):
    dispatcher = MagicMock()
    router = FeedRouter(config, dispatcher=dispatcher, clock=fixed_clock)

    router.add_event(_event("r", rrule="FREQ=DAILY"))
    router.add_event(_event("n", agent=None))

    dispatcher.dispatch.assert_not_called()


def test_feeds_listing(router):
    router.add_event(_event("a", agent="ops"))
    router.add_event(_event("b", agent="dev"))
    names = [source for source, _ in router.feeds()]
    assert names == [None, "dev", "ops"]


def test_discovery_skips_empty_documents(config, fixed_clock):
    config.feed_dir.mkdir(parents=True, exist_ok=True)
    empty = "BEGIN:VCALENDAR\r\nVERSION:2.0\r\nEND:VCALENDAR\r\n"
    (config.feed_dir / "ghost.ics").write_text(empty, newline="")
    FeedRouter(config, clock=fixed_clock).add_event(_event(agent="ops"))

    router = FeedRouter(config, clock=fixed_clock)

    assert router.source_ids() == ["ops"]
    with pytest.raises(FeedNotFoundError):
        router.get_store("ghost")


def test_failed_cancel_is_not_pushed(config, fixed_clock):
    dispatcher = MagicMock()
    router = FeedRouter(config, dispatcher=dispatcher, clock=fixed_clock)
    router.add_event(_event())
    dispatcher.reset_mock()

    with patch.object(EventStore, "_write", side_effect=OSError("disk full")):
        with pytest.raises(PersistenceError):
            router.cancel_event("e1")

    dispatcher.dispatch.assert_not_called()
    assert router.get_event("e1").status == EventStatus.PLANNED
