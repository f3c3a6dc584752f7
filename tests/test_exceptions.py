"""Tests for exception classes."""

import pytest

from feedcal.exceptions import (
    ConfigError,
    DocumentParseError,
    FeedError,
    FeedNotFoundError,
    IngestionError,
    PersistenceError,
)


def test_feed_error():
    error = FeedError("Test error")
    assert str(error) == "Test error"
    assert isinstance(error, Exception)


@pytest.mark.parametrize(
    "exc_class",
    [FeedNotFoundError, PersistenceError, DocumentParseError, ConfigError, IngestionError],
)
def test_subclasses_are_feed_errors(exc_class):
    error = exc_class("boom")
    assert isinstance(error, FeedError)
    with pytest.raises(FeedError):
        raise error
