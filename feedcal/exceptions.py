"""Exception hierarchy for feed operations."""


class FeedError(Exception):
    """Base exception for feed operations."""

    pass


class FeedNotFoundError(FeedError):
    """Feed not found."""

    pass


class PersistenceError(FeedError):
    """Writing a feed document failed."""

    pass


class DocumentParseError(FeedError):
    """A single event block in a feed document could not be decoded."""

    pass


class ConfigError(FeedError):
    """Configuration file unreadable or invalid."""

    pass


class IngestionError(FeedError):
    """Error during third-party calendar import."""

    pass
