"""Configuration for activity feeds."""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Literal, Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from feedcal.exceptions import ConfigError

logger = logging.getLogger(__name__)


class FeedsConfig(BaseModel):
    """Which feeds are maintained."""

    combined: bool = True  # one feed with every source
    per_source: bool = True  # one feed per source


class EventTypesConfig(BaseModel):
    """Notification kinds that produce calendar events."""

    scheduled_posts: bool = True
    launch_sequences: bool = True
    task_completions: bool = True
    analytics_checkins: bool = True
    cron_automations: bool = True
    content_drafts: bool = True
    reminders: bool = True


class TaskCompletionsConfig(BaseModel):
    """How task completions are rendered."""

    mode: Literal["all_day", "timed", "off"] = "all_day"
    aggregate: Literal["none", "daily"] = "none"


class AlertDefaults(BaseModel):
    """Minutes-before-start alerts per event category."""

    scheduled_posts: list[int] = Field(default_factory=lambda: [15])
    launch_sequences: list[int] = Field(default_factory=lambda: [15, 60])
    analytics_checkins: list[int] = Field(default_factory=lambda: [0])
    cron_automations: list[int] = Field(default_factory=lambda: [0])
    content_drafts: list[int] = Field(default_factory=lambda: [0])
    reminders: list[int] = Field(default_factory=lambda: [0])
    task_completions: list[int] = Field(default_factory=list)


class DefaultsConfig(BaseModel):
    """Defaults applied by the mapper."""

    analytics_checkin_offsets: list[str] = Field(
        default_factory=lambda: ["24h", "48h", "7d"]
    )
    event_duration_minutes: int = Field(default=15, ge=1)
    alerts: AlertDefaults = Field(default_factory=AlertDefaults)


class CleanupConfig(BaseModel):
    """Retention policy for completed events."""

    max_past_events: int = Field(default=100, ge=0)
    retention_days: int = Field(default=90, ge=0)
    interval_minutes: int = Field(default=60, ge=1)


class LocalPushConfig(BaseModel):
    """Native calendar side channel (macOS only)."""

    enabled: bool = False
    calendar_source: str = "iCloud"
    timeout_seconds: float = Field(default=10.0, gt=0)


class TrustedProxyConfig(BaseModel):
    """Headers a trusted reverse proxy must set."""

    user_header: str
    required_headers: list[str] = Field(default_factory=list)
    allow_users: list[str] = Field(default_factory=list)


class AuthConfig(BaseModel):
    """Authentication gate in front of the feed transport."""

    mode: Literal["none", "token", "password", "trusted-proxy"] = "none"
    token: str | None = None
    password: str | None = None
    trusted_proxy: TrustedProxyConfig | None = None


class ServerConfig(BaseModel):
    """HTTP transport settings."""

    host: str = "127.0.0.1"
    port: int = Field(default=8787, ge=1, le=65535)
    url_prefix: str = "/feedcal"


class FeedConfig(BaseModel):
    """Feed configuration with Pydantic validation."""

    enabled: bool = True

    # Storage paths
    feed_dir: Path = Field(default=Path("~/.feedcal"))
    legacy_file: str = Field(default="activity-calendar.ics")
    log_dir: Path = Field(default=Path("logs"))
    log_filename: str = Field(default="feedcal.log")

    feeds: FeedsConfig = Field(default_factory=FeedsConfig)
    events: EventTypesConfig = Field(default_factory=EventTypesConfig)
    task_completions: TaskCompletionsConfig = Field(
        default_factory=TaskCompletionsConfig
    )
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    cleanup: CleanupConfig = Field(default_factory=CleanupConfig)
    local_push: LocalPushConfig = Field(default_factory=LocalPushConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @field_validator("feed_dir", "log_dir", mode="after")
    @classmethod
    def expand_home(cls, v: Path) -> Path:
        """Expand a leading ~ to the user's home directory."""
        return v.expanduser()

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any]) -> "FeedConfig":
        """Build a config by merging overrides onto the defaults."""
        base = cls().model_dump(mode="json")
        merged = deep_merge(base, overrides)
        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @classmethod
    def load(cls, path: Path) -> "FeedConfig":
        """Load a JSON override file and merge it onto the defaults."""
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")

        return cls.from_overrides(data)

    @classmethod
    def from_env(cls) -> "FeedConfig":
        """Load configuration from environment variables and .env file."""
        load_dotenv()

        overrides: dict[str, Any] = {}
        if "FEEDCAL_CONFIG" in os.environ:
            config_path = Path(os.environ["FEEDCAL_CONFIG"]).expanduser()
            overrides = cls.load(config_path).model_dump(mode="json")

        # Storage paths
        if "FEEDCAL_DIR" in os.environ:
            overrides["feed_dir"] = os.environ["FEEDCAL_DIR"]
        if "LOG_DIR" in os.environ:
            overrides["log_dir"] = os.environ["LOG_DIR"]
        if "LOG_FILENAME" in os.environ:
            overrides["log_filename"] = os.environ["LOG_FILENAME"]

        # Auth
        auth: dict[str, Any] = {}
        if "FEEDCAL_AUTH_MODE" in os.environ:
            auth["mode"] = os.environ["FEEDCAL_AUTH_MODE"]
        if "FEEDCAL_AUTH_TOKEN" in os.environ:
            auth["token"] = os.environ["FEEDCAL_AUTH_TOKEN"]
        if "FEEDCAL_AUTH_PASSWORD" in os.environ:
            auth["password"] = os.environ["FEEDCAL_AUTH_PASSWORD"]
        if auth:
            overrides = deep_merge(overrides, {"auth": auth})

        # Server
        server: dict[str, Any] = {}
        if "FEEDCAL_HOST" in os.environ:
            server["host"] = os.environ["FEEDCAL_HOST"]
        if "FEEDCAL_PORT" in os.environ:
            try:
                server["port"] = int(os.environ["FEEDCAL_PORT"])
            except ValueError:
                logger.warning(
                    f"Ignoring invalid FEEDCAL_PORT: {os.environ['FEEDCAL_PORT']}"
                )
        if server:
            overrides = deep_merge(overrides, {"server": server})

        return cls.from_overrides(overrides)


def deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict:
    """Recursively merge overrides onto base without mutating either.

    Nested mappings are merged key by key, so keys missing from the override
    keep the base value. Lists and scalars are replaced wholesale. None values
    in the override are ignored.
    """
    result = copy.deepcopy(dict(base))

    for key, override_value in overrides.items():
        if override_value is None:
            continue

        base_value = result.get(key)
        if isinstance(base_value, Mapping) and isinstance(override_value, Mapping):
            result[key] = deep_merge(base_value, override_value)
        else:
            result[key] = copy.deepcopy(override_value)

    return result
