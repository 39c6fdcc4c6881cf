"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class FeedConfig:
    """Feed generation limits shared by every user."""
    recency_window_days: int = 7
    resurface_ratio: float = 0.2
    max_feed_size: int = 200
    cache_ttl_seconds: int = 300
    # Content loaded per request, as a multiple of the feed size
    content_fetch_multiplier: int = 2

    def validated(self) -> "FeedConfig":
        """Return a copy with every value clamped into its valid range."""
        return FeedConfig(
            recency_window_days=max(0, int(self.recency_window_days)),
            resurface_ratio=min(1.0, max(0.0, float(self.resurface_ratio))),
            max_feed_size=max(0, int(self.max_feed_size)),
            cache_ttl_seconds=max(0, int(self.cache_ttl_seconds)),
            content_fetch_multiplier=max(1, int(self.content_fetch_multiplier)),
        )


@dataclass
class PreferenceDefaults:
    """Used for users who never saved feed preferences."""
    backlog_ratio: float = 0.3
    max_consecutive_from_source: int = 3


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    format: str = "%(asctime)s [%(name)s] %(message)s"


@dataclass
class Settings:
    """Application settings."""

    feed: FeedConfig = field(default_factory=FeedConfig)
    preferences: PreferenceDefaults = field(default_factory=PreferenceDefaults)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def max_feed_size(self) -> int:
        return self.feed.max_feed_size

    @property
    def cache_ttl_seconds(self) -> int:
        return self.feed.cache_ttl_seconds

    @property
    def content_fetch_limit(self) -> int:
        return self.feed.max_feed_size * self.feed.content_fetch_multiplier

    @property
    def default_backlog_ratio(self) -> float:
        return self.preferences.backlog_ratio

    @property
    def default_max_consecutive(self) -> int:
        return self.preferences.max_consecutive_from_source

    @property
    def log_level(self) -> str:
        return self.logging.level


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)
    settings = Settings()

    if "feed" in config:
        for key, value in config["feed"].items():
            setattr(settings.feed, key, value)
        settings.feed = settings.feed.validated()

    if "preferences" in config:
        for key, value in config["preferences"].items():
            setattr(settings.preferences, key, value)

    if "logging" in config:
        for key, value in config["logging"].items():
            setattr(settings.logging, key, value)

    # Environment wins over the file
    log_level = os.getenv("LOG_LEVEL")
    if log_level:
        settings.logging.level = log_level.upper()

    return settings
