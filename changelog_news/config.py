"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ChangelogConfig: Watched changelog location and snapshot name
- FeedConfig: Optional blog index location, link selector and snapshot name
- FetchConfig: HTTP fetching settings
- FormatConfig: Message title and header rendering
- NotifyConfig: Chat backend, target channels and credentials
- StateConfig: Where snapshots are persisted between runs
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any

import yaml


@dataclass
class ChangelogConfig:
    """Configuration for the watched changelog.

    Attributes:
        url: Raw URL of the markdown changelog
        snapshot: File name of the persisted previous copy inside the state dir
    """

    url: str = "https://gitlab.com/veloren/veloren/-/raw/weekly/CHANGELOG.md"
    snapshot: str = "CHANGELOG.md"


@dataclass
class FeedConfig:
    """Configuration for the watched blog index.

    Attributes:
        enabled: Whether to check the blog index for new posts
        url: URL of the HTML page listing posts, newest first
        selector: CSS selector of the post link elements
        snapshot: File name of the persisted link list inside the state dir
    """

    enabled: bool = True
    url: str = "https://veloren.net/blog/"
    selector: str = ".header-link"
    snapshot: str = "DEVBLOGS.md"


@dataclass
class FetchConfig:
    """Configuration for HTTP fetching.

    Attributes:
        timeout_seconds: HTTP request timeout
        retries: Number of retry attempts for failed requests
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 20.0
    retries: int = 2
    trust_env: bool = True
    user_agent: str = "changelog-news/0.1 (+https://veloren.net)"


@dataclass
class FormatConfig:
    """Configuration for the notification message.

    Attributes:
        title: First line of every message
        header_template: Template for sub-section headers, with a {label} field
        feed_section: Label of the section listing new blog posts
        max_message_chars: Per-message length limit of the chat service
    """

    title: str = "# Veloren News!"
    header_template: str = "## {label}"
    feed_section: str = "Blog post(s)"
    max_message_chars: int = 2000


@dataclass
class NotifyConfig:
    """Configuration for message delivery.

    Attributes:
        backend: "discord" to post through the Discord API, "console" to print
        channels: Exact channel names to post in, across every joined server
        token: Optional inline bot token (overrides env var and token file)
        token_env: Environment variable holding the bot token
        token_file: File holding the bot token, checked last
        api_base_url: Base URL of the Discord REST API
        timeout_seconds: HTTP timeout for chat API requests
    """

    backend: str = "discord"
    channels: list[str] = field(default_factory=lambda: ["veloren-updates"])
    token: str | None = None
    token_env: str = "DISCORD_TOKEN"
    token_file: str | None = "DISCORD_TOKEN"
    api_base_url: str = "https://discord.com/api/v10"
    timeout_seconds: float = 15.0


@dataclass
class StateConfig:
    """Configuration for persisted snapshots.

    Attributes:
        dir: Directory holding the previous run's snapshots and log file
    """

    dir: str = "."


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file inside the state dir
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "run.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    changelog: ChangelogConfig = field(default_factory=ChangelogConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    format: FormatConfig = field(default_factory=FormatConfig)
    notify: NotifyConfig = field(default_factory=NotifyConfig)
    state: StateConfig = field(default_factory=StateConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return _fromdict(_asdict(DEFAULT_CONFIG))

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(DEFAULT_CONFIG, raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "changelog": {
            "url": cfg.changelog.url,
            "snapshot": cfg.changelog.snapshot,
        },
        "feed": {
            "enabled": cfg.feed.enabled,
            "url": cfg.feed.url,
            "selector": cfg.feed.selector,
            "snapshot": cfg.feed.snapshot,
        },
        "fetch": {
            "timeout_seconds": cfg.fetch.timeout_seconds,
            "retries": cfg.fetch.retries,
            "trust_env": cfg.fetch.trust_env,
            "user_agent": cfg.fetch.user_agent,
        },
        "format": {
            "title": cfg.format.title,
            "header_template": cfg.format.header_template,
            "feed_section": cfg.format.feed_section,
            "max_message_chars": cfg.format.max_message_chars,
        },
        "notify": {
            "backend": cfg.notify.backend,
            "channels": list(cfg.notify.channels),
            "token": cfg.notify.token,
            "token_env": cfg.notify.token_env,
            "token_file": cfg.notify.token_file,
            "api_base_url": cfg.notify.api_base_url,
            "timeout_seconds": cfg.notify.timeout_seconds,
        },
        "state": {
            "dir": cfg.state.dir,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    notify_data = dict(data["notify"])
    # A single channel name is accepted as shorthand for a one-item list
    if isinstance(notify_data.get("channels"), str):
        notify_data["channels"] = [notify_data["channels"]]

    return AppConfig(
        changelog=ChangelogConfig(**data["changelog"]),
        feed=FeedConfig(**data["feed"]),
        fetch=FetchConfig(**data["fetch"]),
        format=FormatConfig(**data["format"]),
        notify=NotifyConfig(**notify_data),
        state=StateConfig(**data["state"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_chat_token(cfg: NotifyConfig, base_dir: Path | None = None) -> str | None:
    """Get the chat bot token from inline config, environment, or token file.

    A relative ``token_file`` is resolved against ``base_dir`` when given.
    """
    if cfg.token:
        return cfg.token.strip()
    env_value = os.getenv(cfg.token_env) if cfg.token_env else None
    if env_value:
        return env_value.strip()
    if cfg.token_file:
        token_path = Path(cfg.token_file)
        if base_dir is not None and not token_path.is_absolute():
            token_path = base_dir / token_path
        if token_path.is_file():
            token = token_path.read_text(encoding="utf-8").strip()
            return token or None
    return None
