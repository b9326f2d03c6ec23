"""
Main orchestration for a changelog-news run.

This module coordinates one run end to end:
1. Resolve the chat credential (fails before any network access)
2. Fetch the changelog and, if enabled, the blog index
3. Load the previous snapshots (a missing snapshot means first run)
4. Extract new changelog entries and new blog posts
5. Persist the fetched documents as the next run's baseline
6. Format and deliver one message, only if anything is new

A connection to the chat service is only opened in step 6, after the
change set has been fully computed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Sequence

import httpx
from rich.console import Console

from .config import AppConfig, get_chat_token
from .core.changes import extract_changes
from .core.document import Document
from .core.errors import ConfigError
from .core.feed import extract_new_entries, feed_blocks
from .core.types import ChangeBlock, DeliveryReport
from .fetch.fetcher import fetch_url
from .input.blog_index import parse_blog_links, parse_feed_index, render_feed_index
from .notify.factory import available_notifiers, create_notifier, requires_token
from .output.formatter import FormatStyle, format_message
from .snapshots import SnapshotStore
from .utils.logging import log_event, setup_logging


@dataclass
class RunResult:
    """Outcome of a single run.

    Attributes:
        changes: Blocks extracted from the changelog
        new_posts: Blog links published since the previous run
        feed_section: Label of the section listing new posts
        message: The message that was delivered, or None if nothing was new
        report: Per-channel delivery results, or None if nothing was sent
    """
    changes: list[ChangeBlock] = field(default_factory=list)
    new_posts: list[str] = field(default_factory=list)
    feed_section: str = "Blog post(s)"
    message: str | None = None
    report: DeliveryReport | None = None

    @property
    def blocks(self) -> list[ChangeBlock]:
        """Changelog blocks followed by the new-posts section, if any."""
        return self.changes + feed_blocks(self.new_posts, self.feed_section)

    @property
    def has_news(self) -> bool:
        return bool(self.changes or self.new_posts)


def collect_news(
    changelog_old: str,
    changelog_new: str,
    feed_old: Sequence[str] | None = None,
    feed_new: Sequence[str] | None = None,
    feed_section: str = "Blog post(s)",
) -> RunResult:
    """Compute what is new from raw snapshot contents, without any I/O.

    The feed is skipped when ``feed_new`` is None (feed disabled) or empty.
    """
    changes = extract_changes(Document.from_text(changelog_old), Document.from_text(changelog_new))
    new_posts: list[str] = []
    if feed_new:
        new_posts = extract_new_entries(feed_old or [], feed_new)
    return RunResult(changes=changes, new_posts=new_posts, feed_section=feed_section)


def run_watch(
    cfg: AppConfig,
    console: Console | None = None,
    transport: httpx.BaseTransport | None = None,
) -> RunResult:
    """Run one check of the watched documents and notify about news.

    Args:
        cfg: Application configuration
        console: Rich console used by the console notifier
        transport: Optional httpx transport for the chat client (tests)

    Returns:
        RunResult describing what was found and delivered

    Raises:
        ConfigError: If the backend is unknown or its credential is missing
        FetchError: If a watched document cannot be downloaded
        MalformedInputError: If a document does not follow the expected grammar
    """
    state_dir = Path(cfg.state.dir)
    logger = setup_logging(cfg.logging, state_dir)
    style = FormatStyle.from_config(cfg.format)

    token = _resolve_token(cfg)
    store = SnapshotStore(state_dir)

    log_event(
        logger,
        "Run start",
        event="run_start",
        changelog=cfg.changelog.url,
        feed=cfg.feed.url if cfg.feed.enabled else None,
        state_dir=str(state_dir),
    )

    changelog_new = _fetch_text(cfg.changelog.url, cfg)
    changelog_old = _read_snapshot(store, cfg.changelog.snapshot, logger)
    if changelog_old is None:
        changelog_old = changelog_new
    updates = {cfg.changelog.snapshot: changelog_new}

    feed_old: list[str] | None = None
    feed_new: list[str] | None = None
    if cfg.feed.enabled:
        feed_new = parse_blog_links(_fetch_text(cfg.feed.url, cfg), cfg.feed.selector)
        stored_index = _read_snapshot(store, cfg.feed.snapshot, logger)
        feed_old = parse_feed_index(stored_index) if stored_index is not None else feed_new
        if not feed_old:
            # An empty index has no boundary entry; start over from the fetched one.
            if stored_index is not None:
                log_event(
                    logger,
                    f"Snapshot {cfg.feed.snapshot} is empty; using the fetched index as baseline",
                    event="snapshot_empty",
                    snapshot=str(store.path(cfg.feed.snapshot)),
                )
            feed_old = feed_new
        updates[cfg.feed.snapshot] = render_feed_index(feed_new)

    result = collect_news(changelog_old, changelog_new, feed_old, feed_new, style.feed_section)
    log_event(
        logger,
        "Changes extracted",
        event="changes_extracted",
        blocks=len(result.changes),
        new_posts=len(result.new_posts),
    )

    for name, text in updates.items():
        store.write(name, text)

    if not result.has_news:
        log_event(logger, "Nothing new", event="no_changes")
        return result

    result.message = format_message(style.title, result.blocks, style.header_template)
    with create_notifier(
        cfg.notify,
        token,
        max_message_chars=style.max_message_chars,
        logger=logger,
        console=console,
        transport=transport,
    ) as notifier:
        result.report = notifier.deliver(result.message)
    return result


def _resolve_token(cfg: AppConfig) -> str | None:
    backend = cfg.notify.backend.lower().strip()
    if backend not in available_notifiers():
        supported = ", ".join(available_notifiers())
        raise ConfigError(f"Unsupported notifier: {cfg.notify.backend}. Supported: {supported}")
    if not requires_token(backend):
        return None
    token = get_chat_token(cfg.notify)
    if not token:
        raise ConfigError(
            f"No chat token: set notify.token, ${cfg.notify.token_env} "
            f"or the {cfg.notify.token_file} file"
        )
    return token


def _fetch_text(url: str, cfg: AppConfig) -> str:
    result = fetch_url(
        url,
        timeout=cfg.fetch.timeout_seconds,
        retries=cfg.fetch.retries,
        user_agent=cfg.fetch.user_agent,
        trust_env=cfg.fetch.trust_env,
    )
    return result.raise_for_error()


def _read_snapshot(store: SnapshotStore, name: str, logger: logging.Logger) -> str | None:
    text = store.read(name)
    if text is None:
        log_event(
            logger,
            f"No snapshot {name}; using the fetched copy as baseline",
            event="snapshot_missing",
            snapshot=str(store.path(name)),
        )
    return text
