"""End-to-end tests for a run with fetching stubbed out."""

from __future__ import annotations

import io
from pathlib import Path

import httpx
import pytest
from rich.console import Console

from changelog_news import runner
from changelog_news.config import AppConfig
from changelog_news.core.errors import ConfigError, FetchError, MalformedInputError
from changelog_news.fetch.fetcher import FetchResult


CHANGELOG_URL = "https://example.com/CHANGELOG.md"
BLOG_URL = "https://example.com/blog/"

CHANGELOG_V1 = """# Changelog

## [Unreleased]

### Added

- Fishing

### Fixed

- Crash when opening the map

## [0.9.0] - 2021-03-20

- Old release notes
"""

CHANGELOG_V2 = """# Changelog

## [Unreleased]

### Added

- Fishing
- Sailing with wind
  physics

### Fixed

- Crash when opening the map

## [0.9.0] - 2021-03-20

- Old release notes
"""


def _blog(*links: str) -> str:
    anchors = "".join(f'<h2><a class="header-link" href="{link}">{link}</a></h2>' for link in links)
    return f"<html><body>{anchors}</body></html>"


def _config(tmp_path: Path, backend: str = "console") -> AppConfig:
    cfg = AppConfig()
    cfg.changelog.url = CHANGELOG_URL
    cfg.feed.url = BLOG_URL
    cfg.state.dir = str(tmp_path)
    cfg.logging.console = False
    cfg.notify.backend = backend
    return cfg


def _serve(monkeypatch, pages: dict[str, str | None]) -> list[str]:
    """Stub fetch_url with fixed pages; None simulates a failed download."""
    calls: list[str] = []

    def fake_fetch(url, **kwargs):
        calls.append(url)
        text = pages[url]
        if text is None:
            return FetchResult(url=url, status_code=None, text=None, error="ConnectError: down")
        return FetchResult(url=url, status_code=200, text=text, error=None)

    monkeypatch.setattr(runner, "fetch_url", fake_fetch)
    return calls


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200), buffer


def test_first_run_saves_baseline_and_sends_nothing(monkeypatch, tmp_path: Path):
    _serve(monkeypatch, {CHANGELOG_URL: CHANGELOG_V1, BLOG_URL: _blog("/devblog-2", "/devblog-1")})
    console, buffer = _console()

    result = runner.run_watch(_config(tmp_path), console=console)

    assert not result.has_news
    assert result.message is None
    assert result.report is None
    assert buffer.getvalue() == ""
    assert (tmp_path / "CHANGELOG.md").read_text(encoding="utf-8") == CHANGELOG_V1
    assert (tmp_path / "DEVBLOGS.md").read_text(encoding="utf-8") == "/devblog-2\n/devblog-1\n"


def test_new_entries_and_posts_are_delivered_in_one_message(monkeypatch, tmp_path: Path):
    (tmp_path / "CHANGELOG.md").write_text(CHANGELOG_V1, encoding="utf-8")
    (tmp_path / "DEVBLOGS.md").write_text("/devblog-1\n", encoding="utf-8")
    _serve(monkeypatch, {CHANGELOG_URL: CHANGELOG_V2, BLOG_URL: _blog("/devblog-2", "/devblog-1")})
    console, buffer = _console()

    result = runner.run_watch(_config(tmp_path), console=console)

    assert result.message == (
        "# Veloren News!\n"
        "\n"
        "## Added\n"
        "- Sailing with wind physics\n"
        "## Blog post(s)\n"
        "- /devblog-2"
    )
    assert result.new_posts == ["/devblog-2"]
    assert result.report is not None and result.report.ok
    assert "- Sailing with wind physics" in buffer.getvalue()
    assert (tmp_path / "CHANGELOG.md").read_text(encoding="utf-8") == CHANGELOG_V2
    assert (tmp_path / "DEVBLOGS.md").read_text(encoding="utf-8") == "/devblog-2\n/devblog-1\n"


def test_feed_can_be_disabled(monkeypatch, tmp_path: Path):
    (tmp_path / "CHANGELOG.md").write_text(CHANGELOG_V1, encoding="utf-8")
    calls = _serve(monkeypatch, {CHANGELOG_URL: CHANGELOG_V2})
    cfg = _config(tmp_path)
    cfg.feed.enabled = False

    result = runner.run_watch(cfg, console=_console()[0])

    assert calls == [CHANGELOG_URL]
    assert result.new_posts == []
    assert "Blog post(s)" not in result.message
    assert not (tmp_path / "DEVBLOGS.md").exists()


def test_malformed_changelog_aborts_without_touching_baseline(monkeypatch, tmp_path: Path):
    (tmp_path / "CHANGELOG.md").write_text(CHANGELOG_V1, encoding="utf-8")
    (tmp_path / "DEVBLOGS.md").write_text("/devblog-1\n", encoding="utf-8")
    broken = CHANGELOG_V2.replace("## [Unreleased]", "## Unreleased")
    _serve(monkeypatch, {CHANGELOG_URL: broken, BLOG_URL: _blog("/devblog-2", "/devblog-1")})

    with pytest.raises(MalformedInputError):
        runner.run_watch(_config(tmp_path), console=_console()[0])

    assert (tmp_path / "CHANGELOG.md").read_text(encoding="utf-8") == CHANGELOG_V1
    assert (tmp_path / "DEVBLOGS.md").read_text(encoding="utf-8") == "/devblog-1\n"


def test_empty_feed_snapshot_is_replaced_by_fetched_index(monkeypatch, tmp_path: Path):
    _serve(monkeypatch, {CHANGELOG_URL: CHANGELOG_V1, BLOG_URL: "<html></html>"})
    runner.run_watch(_config(tmp_path), console=_console()[0])
    assert (tmp_path / "DEVBLOGS.md").read_text(encoding="utf-8") == ""

    _serve(monkeypatch, {CHANGELOG_URL: CHANGELOG_V1, BLOG_URL: _blog("/devblog-1")})
    second = runner.run_watch(_config(tmp_path), console=_console()[0])

    assert second.new_posts == []
    assert (tmp_path / "DEVBLOGS.md").read_text(encoding="utf-8") == "/devblog-1\n"

    _serve(monkeypatch, {CHANGELOG_URL: CHANGELOG_V1, BLOG_URL: _blog("/devblog-2", "/devblog-1")})
    third = runner.run_watch(_config(tmp_path), console=_console()[0])

    assert third.new_posts == ["/devblog-2"]


def test_fetch_failure_is_fatal(monkeypatch, tmp_path: Path):
    _serve(monkeypatch, {CHANGELOG_URL: None})

    with pytest.raises(FetchError, match="ConnectError"):
        runner.run_watch(_config(tmp_path), console=_console()[0])

    assert not (tmp_path / "CHANGELOG.md").exists()


def test_missing_token_fails_before_fetching(monkeypatch, tmp_path: Path):
    monkeypatch.delenv("DISCORD_TOKEN", raising=False)
    calls = _serve(monkeypatch, {CHANGELOG_URL: CHANGELOG_V2})
    cfg = _config(tmp_path, backend="discord")
    cfg.notify.token_file = str(tmp_path / "no-such-token")

    with pytest.raises(ConfigError):
        runner.run_watch(cfg)

    assert calls == []


def test_no_chat_connection_when_nothing_is_new(monkeypatch, tmp_path: Path):
    (tmp_path / "CHANGELOG.md").write_text(CHANGELOG_V1, encoding="utf-8")
    _serve(monkeypatch, {CHANGELOG_URL: CHANGELOG_V1})
    cfg = _config(tmp_path, backend="discord")
    cfg.feed.enabled = False
    cfg.notify.token = "secret"

    def refuse(*args, **kwargs):
        raise AssertionError("notifier must not be created")

    monkeypatch.setattr(runner, "create_notifier", refuse)

    result = runner.run_watch(cfg)

    assert result.report is None


def test_discord_delivery_through_run(monkeypatch, tmp_path: Path):
    (tmp_path / "CHANGELOG.md").write_text(CHANGELOG_V1, encoding="utf-8")
    _serve(monkeypatch, {CHANGELOG_URL: CHANGELOG_V2})
    cfg = _config(tmp_path, backend="discord")
    cfg.feed.enabled = False
    cfg.notify.token = "secret"
    cfg.notify.api_base_url = "https://discord.test/api/v10"
    posted: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith("/guilds"):
            return httpx.Response(200, json=[{"id": "1"}])
        if path.endswith("/channels"):
            return httpx.Response(200, json=[{"id": "10", "name": "veloren-updates"}])
        posted.append(request.content.decode("utf-8"))
        return httpx.Response(200, json={"id": "1"})

    result = runner.run_watch(cfg, transport=httpx.MockTransport(handler))

    assert result.report is not None
    assert [r.channel_id for r in result.report.succeeded] == ["10"]
    assert len(posted) == 1
    assert "Sailing with wind physics" in posted[0]


def test_collect_news_without_io():
    result = runner.collect_news(
        CHANGELOG_V1,
        CHANGELOG_V2,
        feed_old=["/devblog-1"],
        feed_new=["/devblog-3", "/devblog-2", "/devblog-1"],
        feed_section="Posts",
    )

    assert [b.text for b in result.blocks] == [
        "Added",
        "- Sailing with wind physics",
        "Posts",
        "- /devblog-3",
        "- /devblog-2",
    ]
