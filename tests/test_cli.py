"""Tests for the command-line interface."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from changelog_news import runner as runner_module
from changelog_news.cli import app
from changelog_news.fetch.fetcher import FetchResult


cli_runner = CliRunner()

OLD = "# Changelog\n\n## [Unreleased]\n\n- fixed bug A\n\n## [0.1.0]\n"
NEW = "# Changelog\n\n## [Unreleased]\n\n- fixed bug A\n- fixed bug B\n\n## [0.1.0]\n"


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_diff_prints_message(tmp_path: Path):
    old = _write(tmp_path, "old.md", OLD)
    new = _write(tmp_path, "new.md", NEW)

    result = cli_runner.invoke(app, ["diff", str(old), str(new)])

    assert result.exit_code == 0
    assert "# Veloren News!" in result.output
    assert "- fixed bug B" in result.output
    assert "- fixed bug A" not in result.output


def test_diff_includes_new_feed_entries(tmp_path: Path):
    old = _write(tmp_path, "old.md", OLD)
    feed_old = _write(tmp_path, "feed-old.txt", "url3\nurl2\n")
    feed_new = _write(tmp_path, "feed-new.txt", "url4\nurl3\nurl2\n")

    result = cli_runner.invoke(
        app,
        ["diff", str(old), str(old), "--feed-old", str(feed_old), "--feed-new", str(feed_new)],
    )

    assert result.exit_code == 0
    assert "## Blog post(s)" in result.output
    assert "- url4" in result.output


def test_diff_reports_no_news(tmp_path: Path):
    old = _write(tmp_path, "old.md", OLD)

    result = cli_runner.invoke(app, ["diff", str(old), str(old)])

    assert result.exit_code == 0
    assert "No news." in result.output


def test_diff_fails_on_malformed_input(tmp_path: Path):
    old = _write(tmp_path, "old.md", OLD)
    new = _write(tmp_path, "new.md", "# Changelog\n\n## [0.1.0]\n")

    result = cli_runner.invoke(app, ["diff", str(old), str(new)])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_run_dry_run_first_time(monkeypatch, tmp_path: Path):
    def fake_fetch(url, **kwargs):
        return FetchResult(url=url, status_code=200, text=OLD, error=None)

    monkeypatch.setattr(runner_module, "fetch_url", fake_fetch)

    result = cli_runner.invoke(
        app,
        ["run", "--dry-run", "--no-feed", "--state-dir", str(tmp_path), "--log-level", "WARNING"],
    )

    assert result.exit_code == 0
    assert "No news." in result.output
    assert (tmp_path / "CHANGELOG.md").read_text(encoding="utf-8") == OLD
