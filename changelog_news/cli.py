"""
Command-line interface for changelog-news.

Uses Typer to provide a CLI with options for the most common configuration
settings. Supports loading .env files for the chat token.
"""

from __future__ import annotations

from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from .config import load_config
from .core.errors import ChangelogNewsError
from .input.blog_index import parse_feed_index
from .output.formatter import FormatStyle, format_message
from .runner import collect_news, run_watch

app = typer.Typer(add_completion=False)
console = Console()


@app.command()
def run(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    state_dir: Path | None = typer.Option(
        None, "--state-dir", "-s", help="Directory holding the previous snapshots."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the message instead of posting it."
    ),
    no_feed: bool = typer.Option(False, "--no-feed", help="Skip the blog index check."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    token: str | None = typer.Option(
        None,
        "--token",
        envvar="DISCORD_TOKEN",
        help="Chat bot token (or set DISCORD_TOKEN / .env).",
    ),
):
    """Check the changelog and blog for news and post them.

    Fetches the watched documents, compares them with the snapshots from
    the previous run, and sends one message to every configured channel
    if anything is new. Nothing is sent when there is no news.

    Args:
        config: Optional path to YAML config file
        state_dir: Snapshot directory override
        dry_run: Use the console backend instead of the chat service
        no_feed: Disable the blog index check
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Enable/disable file logging
        token: Override the chat bot token
    """
    # Load environment variables from .env if available
    load_dotenv()

    cfg = load_config(str(config) if config else None)

    # Override with CLI options
    if state_dir is not None:
        cfg.state.dir = str(state_dir)
    if dry_run:
        cfg.notify.backend = "console"
    if no_feed:
        cfg.feed.enabled = False
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file
    if token:
        cfg.notify.token = token

    try:
        result = run_watch(cfg, console=console)
    except ChangelogNewsError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    if result.report is None:
        console.print("No news.")
        return
    console.print(
        f"Delivered to {len(result.report.succeeded)} channel(s), "
        f"{len(result.report.failed)} failed."
    )


@app.command()
def diff(
    old: Path = typer.Argument(..., exists=True, readable=True, help="Previous changelog."),
    new: Path = typer.Argument(..., exists=True, readable=True, help="Current changelog."),
    feed_old: Path | None = typer.Option(None, "--feed-old", exists=True, readable=True),
    feed_new: Path | None = typer.Option(None, "--feed-new", exists=True, readable=True),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
):
    """Print the message two local snapshots would produce.

    Nothing is fetched, persisted or sent.
    """
    cfg = load_config(str(config) if config else None)
    style = FormatStyle.from_config(cfg.format)

    old_entries = parse_feed_index(feed_old.read_text(encoding="utf-8")) if feed_old else None
    new_entries = parse_feed_index(feed_new.read_text(encoding="utf-8")) if feed_new else None

    try:
        result = collect_news(
            old.read_text(encoding="utf-8"),
            new.read_text(encoding="utf-8"),
            old_entries,
            new_entries,
            style.feed_section,
        )
    except ChangelogNewsError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    if not result.has_news:
        console.print("No news.")
        return
    console.print(
        format_message(style.title, result.blocks, style.header_template),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


if __name__ == "__main__":
    app()
