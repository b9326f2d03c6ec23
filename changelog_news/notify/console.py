"""Dry-run delivery that prints the message instead of posting it."""

from __future__ import annotations

from rich.console import Console

from ..core.types import ChannelResult, DeliveryReport
from .base import Notifier


class ConsoleNotifier(Notifier):
    """Prints the message to a rich console as a single pseudo-channel."""

    def __init__(self, console: Console | None = None):
        self._console = console or Console()

    def deliver(self, message: str) -> DeliveryReport:
        self._console.print(message, markup=False, highlight=False, soft_wrap=True)
        return DeliveryReport(
            results=[ChannelResult(channel_id="console", channel_name="console")]
        )
