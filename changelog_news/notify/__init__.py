"""Message delivery backends."""

from .base import Notifier
from .console import ConsoleNotifier
from .discord import DiscordNotifier
from .factory import available_notifiers, create_notifier, requires_token

__all__ = [
    "ConsoleNotifier",
    "DiscordNotifier",
    "Notifier",
    "available_notifiers",
    "create_notifier",
    "requires_token",
]
