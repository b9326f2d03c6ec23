"""Notifier factory and registry for swappable delivery backends."""

from __future__ import annotations

import logging
from typing import Callable

import httpx
from rich.console import Console

from ..config import NotifyConfig
from ..core.errors import ConfigError
from .base import Notifier
from .console import ConsoleNotifier
from .discord import DiscordNotifier


NotifierBuilder = Callable[..., Notifier]


def _build_discord(
    cfg: NotifyConfig,
    token: str | None,
    max_message_chars: int,
    logger: logging.Logger | None,
    console: Console | None,
    transport: httpx.BaseTransport | None,
) -> Notifier:
    if not token:
        raise ConfigError(
            f"No Discord token: set notify.token, ${cfg.token_env} or the {cfg.token_file} file"
        )
    return DiscordNotifier.connect(
        cfg, token, max_message_chars=max_message_chars, logger=logger, transport=transport
    )


def _build_console(
    cfg: NotifyConfig,
    token: str | None,
    max_message_chars: int,
    logger: logging.Logger | None,
    console: Console | None,
    transport: httpx.BaseTransport | None,
) -> Notifier:
    return ConsoleNotifier(console)


_NOTIFIER_REGISTRY: dict[str, NotifierBuilder] = {
    "discord": _build_discord,
    "console": _build_console,
}

_TOKEN_BACKENDS = {"discord"}


def available_notifiers() -> list[str]:
    """Return the set of registered backend names."""
    return sorted(_NOTIFIER_REGISTRY.keys())


def requires_token(backend: str) -> bool:
    return backend.lower().strip() in _TOKEN_BACKENDS


def create_notifier(
    cfg: NotifyConfig,
    token: str | None,
    max_message_chars: int = 2000,
    logger: logging.Logger | None = None,
    console: Console | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Notifier:
    """Build a notifier instance from runtime config."""
    name = cfg.backend.lower().strip()
    builder = _NOTIFIER_REGISTRY.get(name)
    if builder is None:
        supported = ", ".join(available_notifiers())
        raise ConfigError(f"Unsupported notifier: {cfg.backend}. Supported: {supported}")
    return builder(cfg, token, max_message_chars, logger, console, transport)
