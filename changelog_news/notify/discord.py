"""
Discord delivery over the REST API.

The bot posts into every text channel whose name matches one of the
configured names, in every server (guild) it has joined. The httpx client
is handed to the notifier at construction and closed by ``close()``, which
ends the bot's session once all channels have been tried.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from ..config import NotifyConfig
from ..core.errors import DeliveryError
from ..core.types import ChannelResult, DeliveryReport
from ..output.formatter import split_message
from ..utils.logging import log_event, log_warning
from .base import Notifier


RATE_LIMIT_ATTEMPTS = 3
GUILD_PAGE_SIZE = 200


class DiscordNotifier(Notifier):
    """Posts messages to named channels through the Discord REST API."""

    def __init__(
        self,
        client: httpx.Client,
        channels: list[str],
        max_message_chars: int = 2000,
        logger: logging.Logger | None = None,
    ):
        self._client = client
        self._channels = set(channels)
        self._max_message_chars = max_message_chars
        self._logger = logger

    @classmethod
    def connect(
        cls,
        cfg: NotifyConfig,
        token: str,
        max_message_chars: int = 2000,
        logger: logging.Logger | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> "DiscordNotifier":
        client = httpx.Client(
            base_url=cfg.api_base_url.rstrip("/"),
            headers={"Authorization": f"Bot {token}"},
            timeout=cfg.timeout_seconds,
            transport=transport,
        )
        return cls(client, cfg.channels, max_message_chars=max_message_chars, logger=logger)

    def close(self) -> None:
        self._client.close()

    def deliver(self, message: str) -> DeliveryReport:
        try:
            guilds = self._list_guilds()
        except (httpx.HTTPError, ValueError) as exc:
            raise DeliveryError(f"Unable to list servers: {exc}") from exc

        chunks = split_message(message, self._max_message_chars)
        report = DeliveryReport()
        for guild in guilds:
            guild_id = str(guild["id"])
            try:
                channels = self._get_json(f"/guilds/{guild_id}/channels")
            except (httpx.HTTPError, ValueError) as exc:
                log_warning(
                    self._logger,
                    f"Cannot list channels of server {guild_id}",
                    event="delivery_failed",
                    space_id=guild_id,
                    error=str(exc),
                )
                continue
            for channel in channels:
                if channel.get("name") not in self._channels:
                    continue
                result = self._send(guild_id, channel, chunks)
                report.results.append(result)
                if not result.ok:
                    log_warning(
                        self._logger,
                        f"Channel {result.channel_id} in server {guild_id} cannot be written to",
                        event="delivery_failed",
                        space_id=guild_id,
                        channel_id=result.channel_id,
                        error=result.error,
                    )

        log_event(
            self._logger,
            "Delivery finished",
            event="delivery_done",
            delivered=len(report.succeeded),
            failed=len(report.failed),
        )
        return report

    def _send(self, guild_id: str, channel: dict[str, Any], chunks: list[str]) -> ChannelResult:
        result = ChannelResult(
            channel_id=str(channel["id"]),
            channel_name=channel.get("name", ""),
            space_id=guild_id,
        )
        for chunk in chunks:
            try:
                self._request("POST", f"/channels/{result.channel_id}/messages", json={"content": chunk})
            except httpx.HTTPError as exc:
                result.ok = False
                result.error = f"{type(exc).__name__}: {exc}"
                break
        return result

    def _list_guilds(self) -> list[dict[str, Any]]:
        """Return every joined server, following the API's pagination."""
        guilds: list[dict[str, Any]] = []
        params: dict[str, Any] = {"limit": GUILD_PAGE_SIZE}
        while True:
            page = self._get_json("/users/@me/guilds", params=params)
            guilds.extend(page)
            if len(page) < GUILD_PAGE_SIZE:
                return guilds
            params = {"limit": GUILD_PAGE_SIZE, "after": str(page[-1]["id"])}

    def _get_json(self, path: str, **kwargs: Any) -> Any:
        return self._request("GET", path, **kwargs).json()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request, waiting out rate limits, and raise on HTTP errors."""
        for attempt in range(RATE_LIMIT_ATTEMPTS):
            resp = self._client.request(method, path, **kwargs)
            if resp.status_code != 429 or attempt == RATE_LIMIT_ATTEMPTS - 1:
                break
            time.sleep(_retry_after(resp))
        resp.raise_for_status()
        return resp


def _retry_after(resp: httpx.Response) -> float:
    try:
        body = resp.json()
    except ValueError:
        return 1.0
    if not isinstance(body, dict):
        return 1.0
    try:
        return float(body.get("retry_after", 1.0))
    except (TypeError, ValueError):
        return 1.0
