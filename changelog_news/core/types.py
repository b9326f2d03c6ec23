"""
Core data types for changelog-news.

This module defines the structures passed between pipeline stages:
- ChangeBlock: One unit of new changelog content (section header or entry)
- ChannelResult: Outcome of delivering a message to one chat channel
- DeliveryReport: Per-channel outcomes of a single delivery
"""

from __future__ import annotations

from dataclasses import dataclass, field


HEADER = "header"
ENTRY = "entry"


@dataclass
class ChangeBlock:
    """A fragment of new content found in the unreleased section.

    Attributes:
        kind: Either "header" (a sub-section label) or "entry" (a bullet item)
        text: The section label for headers, or the full bullet text including
              the leading "- " and any merged continuation text for entries
    """
    kind: str
    text: str

    @classmethod
    def header(cls, label: str) -> "ChangeBlock":
        return cls(kind=HEADER, text=label)

    @classmethod
    def entry(cls, text: str) -> "ChangeBlock":
        return cls(kind=ENTRY, text=text)

    @property
    def is_header(self) -> bool:
        return self.kind == HEADER

    @property
    def is_entry(self) -> bool:
        return self.kind == ENTRY


@dataclass
class ChannelResult:
    """Outcome of sending a message to one channel.

    Attributes:
        channel_id: Identifier of the channel on the chat service
        channel_name: Human-readable channel name
        space_id: Identifier of the chat space (guild) that owns the channel
        ok: Whether every chunk of the message was accepted
        error: Error description when ok is False
    """
    channel_id: str
    channel_name: str
    space_id: str | None = None
    ok: bool = True
    error: str | None = None


@dataclass
class DeliveryReport:
    """Collected per-channel results of one delivery."""
    results: list[ChannelResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[ChannelResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[ChannelResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed
