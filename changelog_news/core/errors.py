"""Error types raised across the changelog-news pipeline."""

from __future__ import annotations


class ChangelogNewsError(Exception):
    """Base class for all errors raised by changelog-news."""


class MalformedInputError(ChangelogNewsError, ValueError):
    """A document does not follow the expected changelog or feed grammar.

    Raised when the unreleased marker is missing, when a continuation line
    has no bullet entry to attach to, or when a feed baseline is empty.
    """


class FetchError(ChangelogNewsError):
    """A remote document could not be downloaded."""

    def __init__(self, url: str, reason: str | None):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason or 'unknown error'}")


class DeliveryError(ChangelogNewsError):
    """The notifier could not enumerate any delivery target."""


class ConfigError(ChangelogNewsError):
    """Configuration is incomplete or names an unsupported backend."""
