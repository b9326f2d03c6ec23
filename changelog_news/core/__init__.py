"""
Core domain models and change detection.

This package contains the pure, I/O-free part of changelog-news: the line
model, the changelog and feed extractors, and the error types.
"""

from .changes import extract_changes
from .document import Document, LineCursor, LineKind, UNRELEASED_MARKER, classify_line
from .errors import (
    ChangelogNewsError,
    ConfigError,
    DeliveryError,
    FetchError,
    MalformedInputError,
)
from .feed import extract_new_entries, feed_blocks
from .types import ChangeBlock, ChannelResult, DeliveryReport

__all__ = [
    "ChangeBlock",
    "ChangelogNewsError",
    "ChannelResult",
    "ConfigError",
    "DeliveryError",
    "DeliveryReport",
    "Document",
    "FetchError",
    "LineCursor",
    "LineKind",
    "MalformedInputError",
    "UNRELEASED_MARKER",
    "classify_line",
    "extract_changes",
    "extract_new_entries",
    "feed_blocks",
]
