"""Detection of new entries in a newest-first feed index."""

from __future__ import annotations

from typing import Sequence

from .document import BULLET_PREFIX
from .errors import MalformedInputError
from .types import ChangeBlock


def extract_new_entries(old_entries: Sequence[str], new_entries: Sequence[str]) -> list[str]:
    """Return the entries of ``new_entries`` published since ``old_entries``.

    The newest previously seen entry (``old_entries[0]``) is the boundary:
    everything in ``new_entries`` before it is new. If the boundary is no
    longer listed, every entry in ``new_entries`` is returned.

    Raises:
        MalformedInputError: If ``old_entries`` is empty.
    """
    if not old_entries:
        raise MalformedInputError("Feed baseline is empty; no boundary entry to compare against")
    sentinel = old_entries[0]
    fresh: list[str] = []
    for entry in new_entries:
        if entry == sentinel:
            break
        fresh.append(entry)
    return fresh


def feed_blocks(entries: Sequence[str], section: str) -> list[ChangeBlock]:
    """Wrap new feed entries as bullet blocks under a ``section`` header."""
    if not entries:
        return []
    blocks = [ChangeBlock.header(section)]
    blocks.extend(ChangeBlock.entry(BULLET_PREFIX + entry) for entry in entries)
    return blocks
