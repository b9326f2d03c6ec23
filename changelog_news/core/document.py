"""
Line model for changelog snapshots.

A changelog is handled as a flat list of lines; structure is recognized per
line by prefix (see ``classify_line``) and walked with a ``LineCursor``
rather than parsed into a tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .errors import MalformedInputError


UNRELEASED_MARKER = "## [Unreleased]"
TOP_LEVEL_PREFIX = "## "
SUBSECTION_PREFIX = "### "
BULLET_PREFIX = "- "


class LineKind(Enum):
    UNRELEASED = "unreleased"
    TOP_LEVEL = "top_level"
    SUBSECTION = "subsection"
    BLANK = "blank"
    BULLET = "bullet"
    CONTINUATION = "continuation"


def classify_line(line: str) -> LineKind:
    """Return the structural class of a line, checked in priority order."""
    if line == UNRELEASED_MARKER:
        return LineKind.UNRELEASED
    if line.startswith(TOP_LEVEL_PREFIX):
        return LineKind.TOP_LEVEL
    if line.startswith(SUBSECTION_PREFIX):
        return LineKind.SUBSECTION
    if not line:
        return LineKind.BLANK
    if line.startswith(BULLET_PREFIX):
        return LineKind.BULLET
    return LineKind.CONTINUATION


def is_structural_noise(line: str) -> bool:
    """Blank lines and sub-section headers, which are never compared."""
    return not line or line.startswith(SUBSECTION_PREFIX)


@dataclass(frozen=True)
class Document:
    """An immutable snapshot of a changelog as an ordered tuple of lines."""

    lines: tuple[str, ...]

    @classmethod
    def from_text(cls, text: str) -> "Document":
        return cls(lines=tuple(text.replace("\r\n", "\n").split("\n")))

    def cursor(self) -> "LineCursor":
        return LineCursor(self.lines)

    def __len__(self) -> int:
        return len(self.lines)


class LineCursor:
    """Forward-only cursor over a sequence of lines.

    ``peek`` and ``advance`` return None once the cursor is exhausted instead
    of raising, so callers decide whether running out is an error.
    """

    def __init__(self, lines: tuple[str, ...] | list[str]):
        self._lines = lines
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._lines)

    def peek(self) -> str | None:
        if self.exhausted:
            return None
        return self._lines[self._pos]

    def advance(self) -> str | None:
        line = self.peek()
        if line is not None:
            self._pos += 1
        return line

    def seek(self, target: str) -> None:
        """Move past the first line equal to ``target``.

        Raises:
            MalformedInputError: If the cursor runs out before finding it.
        """
        while True:
            line = self.advance()
            if line is None:
                raise MalformedInputError(f"Document has no line {target!r}")
            if line == target:
                return

    def skip_while(self, predicate: Callable[[str], bool]) -> int:
        """Advance over lines matching ``predicate``; return how many were skipped."""
        skipped = 0
        while True:
            line = self.peek()
            if line is None or not predicate(line):
                return skipped
            self._pos += 1
            skipped += 1
