"""
Incremental change extraction for keep-a-changelog style documents.

Given the previously seen changelog and a freshly fetched one, find the
lines added to the ``## [Unreleased]`` section. Both documents are walked
once with two cursors: the old cursor only moves when its current line
appears verbatim in the new document, so every new line that does not line
up with the old cursor is reported as added. Deletions and reordering are
never reported.
"""

from __future__ import annotations

from .document import (
    SUBSECTION_PREFIX,
    UNRELEASED_MARKER,
    Document,
    LineCursor,
    LineKind,
    classify_line,
    is_structural_noise,
)
from .errors import MalformedInputError
from .types import ChangeBlock


def extract_changes(old: Document, new: Document) -> list[ChangeBlock]:
    """Return the content added to the unreleased section of ``new``.

    Sub-section headers from ``new`` are kept only when at least one new
    entry follows them. Continuation lines (wrapped text without a bullet)
    are merged into the preceding bullet with their first character dropped,
    so ``"- Fixed a"`` followed by ``"  crash"`` becomes ``"- Fixed a crash"``.
    When the bullet itself already existed in ``old`` but gained a new
    continuation line, the whole merged bullet is reported.

    Args:
        old: The previously persisted changelog snapshot
        new: The freshly fetched changelog snapshot

    Returns:
        Ordered list of header and entry blocks, in order of appearance in new

    Raises:
        MalformedInputError: If either document lacks the unreleased marker,
            or a new continuation line has no bullet entry to attach to
    """
    old_cursor = old.cursor()
    old_cursor.seek(UNRELEASED_MARKER)
    old_cursor.skip_while(is_structural_noise)

    new_cursor = new.cursor()
    new_cursor.seek(UNRELEASED_MARKER)

    blocks: list[ChangeBlock] = []
    # Most recent bullet in new: its accumulated text, and its block if emitted.
    entry_text: str | None = None
    entry_block: ChangeBlock | None = None

    while True:
        line = new_cursor.advance()
        if line is None:
            break
        kind = classify_line(line)

        if kind in (LineKind.TOP_LEVEL, LineKind.UNRELEASED):
            break
        if kind is LineKind.BLANK:
            continue
        if kind is LineKind.SUBSECTION:
            _drop_empty_section(blocks)
            blocks.append(ChangeBlock.header(line[len(SUBSECTION_PREFIX):]))
            entry_text = None
            entry_block = None
            continue

        existing = line == old_cursor.peek()
        if existing:
            _advance_old(old_cursor)

        if kind is LineKind.BULLET:
            entry_text = line
            entry_block = None
            if not existing:
                entry_block = ChangeBlock.entry(line)
                blocks.append(entry_block)
            continue

        # Continuation of the previous bullet.
        if entry_text is None:
            if existing:
                continue
            raise MalformedInputError(
                f"Continuation line {line!r} has no preceding bullet entry"
            )
        wrapped = line[1:]
        entry_text += wrapped
        if existing:
            continue
        if entry_block is not None:
            entry_block.text += wrapped
        elif not existing:
            entry_block = ChangeBlock.entry(entry_text)
            blocks.append(entry_block)

    _drop_empty_section(blocks)
    return blocks


def _advance_old(cursor: LineCursor) -> None:
    cursor.advance()
    cursor.skip_while(is_structural_noise)


def _drop_empty_section(blocks: list[ChangeBlock]) -> None:
    """Remove a trailing header that collected no entries."""
    if blocks and blocks[-1].is_header:
        blocks.pop()
