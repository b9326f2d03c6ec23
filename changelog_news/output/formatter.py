"""
Plain-text rendering of change blocks into a chat message.

Rendering is parameterized by a FormatStyle so the same pipeline can post
differently styled messages (title, header markup) without duplicating
control flow.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..config import FormatConfig
from ..core.types import ChangeBlock


DEFAULT_HEADER_TEMPLATE = "## {label}"


@dataclass
class FormatStyle:
    """How a message is titled and how section headers are rendered.

    Attributes:
        title: First line of the message
        header_template: str.format template with a {label} field
        feed_section: Label of the synthesized new-posts section
        max_message_chars: Length limit for a single chat message
    """
    title: str = "# Veloren News!"
    header_template: str = DEFAULT_HEADER_TEMPLATE
    feed_section: str = "Blog post(s)"
    max_message_chars: int = 2000

    @classmethod
    def from_config(cls, cfg: FormatConfig) -> "FormatStyle":
        return cls(
            title=cfg.title,
            header_template=cfg.header_template,
            feed_section=cfg.feed_section,
            max_message_chars=cfg.max_message_chars,
        )


def render_block(block: ChangeBlock, header_template: str = DEFAULT_HEADER_TEMPLATE) -> str:
    if block.is_header:
        return header_template.format(label=block.text)
    return block.text


def render_blocks(
    blocks: Sequence[ChangeBlock], header_template: str = DEFAULT_HEADER_TEMPLATE
) -> list[str]:
    return [render_block(block, header_template) for block in blocks]


def format_message(
    title: str,
    blocks: Sequence[ChangeBlock],
    header_template: str = DEFAULT_HEADER_TEMPLATE,
) -> str:
    """Render the title, a blank line, then one line per block.

    Returns just the title when there are no blocks.
    """
    if not blocks:
        return title
    body = "\n".join(render_blocks(blocks, header_template))
    return f"{title}\n\n{body}"


def split_message(message: str, limit: int) -> list[str]:
    """Split a message into chunks of at most ``limit`` characters.

    Splits on line boundaries where possible; a single line longer than the
    limit is cut into limit-sized pieces.
    """
    if limit <= 0:
        raise ValueError("limit must be positive")
    if len(message) <= limit:
        return [message]

    chunks: list[str] = []
    current = ""
    for line in message.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks
