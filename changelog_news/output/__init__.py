"""Message rendering helpers."""

from .formatter import FormatStyle, format_message, render_block, render_blocks, split_message

__all__ = [
    "FormatStyle",
    "format_message",
    "render_block",
    "render_blocks",
    "split_message",
]
