"""
Changelog News - posts what is new in a project's changelog and blog.

This package compares a freshly fetched keep-a-changelog style document
(and optionally a blog index page) with the copy saved by the previous run,
and sends one chat message listing the new unreleased entries and posts.

Main entry point is the CLI via `changelog-news run` command.

Example:
    $ changelog-news run --state-dir state/
"""

__all__ = [
    "__version__",
    "ChangeBlock",
    "Document",
    "MalformedInputError",
    "extract_changes",
    "extract_new_entries",
    "format_message",
]
__version__ = "0.1.0"

from .core.changes import extract_changes
from .core.document import Document
from .core.errors import MalformedInputError
from .core.feed import extract_new_entries
from .core.types import ChangeBlock
from .output.formatter import format_message
