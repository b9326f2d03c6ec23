"""
Persistence of the previous run's documents.

Each watched document is kept as a plain file in the state directory and
read back as the "old" side of the next comparison.
"""

from __future__ import annotations

from pathlib import Path


class SnapshotStore:
    """Reads and writes named snapshot files in a state directory.

    Attributes:
        state_dir: Directory where snapshot files are stored
    """

    def __init__(self, state_dir: Path):
        self.state_dir = state_dir

    def path(self, name: str) -> Path:
        return self.state_dir / name

    def read(self, name: str) -> str | None:
        """Return the snapshot text, or None if no snapshot exists yet."""
        path = self.path(name)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, name: str, text: str) -> Path:
        """Replace the snapshot with ``text``, creating the directory if needed."""
        self.state_dir.mkdir(parents=True, exist_ok=True)
        path = self.path(name)
        tmp_path = path.with_name(f"{path.name}.tmp")
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)
        return path
