"""Head tracking — the last commit seen for each package unit.

A package's head is the most recent commit touching its own subtree, so
unrelated changes elsewhere in a sub-repo don't force a reinstall or rebuild.
Every change is written through to disk immediately: a crash mid-run keeps
the units that already finished marked as done.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Mapping

from subrepo.logging import get_logger

logger = get_logger("heads")


class HeadStore:
    """In-memory head store. Subclasses add persistence via ``flush``."""

    def __init__(self, heads: Mapping[str, str] | None = None):
        self._heads: dict[str, str] = dict(heads or {})

    @property
    def heads(self) -> dict[str, str]:
        return dict(self._heads)

    def load(self) -> None:
        """Read persisted state. Nothing to read for the in-memory store."""

    def is_changed(self, key: str, head: str) -> bool:
        """True when ``head`` differs from the recorded one (or none is recorded)."""
        return self._heads.get(key) != head

    def record(self, key: str, head: str) -> None:
        if self._heads.get(key) == head:
            return
        self._heads[key] = head
        self.flush()

    def prune(self, live_keys: Iterable[str]) -> list[str]:
        """Drop every key not in ``live_keys`` and return the dropped keys."""
        live = set(live_keys)
        removed = [key for key in self._heads if key not in live]
        for key in removed:
            logger.debug("Dropping head for %s", key)
            del self._heads[key]
        if removed:
            self.flush()
        return removed

    def flush(self) -> None:
        """Persist state. Nothing to write for the in-memory store."""


class MemoryHeadStore(HeadStore):
    """Head store that never touches disk. Counts flushes for inspection."""

    def __init__(self, heads: Mapping[str, str] | None = None):
        super().__init__(heads)
        self.flush_count = 0

    def flush(self) -> None:
        self.flush_count += 1


class JsonHeadStore(HeadStore):
    """Head store backed by a JSON file: ``{"heads": {key: commit}}``."""

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)

    def load(self) -> None:
        """Read the metadata file. Missing or malformed files mean no heads."""
        self._heads = {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.debug("Error reading %s: %s", self.path, e)
            return

        heads = data.get("heads") if isinstance(data, dict) else None
        if not isinstance(heads, dict):
            return
        self._heads = {
            str(key): value for key, value in heads.items() if isinstance(value, str)
        }

    def flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump({"heads": self._heads}, f, indent=2)
