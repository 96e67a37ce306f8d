"""Sync report — what a run actually did."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class SyncReport:
    """Record of the work performed by one ``subrepo install`` run."""

    cloned: list[str] = field(default_factory=list)
    fetched: list[str] = field(default_factory=list)
    overridden: list[str] = field(default_factory=list)
    installed: list[str] = field(default_factory=list)
    built: list[str] = field(default_factory=list)
    linked: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    pruned: list[str] = field(default_factory=list)

    @property
    def did_work(self) -> bool:
        """True when anything was cloned, fetched, installed or built."""
        return bool(self.cloned or self.fetched or self.installed or self.built)

    def summary(self) -> str:
        lines = [
            f"Cloned:    {len(self.cloned)}",
            f"Fetched:   {len(self.fetched)}",
            f"Installed: {len(self.installed)}",
            f"Built:     {len(self.built)}",
            f"Linked:    {len(self.linked)}",
            f"Unchanged: {len(self.unchanged)}",
        ]
        if self.skipped:
            lines.append(f"Skipped:   {len(self.skipped)}")
        if self.pruned:
            lines.append(f"Pruned:    {len(self.pruned)}")
        return "\n".join(lines)
