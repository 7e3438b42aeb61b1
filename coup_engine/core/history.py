"""
Replay over a finished (or running) match log.

Each LogEntry carries the complete state at the moment its line was written,
so stepping through a match is only index arithmetic over the entries.
"""

from typing import List, Optional, Dict, Any, Sequence, Union

from .game_state import LogEntry


class ReplayCursor:
    """Step forwards and backwards through log entries. Steps are clamped to the log."""

    def __init__(self, entries: Sequence[Union[LogEntry, Dict[str, Any]]]):
        self.entries: List[Dict[str, Any]] = [
            e.to_dict() if isinstance(e, LogEntry) else dict(e) for e in entries
        ]
        self.position = len(self.entries) - 1 if self.entries else 0

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def at_start(self) -> bool:
        return self.position == 0

    @property
    def at_end(self) -> bool:
        return not self.entries or self.position == len(self.entries) - 1

    def seek(self, step: int) -> Optional[Dict[str, Any]]:
        """Jump to a step (clamped) and return its entry."""
        if not self.entries:
            return None
        self.position = max(0, min(step, len(self.entries) - 1))
        return self.current()

    def current(self) -> Optional[Dict[str, Any]]:
        if not self.entries:
            return None
        return self.entries[self.position]

    def next(self) -> Optional[Dict[str, Any]]:
        return self.seek(self.position + 1)

    def prev(self) -> Optional[Dict[str, Any]]:
        return self.seek(self.position - 1)

    def snapshot(self) -> Optional[Dict[str, Any]]:
        entry = self.current()
        return entry["snapshot"] if entry else None

    def visible_log(self) -> List[str]:
        """Log lines known at the current step, never later ones."""
        if not self.entries:
            return []
        return [e["text"] for e in self.entries[:self.position + 1]]
