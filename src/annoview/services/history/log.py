"""Ordered action log with a cursor into it."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple

from .actions import Action, HistoryEntry

logger = logging.getLogger(__name__)


@dataclass
class ActionLog:
    """Linear history: appending below the tip discards the redo branch.

    ``cursor`` is the index of the last applied entry, ``-1`` meaning the empty
    workspace.
    """

    clock: Callable[[], int] = time.time_ns
    _entries: List[HistoryEntry] = field(default_factory=list)
    _cursor: int = -1

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def active_entry(self) -> Optional[HistoryEntry]:
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]

    def applied(self) -> Tuple[HistoryEntry, ...]:
        """Entries up to and including the cursor."""
        return tuple(self._entries[: self._cursor + 1])

    def labels(self) -> List[str]:
        return [entry.label for entry in self._entries]

    def can_undo(self) -> bool:
        return self._cursor >= 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def next_timestamp(self) -> int:
        stamp = int(self.clock())
        if self._entries:
            last = max(entry.timestamp for entry in self._entries)
            if stamp <= last:
                stamp = last + 1
        return stamp

    def record(self, action: Action, label: str) -> HistoryEntry:
        """Stamp ``action`` and append it."""
        entry = HistoryEntry(action=action, label=label, timestamp=self.next_timestamp())
        self.append(entry)
        return entry

    def append(self, entry: HistoryEntry) -> None:
        if self._cursor < len(self._entries) - 1:
            dropped = len(self._entries) - (self._cursor + 1)
            del self._entries[self._cursor + 1 :]
            logger.debug(f"Discarded {dropped} redo entries before appending")
        self._entries.append(entry)
        self._cursor = len(self._entries) - 1

    def move_to(self, index: int) -> bool:
        """Move the cursor. Out of range indices are ignored."""
        if index < -1 or index > len(self._entries) - 1:
            logger.debug(
                f"Ignoring move to {index}, history holds {len(self._entries)} entries"
            )
            return False
        self._cursor = index
        return True

    def reorder(self, new_order: Iterable[HistoryEntry]) -> None:
        """Replace the entries and relocate the cursor by timestamp.

        The cursor follows the previously active entry. If that entry is gone, or
        nothing was active, the cursor falls back to the empty state.
        """
        active = self.active_entry
        self._entries = list(new_order)
        self._cursor = -1
        if active is None:
            return
        for index, entry in enumerate(self._entries):
            if entry.timestamp == active.timestamp:
                self._cursor = index
                return
        logger.info("Active history entry removed by reorder, cursor reset")

    def clear(self) -> None:
        self._entries.clear()
        self._cursor = -1
