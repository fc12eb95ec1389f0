"""Undo/Redo history for the builder document."""

from typing import Iterable

from core import get_logger
from .models import ComponentNode, HistoryEntry

logger = get_logger(__name__)


class HistoryManager:
    """
    Bounded linear history of full-forest snapshots.

    States:
    - empty: no entries, cursor == -1
    - mid-stream: cursor < len - 1, redo available
    - at-tail: cursor == len - 1

    The first entry (page load) is never undone past. Pushing while
    mid-stream truncates the redo branch; pushing past ``max_size``
    evicts the oldest entry.
    """

    def __init__(self, max_size: int = 50) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")

        self.max_size = max_size
        self._entries: list[HistoryEntry] = []
        self._cursor = -1

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def current(self) -> HistoryEntry | None:
        """Entry under the cursor."""
        return self._entries[self._cursor] if self._cursor >= 0 else None

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def push(self, components: Iterable[ComponentNode], selected_id: str | None) -> HistoryEntry:
        """
        Snapshot the forest and selection as the newest entry.

        Args:
            components: Root nodes (deep-copied here)
            selected_id: Selection at snapshot time

        Returns:
            The new entry
        """
        entry = HistoryEntry(
            components=tuple(node.model_copy(deep=True) for node in components),
            selected_id=selected_id,
        )

        # Drop the redo branch
        if self._cursor < len(self._entries) - 1:
            del self._entries[self._cursor + 1 :]

        self._entries.append(entry)

        if len(self._entries) > self.max_size:
            # Window slides: the cursor index already names the new tail
            self._entries.pop(0)
            logger.debug("history_evicted", size=len(self._entries))
        else:
            self._cursor += 1

        return entry

    def undo(self) -> HistoryEntry | None:
        """Step back; returns the entry to restore, or None at the earliest entry."""
        if not self.can_undo():
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def redo(self) -> HistoryEntry | None:
        """Step forward; returns the entry to restore, or None at the latest entry."""
        if not self.can_redo():
            return None
        self._cursor += 1
        return self._entries[self._cursor]

    def clear(self) -> None:
        self._entries.clear()
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._entries)
