"""
Undo/redo history for artwork placement.

Keeps a bounded, linear list of committed transforms with a cursor.
Recording a new transform discards any redo branch after the cursor.
"""

import logging
from collections.abc import Callable

from printplace.api.models import ArtworkTransform, HistoryEntry

logger = logging.getLogger(__name__)

HistoryListener = Callable[[bool, bool], None]


class HistoryManager:
    """Manages undo/redo history with transform snapshots."""

    def __init__(self, max_history: int = 20) -> None:
        """
        Initialize the history manager.

        Args:
            max_history: Maximum number of entries to keep (oldest dropped first).
        """
        if max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {max_history}")
        self.max_history = max_history
        self.entries: list[HistoryEntry] = []
        self.step = -1  # Cursor into entries (-1 means empty)
        self._listeners: list[HistoryListener] = []

    def record(self, transform: ArtworkTransform) -> None:
        """
        Append a committed transform.

        Args:
            transform: Transform produced by one user action.
        """
        # Drop the redo branch
        del self.entries[self.step + 1:]
        self.entries.append(HistoryEntry(transform=transform))

        # Trim to capacity; the cursor stays on the newest entry
        overflow = len(self.entries) - self.max_history
        if overflow > 0:
            del self.entries[:overflow]
        self.step = len(self.entries) - 1

        self._notify_listeners()
        logger.debug(f"History recorded (step: {self.step}, total: {len(self.entries)})")

    def undo(self) -> ArtworkTransform | None:
        """
        Move back one entry.

        Returns:
            Transform at the new cursor, or None if already at the oldest entry.
        """
        if not self.can_undo():
            return None
        self.step -= 1
        self._notify_listeners()
        return self.entries[self.step].transform

    def redo(self) -> ArtworkTransform | None:
        """
        Move forward one entry.

        Returns:
            Transform at the new cursor, or None if already at the newest entry.
        """
        if not self.can_redo():
            return None
        self.step += 1
        self._notify_listeners()
        return self.entries[self.step].transform

    def can_undo(self) -> bool:
        return self.step > 0

    def can_redo(self) -> bool:
        return self.step < len(self.entries) - 1

    @property
    def current(self) -> ArtworkTransform | None:
        """Get the transform at the cursor."""
        if 0 <= self.step < len(self.entries):
            return self.entries[self.step].transform
        return None

    def __len__(self) -> int:
        return len(self.entries)

    def clear(self) -> None:
        """Clear all history."""
        self.entries = []
        self.step = -1
        self._notify_listeners()

    def add_listener(self, callback: HistoryListener) -> None:
        """
        Add a listener notified when history changes.

        Args:
            callback: Called with (can_undo, can_redo).
        """
        self._listeners.append(callback)

    def remove_listener(self, callback: HistoryListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify_listeners(self) -> None:
        for callback in self._listeners:
            callback(self.can_undo(), self.can_redo())
