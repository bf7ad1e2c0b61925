from __future__ import annotations

"""Undo/redo snapshot management for label designs.

This service is UI-agnostic and performs pure in-memory history tracking of
whole :class:`LabelDesign` states.

Design principles
-----------------
- No UI imports and no I/O (filesystem/console).
- Snapshots are deep clones, never aliased with the live design. They are
  cloned on the way in and on the way out.
- A single log with a cursor. Pushing a new snapshot truncates every entry
  after the cursor (standard undo/redo behavior).
- Memory usage controlled by a max_history ring-like policy (trim oldest).

Notes
-----
The host applies a design returned by :meth:`UndoService.undo` or
:meth:`UndoService.redo` and then usually reacts to the change by calling
:meth:`UndoService.push_snapshot`, exactly as it does after an edit. A one-shot
suppression latch, set by ``undo``/``redo`` and consumed by the next push,
keeps that reaction from recording the restored state as a new entry.
"""

import logging
from typing import List, Optional

from label_editor.core.models import LabelDesign

__all__ = ["UndoService"]

logger = logging.getLogger(__name__)


class UndoService:
    """Manage a bounded undo/redo history of :class:`LabelDesign` snapshots.

    Parameters
    ----------
    max_history : int, default=50
        Maximum number of snapshots to keep. Oldest entries are discarded
        when the capacity is exceeded. Must be >= 1; if passed lower, it will be
        coerced to 1.

    Examples
    --------
    >>> svc = UndoService(max_history=10)
    >>> svc.reset(design_0)
    >>> svc.push_snapshot(design_1)
    >>> previous = svc.undo()   # equal to design_0
    >>> svc.push_snapshot(previous)  # suppressed, history unchanged
    >>> svc.redo() == design_1
    True
    """

    def __init__(self, max_history: int = 50) -> None:
        self._max_history: int = max(1, int(max_history))
        self._entries: List[LabelDesign] = []
        self._index: int = -1
        self._suppress_next_push: bool = False

    # --------------------------------------------------------------------- API

    @property
    def max_history(self) -> int:
        return self._max_history

    @property
    def index(self) -> int:
        """Cursor into the log; -1 while the log is empty."""
        return self._index

    def push_snapshot(self, design: LabelDesign) -> None:
        """Record *design* as the newest history entry.

        Entries after the cursor are discarded first. If the log exceeds
        ``max_history``, the oldest entries are dropped.

        When the suppression latch is set (right after an undo or redo), the
        latch is cleared and nothing is recorded.
        """
        if self._suppress_next_push:
            self._suppress_next_push = False
            logger.debug("History push suppressed after undo/redo (index=%d)", self._index)
            return

        # New user action invalidates redo history
        del self._entries[self._index + 1:]
        self._entries.append(design.clone())
        # Enforce capacity
        overflow = len(self._entries) - self._max_history
        if overflow > 0:
            del self._entries[0:overflow]
        self._index = len(self._entries) - 1
        logger.debug("History push: entries=%d index=%d", len(self._entries), self._index)

    def undo(self) -> Optional[LabelDesign]:
        """Step back one entry and return a clone of it.

        Returns
        -------
        Optional[LabelDesign]
            The previous design, or None if already at the oldest entry.
        """
        if self._index <= 0:
            return None
        self._index -= 1
        self._suppress_next_push = True
        logger.debug("History undo: index=%d", self._index)
        return self._entries[self._index].clone()

    def redo(self) -> Optional[LabelDesign]:
        """Step forward one entry and return a clone of it.

        Returns
        -------
        Optional[LabelDesign]
            The next design, or None if already at the newest entry.
        """
        if self._index >= len(self._entries) - 1:
            return None
        self._index += 1
        self._suppress_next_push = True
        logger.debug("History redo: index=%d", self._index)
        return self._entries[self._index].clone()

    def reset(self, design: LabelDesign) -> None:
        """Replace the whole log with *design* as its single entry."""
        self._entries = [design.clone()]
        self._index = 0
        self._suppress_next_push = False

    def can_undo(self) -> bool:
        """Return True if an undo operation is currently possible."""
        return self._index > 0

    def can_redo(self) -> bool:
        """Return True if a redo operation is currently possible."""
        return self._index < len(self._entries) - 1

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()
        self._index = -1
        self._suppress_next_push = False

    def __len__(self) -> int:
        return len(self._entries)
