"""Snapshot stack backing undo."""

import copy
import logging
from typing import Optional

from tennis_tracker.core.schema import MatchState

log = logging.getLogger(__name__)


class HistoryManager:
    """Stack of independent deep copies of the match state."""

    def __init__(self):
        self._stack: list[MatchState] = []

    def push(self, state: MatchState) -> None:
        self._stack.append(copy.deepcopy(state))
        log.debug(f"History push (depth={len(self._stack)})")

    def pop(self) -> Optional[MatchState]:
        """Most recent snapshot, or None when the history is empty."""
        if not self._stack:
            return None
        return self._stack.pop()

    def clear(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)
