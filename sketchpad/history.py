"""Snapshot history with append and overwrite commits."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Generic, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

log = logging.getLogger("sketchpad.history")


class CommitMode(str, Enum):
    APPEND = "append"
    OVERWRITE = "overwrite"


class History(Generic[T]):
    """Ordered log of full-state snapshots plus a cursor.

    ``append`` discards any redo branch past the cursor, pushes the new state
    and advances. ``overwrite`` replaces the state under the cursor so a drag
    that fires many moves still produces a single undo step.
    """

    def __init__(self, initial: Sequence[T] = (), limit: Optional[int] = None) -> None:
        if limit is not None and limit < 2:
            raise ValueError("History limit must keep at least two snapshots")
        self._snapshots: List[Tuple[T, ...]] = [tuple(initial)]
        self._index = 0
        self._limit = limit

    @property
    def index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._snapshots)

    def current(self) -> Tuple[T, ...]:
        return self._snapshots[self._index]

    def commit(self, state: Sequence[T], mode: CommitMode = CommitMode.APPEND) -> None:
        snapshot = tuple(state)
        if CommitMode(mode) is CommitMode.OVERWRITE:
            self._snapshots[self._index] = snapshot
            return
        del self._snapshots[self._index + 1:]
        self._snapshots.append(snapshot)
        self._index += 1
        # Cap history to the configured size
        if self._limit is not None and len(self._snapshots) > self._limit:
            dropped = len(self._snapshots) - self._limit
            del self._snapshots[:dropped]
            self._index -= dropped
        log.debug("History append -> index %d of %d", self._index, len(self._snapshots))

    def undo(self) -> bool:
        if self._index <= 0:
            return False
        self._index -= 1
        return True

    def redo(self) -> bool:
        if self._index >= len(self._snapshots) - 1:
            return False
        self._index += 1
        return True

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1


__all__ = ["CommitMode", "History"]
