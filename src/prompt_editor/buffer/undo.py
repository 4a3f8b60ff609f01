"""Bounded undo/redo history with debounced batching of typed characters."""

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Callable, Generic, List, Optional, TypeVar

from prompt_editor.config import DEFAULT_HISTORY_LIMIT, DEFAULT_UNDO_DEBOUNCE_MS
from prompt_editor.runtime import telemetry

from .document import Buffer
from .state import Cursor

S = TypeVar("S")


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """State captured before a mutation."""

    buffer: Buffer
    cursor: Cursor


@dataclass(slots=True)
class PendingBatch(Generic[S]):
    """Snapshot taken before the first character of a coalesced run."""

    snapshot: S
    deadline: float
    generation: int


def is_batchable_insert(text: str, debounce_ms: int) -> bool:
    """Single non-newline characters coalesce while batching is enabled."""

    return debounce_ms > 0 and len(text) == 1 and text != "\n"


class HistoryEngine(Generic[S]):
    """Undo/redo stacks plus at most one pending insert batch.

    The commit timer of a pending batch is a deadline rather than a thread:
    ``process_timeouts`` fires it once the deadline has passed, and every
    other entry point applies an already-expired deadline first, so the
    outcome never depends on how often a host polls.
    """

    def __init__(
        self,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        undo_debounce_ms: int = DEFAULT_UNDO_DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
        logger_name: str | None = "prompt_editor.history",
    ) -> None:
        if history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        self.history_limit = history_limit
        self.undo_debounce_ms = max(0, undo_debounce_ms)
        self._clock = clock
        self._logger_name = logger_name
        self._undo: List[S] = []
        self._redo: List[S] = []
        self._pending: Optional[PendingBatch[S]] = None
        self._generation = 0
        self._closed = False

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    @property
    def has_pending_batch(self) -> bool:
        self._expire_pending()
        return self._pending is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def can_undo(self) -> bool:
        return self.has_pending_batch or bool(self._undo)

    def can_redo(self) -> bool:
        return not self.has_pending_batch and bool(self._redo)

    def record(self, snapshot: S) -> None:
        """Checkpoint ``snapshot`` as a new undo step and drop the redo trail."""

        self._append_undo(snapshot)
        self._redo.clear()

    def begin_or_refresh_batch(self, snapshot: S) -> None:
        """Open a batch at ``snapshot`` (first char) or extend the open one."""

        self._expire_pending()
        if self._closed or self.undo_debounce_ms <= 0:
            return
        self._generation += 1
        deadline = self._clock() + self.undo_debounce_ms / 1000.0
        if self._pending is None:
            self._pending = PendingBatch(snapshot, deadline, self._generation)
            self._redo.clear()
            return
        self._pending.deadline = deadline
        self._pending.generation = self._generation

    def flush(self) -> None:
        """Commit a pending batch right away."""

        self._expire_pending()
        self._commit_pending()

    def process_timeouts(self) -> bool:
        """Fire an expired batch timer; returns whether a batch was committed."""

        if self._pending is None or self._closed:
            return False
        return self._expire_pending()

    def undo(self, current: S) -> Optional[S]:
        """Return the state to restore, or ``None`` when there is nothing to undo."""

        self._expire_pending()
        if self._pending is not None:
            target = self._pending.snapshot
            self._pending = None
            self._redo.append(current)
            self._event("history.undo", source="batch")
            return target

        if not self._undo:
            return None
        target = self._undo.pop()
        self._redo.append(current)
        self._event("history.undo", source="stack")
        return target

    def redo(self, current: S) -> Optional[S]:
        self._expire_pending()
        if self._pending is not None or not self._redo:
            return None
        target = self._redo.pop()
        self._append_undo(current)
        self._event("history.redo")
        return target

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
        self._pending = None

    def close(self) -> None:
        """Tear down: cancel the timer and drop any uncommitted batch."""

        self._pending = None
        self._closed = True

    def _expire_pending(self) -> bool:
        pending = self._pending
        if pending is None or self._closed:
            return False
        if pending.deadline > self._clock():
            return False
        return self._commit_pending()

    def _commit_pending(self) -> bool:
        pending = self._pending
        if pending is None:
            return False
        self._pending = None
        self.record(pending.snapshot)
        self._event("history.commit", generation=pending.generation)
        return True

    def _append_undo(self, snapshot: S) -> None:
        self._undo.append(snapshot)
        overflow = len(self._undo) - self.history_limit
        if overflow > 0:
            del self._undo[:overflow]
            self._event("history.evict", count=overflow)

    def _event(self, name: str, **data: object) -> None:
        telemetry.record_event(
            name,
            data={"undo": len(self._undo), "redo": len(self._redo), **data},
            logger_name=self._logger_name,
        )


__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "DEFAULT_UNDO_DEBOUNCE_MS",
    "HistoryEngine",
    "HistoryEntry",
    "PendingBatch",
    "is_batchable_insert",
]
