"""Editing session owning the buffer, cursor, width and undo history."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Callable, ContextManager, Optional

from prompt_editor.config import EditorConfig
from prompt_editor.runtime import telemetry

from . import navigation, operations
from .document import Buffer, normalize_newlines
from .operations import Operation
from .state import Cursor, Direction, EditResult
from .sync import BufferMirror
from .undo import HistoryEngine, HistoryEntry, is_batchable_insert
from .validation import ensure_cursor


class SessionClosedError(RuntimeError):
    """Raised when a closed session is asked to change state."""


class EditorSession(AbstractContextManager["EditorSession"]):
    """Single owner of one prompt's editing state.

    Every entry point reads the current (buffer, cursor) once, computes the
    next state with the pure operations, and assigns it back in one step.
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        *,
        name: str = "prompt",
        clock: Optional[Callable[[], float]] = None,
        **overrides: object,
    ) -> None:
        config = (config or EditorConfig()).with_overrides(**overrides)
        self.name = name
        self.config = config
        self._width = config.width
        self._buffer, self._cursor = operations.create_buffer(config.initial_value)
        history_kwargs = {} if clock is None else {"clock": clock}
        self.history: HistoryEngine[HistoryEntry] = HistoryEngine(
            history_limit=config.history_limit,
            undo_debounce_ms=config.undo_debounce_ms,
            **history_kwargs,
        )
        self.version = 0

    # -- read-only state ---------------------------------------------------

    @property
    def buffer(self) -> Buffer:
        return self._buffer

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    @property
    def text(self) -> str:
        return operations.get_text_content(self._buffer)

    @property
    def cursor_offset(self) -> int:
        return operations.get_offset(self._buffer, self._cursor)

    @property
    def width(self) -> Optional[int]:
        return self._width

    @property
    def closed(self) -> bool:
        return self.history.closed

    def snapshot(self) -> HistoryEntry:
        return HistoryEntry(self._buffer, self._cursor)

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.text,
            lines=self._buffer.lines,
            cursor=self._cursor,
            cursor_offset=self.cursor_offset,
            version=self.version,
            attributes=dict(attributes or {}),
        )

    # -- boundary queries --------------------------------------------------

    def is_on_first_visual_row(self) -> bool:
        return navigation.is_on_first_visual_row(self._buffer, self._cursor, self._width)

    def is_on_last_visual_row(self) -> bool:
        return navigation.is_on_last_visual_row(self._buffer, self._cursor, self._width)

    def is_at_line_start(self) -> bool:
        return navigation.is_at_line_start(self._cursor)

    def is_at_text_end(self) -> bool:
        return navigation.is_at_text_end(self._buffer, self._cursor)

    def is_at_boundary(self, direction: Direction | str) -> bool:
        return navigation.is_at_boundary(
            self._buffer, self._cursor, direction, self._width
        )

    # -- mutating entry points --------------------------------------------

    def insert(self, text: str) -> None:
        normalized = normalize_newlines(text)
        with Transaction(self, "insert") as tx:
            result = operations.insert_text(self._buffer, self._cursor, normalized)
            if is_batchable_insert(normalized, self.history.undo_debounce_ms):
                self.history.begin_or_refresh_batch(self.snapshot())
                tx.commit(result, record=False)
            else:
                tx.commit(result)

    def delete(self) -> None:
        self.apply(operations.delete_char, label="delete")

    def delete_forward(self) -> None:
        self.apply(operations.delete_char_forward, label="delete_forward")

    def new_line(self) -> None:
        self.apply(operations.insert_new_line, label="new_line")

    def delete_and_new_line(self) -> None:
        self.apply(operations.delete_and_new_line, label="delete_and_new_line")

    def apply(self, operation: Operation, *, label: str = "apply") -> EditResult:
        """Run ``operation`` against the current state as one undo step."""

        with Transaction(self, label) as tx:
            return tx.commit(operation(self._buffer, self._cursor))

    def set_text(self, text: str) -> None:
        with Transaction(self, "set_text") as tx:
            tx.commit(operations.create_buffer(text))

    def move_cursor(self, direction: Direction | str) -> None:
        self._ensure_open("move_cursor")
        with self._span("move_cursor"):
            self.history.flush()
            self._place_cursor(
                navigation.move_cursor(
                    self._buffer, self._cursor, direction, self._width
                )
            )

    def set_cursor_offset(self, offset: int) -> None:
        self._ensure_open("set_cursor_offset")
        with self._span("set_cursor_offset"):
            self.history.flush()
            self._place_cursor(operations.get_cursor(self._buffer, offset))

    def undo(self) -> bool:
        self._ensure_open("undo")
        target = self.history.undo(self.snapshot())
        if target is None:
            return False
        self._restore(target)
        return True

    def redo(self) -> bool:
        self._ensure_open("redo")
        target = self.history.redo(self.snapshot())
        if target is None:
            return False
        self._restore(target)
        return True

    # -- host collaboration -------------------------------------------------

    def set_width(self, width: Optional[int]) -> None:
        self._width = None if width is None else max(1, width)

    def process_timeouts(self) -> bool:
        return self.history.process_timeouts()

    def push_host_edit(self, mirror: BufferMirror) -> None:
        """Adopt an externally edited value as one undo step; its cursor must be in range."""

        buffer = Buffer.from_text(mirror.text)
        cursor = ensure_cursor(buffer, mirror.cursor)
        self.apply(lambda _buffer, _cursor: EditResult(buffer, cursor), label="host_edit")

    def pull_buffer(self) -> BufferMirror:
        return self.mirror()

    def close(self) -> None:
        """Drop any open typing batch; later edits raise ``SessionClosedError``."""

        self.history.close()

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def _ensure_open(self, label: str) -> None:
        if self.closed:
            raise SessionClosedError(f"session '{self.name}' is closed ({label})")

    def _span(self, label: str) -> ContextManager[object]:
        return telemetry.span(
            name=f"session::{label}",
            component=True,
            metadata={"session": self.name},
        )

    def _place_cursor(self, cursor: Cursor) -> None:
        if cursor != self._cursor:
            self._cursor = cursor
            self.version += 1

    def _restore(self, entry: HistoryEntry) -> None:
        self._buffer = entry.buffer
        self._cursor = entry.cursor
        self.version += 1


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps one session edit in a telemetry span and assigns its result."""

    def __init__(self, session: EditorSession, label: str) -> None:
        self.session = session
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self.session._ensure_open(self.label)
        self._span_cm = self.session._span(self.label)
        self._span_cm.__enter__()
        return self

    def commit(self, result: EditResult, *, record: bool = True) -> EditResult:
        """Assign ``result`` to the session, checkpointing the prior state first.

        ``record=False`` is used by typed characters, whose checkpoint lives in
        the pending batch instead of the undo stack.
        """

        ensure_cursor(result.buffer, result.cursor)
        session = self.session
        if record:
            session.history.flush()
            session.history.record(session.snapshot())
        session._restore(HistoryEntry(result.buffer, result.cursor))
        return result

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["EditorSession", "SessionClosedError", "Transaction"]
