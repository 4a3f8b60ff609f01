"""Pure edit operations over (Buffer, Cursor) pairs.

Every function here takes the prior state and returns an ``EditResult``
holding the next buffer and cursor. Nothing is mutated in place and no
function raises for an in-bounds cursor: edits at the document edges are
no-ops that hand the inputs back unchanged.
"""

from __future__ import annotations

from typing import Callable

from .document import Buffer, normalize_newlines
from .state import Cursor, EditResult

Operation = Callable[[Buffer, Cursor], EditResult]


def create_buffer(text: str | None = None) -> EditResult:
    """Build a buffer from ``text`` with the cursor at its end."""

    buffer = Buffer.from_text(text)
    return EditResult(buffer, cursor_at_end(buffer))


def cursor_at_end(buffer: Buffer) -> Cursor:
    last = buffer.line_count - 1
    return Cursor(last, len(buffer.get_line(last)))


def insert_text(buffer: Buffer, cursor: Cursor, text: str) -> EditResult:
    """Insert ``text`` (possibly spanning several lines) at ``cursor``."""

    if not text:
        return EditResult(buffer, cursor)

    text = normalize_newlines(text)
    current = buffer.get_line(cursor.line)
    merged = current[: cursor.column] + text + current[cursor.column :]
    new_lines = merged.split("\n")

    inserted = text.split("\n")
    if len(inserted) == 1:
        target = Cursor(cursor.line, cursor.column + len(text))
    else:
        target = Cursor(cursor.line + len(inserted) - 1, len(inserted[-1]))

    return EditResult(
        buffer.replace_lines(cursor.line, cursor.line + 1, new_lines), target
    )


def delete_char(buffer: Buffer, cursor: Cursor) -> EditResult:
    """Backspace: remove the character before the cursor."""

    line, column = cursor.line, cursor.column
    if line == 0 and column == 0:
        return EditResult(buffer, cursor)

    if column == 0:
        previous = buffer.get_line(line - 1)
        merged = previous + buffer.get_line(line)
        return EditResult(
            buffer.replace_lines(line - 1, line + 1, [merged]),
            Cursor(line - 1, len(previous)),
        )

    current = buffer.get_line(line)
    updated = current[: column - 1] + current[column:]
    return EditResult(
        buffer.replace_lines(line, line + 1, [updated]), Cursor(line, column - 1)
    )


def delete_char_forward(buffer: Buffer, cursor: Cursor) -> EditResult:
    """Forward delete: remove the character at the cursor."""

    line, column = cursor.line, cursor.column
    current = buffer.get_line(line)
    at_line_end = column >= len(current)

    if at_line_end and line == buffer.line_count - 1:
        return EditResult(buffer, cursor)

    if at_line_end:
        merged = current + buffer.get_line(line + 1)
        return EditResult(buffer.replace_lines(line, line + 2, [merged]), cursor)

    updated = current[:column] + current[column + 1 :]
    return EditResult(buffer.replace_lines(line, line + 1, [updated]), cursor)


def insert_new_line(buffer: Buffer, cursor: Cursor) -> EditResult:
    """Split the current line at the cursor column."""

    current = buffer.get_line(cursor.line)
    head, tail = current[: cursor.column], current[cursor.column :]
    return EditResult(
        buffer.replace_lines(cursor.line, cursor.line + 1, [head, tail]),
        Cursor(cursor.line + 1, 0),
    )


def compose(*operations: Operation) -> Operation:
    """Chain operations so they all read from a single prior state.

    The returned callable threads its input through ``operations`` in order
    and yields one next state, which lets callers express multi-step edits
    (like dropping a continuation backslash and then splitting the line)
    without re-reading live state between the steps.
    """

    def run(buffer: Buffer, cursor: Cursor) -> EditResult:
        result = EditResult(buffer, cursor)
        for operation in operations:
            result = operation(result.buffer, result.cursor)
        return result

    return run


delete_and_new_line: Operation = compose(delete_char, insert_new_line)


def get_text_content(buffer: Buffer) -> str:
    return "\n".join(buffer.lines)


def get_offset(buffer: Buffer, cursor: Cursor) -> int:
    """Flat character offset of ``cursor`` in the newline-joined text."""

    offset = 0
    for index in range(cursor.line):
        offset += len(buffer.get_line(index)) + 1  # newline
    return offset + cursor.column


def get_cursor(buffer: Buffer, offset: int) -> Cursor:
    """Inverse of ``get_offset``; out-of-range offsets clamp to the text bounds.

    An offset sitting exactly on a newline resolves to the end of the line
    before it, never to the start of the following line.
    """

    running = 0
    for index, line in enumerate(buffer.lines):
        line_len = len(line)
        if offset <= running + line_len:
            return Cursor(index, max(0, offset - running))
        running += line_len + 1
    return cursor_at_end(buffer)


__all__ = [
    "Operation",
    "compose",
    "create_buffer",
    "cursor_at_end",
    "delete_and_new_line",
    "delete_char",
    "delete_char_forward",
    "get_cursor",
    "get_offset",
    "get_text_content",
    "insert_new_line",
    "insert_text",
]
