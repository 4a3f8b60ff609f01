"""Direction-based cursor movement and boundary queries."""

from __future__ import annotations

from typing import Optional

from prompt_editor.layout.wrapping import get_visual_rows, visual_position

from .document import Buffer
from .state import Cursor, Direction


def _move_left(buffer: Buffer, cursor: Cursor) -> Cursor:
    if cursor.column > 0:
        return Cursor(cursor.line, cursor.column - 1)
    if cursor.line > 0:
        return Cursor(cursor.line - 1, len(buffer.get_line(cursor.line - 1)))
    return cursor


def _move_right(buffer: Buffer, cursor: Cursor) -> Cursor:
    if cursor.column < len(buffer.get_line(cursor.line)):
        return Cursor(cursor.line, cursor.column + 1)
    if cursor.line < buffer.line_count - 1:
        return Cursor(cursor.line + 1, 0)
    return cursor


def _move_logical(buffer: Buffer, cursor: Cursor, delta: int) -> Cursor:
    target = cursor.line + delta
    if target < 0 or target >= buffer.line_count:
        return cursor
    return Cursor(target, min(cursor.column, len(buffer.get_line(target))))


def _land_on_row(line: str, row_index: int, visual_col: int, width: int) -> int:
    """Buffer column for ``visual_col`` on row ``row_index`` of ``line``.

    Rows other than the line's last stop one short of their length: their end
    column is the next row's first column and would put the cursor there.
    """

    rows = get_visual_rows(line, width)
    row = rows[row_index]
    limit = row.length if row_index == len(rows) - 1 else row.length - 1
    return min(row.start + min(visual_col, limit), len(line))


def _move_visual(buffer: Buffer, cursor: Cursor, delta: int, width: int) -> Cursor:
    line = buffer.get_line(cursor.line)
    row, col = visual_position(line, cursor.column, width)
    row_count = len(get_visual_rows(line, width))

    target_row = row + delta
    if 0 <= target_row < row_count:
        return Cursor(cursor.line, _land_on_row(line, target_row, col, width))

    target_line = cursor.line + delta
    if target_line < 0 or target_line >= buffer.line_count:
        return cursor

    target_text = buffer.get_line(target_line)
    landing_row = len(get_visual_rows(target_text, width)) - 1 if delta < 0 else 0
    return Cursor(target_line, _land_on_row(target_text, landing_row, col, width))


def move_cursor(
    buffer: Buffer,
    cursor: Cursor,
    direction: Direction | str,
    width: Optional[int] = None,
) -> Cursor:
    """Return the cursor after moving one step in ``direction``.

    With ``width`` set, ``up``/``down`` walk visual rows produced by the
    shared wrapping algorithm; without it they walk logical lines. Home/End
    (``line_start``/``line_end``) always target the whole logical line.
    """

    direction = Direction(direction)
    if direction is Direction.LEFT:
        return _move_left(buffer, cursor)
    if direction is Direction.RIGHT:
        return _move_right(buffer, cursor)
    if direction is Direction.LINE_START:
        return Cursor(cursor.line, 0)
    if direction is Direction.LINE_END:
        return Cursor(cursor.line, len(buffer.get_line(cursor.line)))

    delta = -1 if direction is Direction.UP else 1
    if width is None:
        return _move_logical(buffer, cursor, delta)
    return _move_visual(buffer, cursor, delta, width)


def is_on_first_visual_row(
    buffer: Buffer, cursor: Cursor, width: Optional[int] = None
) -> bool:
    if cursor.line > 0:
        return False
    if width is None:
        return True
    row, _ = visual_position(buffer.get_line(0), cursor.column, width)
    return row == 0


def is_on_last_visual_row(
    buffer: Buffer, cursor: Cursor, width: Optional[int] = None
) -> bool:
    last = buffer.line_count - 1
    if cursor.line < last:
        return False
    if width is None:
        return True
    line = buffer.get_line(last)
    row, _ = visual_position(line, cursor.column, width)
    return row == len(get_visual_rows(line, width)) - 1


def is_at_line_start(cursor: Cursor) -> bool:
    return cursor.column == 0


def is_at_text_start(cursor: Cursor) -> bool:
    return cursor.line == 0 and cursor.column == 0


def is_at_text_end(buffer: Buffer, cursor: Cursor) -> bool:
    last = buffer.line_count - 1
    return cursor.line == last and cursor.column >= len(buffer.get_line(last))


def is_at_boundary(
    buffer: Buffer,
    cursor: Cursor,
    direction: Direction | str,
    width: Optional[int] = None,
) -> bool:
    """True when moving in ``direction`` would leave the buffer's extent."""

    direction = Direction(direction)
    if direction is Direction.UP:
        return is_on_first_visual_row(buffer, cursor, width)
    if direction is Direction.DOWN:
        return is_on_last_visual_row(buffer, cursor, width)
    if direction is Direction.LEFT:
        return is_at_text_start(cursor)
    if direction is Direction.RIGHT:
        return is_at_text_end(buffer, cursor)
    return False


__all__ = [
    "is_at_boundary",
    "is_at_line_start",
    "is_at_text_end",
    "is_at_text_start",
    "is_on_first_visual_row",
    "is_on_last_visual_row",
    "move_cursor",
]
