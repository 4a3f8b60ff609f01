"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .document import Buffer
from .state import Cursor
from .sync import BufferValidationError


def ensure_cursor(buffer: Buffer, cursor: Cursor) -> Cursor:
    if cursor.line < 0 or cursor.line >= buffer.line_count:
        raise BufferValidationError("Line out of range", cursor=cursor)
    line = buffer.get_line(cursor.line)
    if cursor.column < 0 or cursor.column > len(line):
        raise BufferValidationError("Column out of range", cursor=cursor)
    return cursor


__all__ = ["ensure_cursor"]
