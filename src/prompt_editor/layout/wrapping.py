"""Word-aware wrapping of logical lines into visual rows.

Rendering and vertical cursor navigation both go through
``get_visual_rows`` so the row the cursor is drawn on is always the row
``up``/``down`` reason about.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from prompt_editor.buffer.document import Buffer
    from prompt_editor.buffer.state import Cursor


@dataclass(frozen=True, slots=True)
class VisualRow:
    """Span ``[start, start + length)`` of a logical line shown on one row."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def slice(self, line: str) -> str:
        return line[self.start : self.end]


class WrapResult(NamedTuple):
    """Wrapped rows for a whole buffer plus the cursor's place among them."""

    visual_lines: list[str]
    cursor_visual_row: int
    cursor_visual_col: int


def clamp_width(width: int) -> int:
    return max(1, int(width))


def get_visual_rows(line: str, width: int) -> list[VisualRow]:
    """Partition ``line`` into rows no wider than ``width``.

    A row that must break ends just after the last space found at or before
    index ``width - 1`` (the space stays on the upper row); a run with no
    space in that window is hard-wrapped at exactly ``width`` characters.
    """

    width = clamp_width(width)
    if not line:
        return [VisualRow(0, 0)]

    rows: list[VisualRow] = []
    offset = 0
    total = len(line)
    while offset < total:
        remaining = total - offset
        if remaining <= width:
            length = remaining
        else:
            split = line.rfind(" ", offset, offset + width)
            length = split - offset + 1 if split != -1 else width
        rows.append(VisualRow(offset, length))
        offset += length
    return rows


def visual_row_count(line: str, width: int) -> int:
    return len(get_visual_rows(line, width))


def _locate(rows: list[VisualRow], column: int) -> tuple[int, int]:
    last = len(rows) - 1
    for index, row in enumerate(rows):
        # A column on a wrap boundary belongs to the next row.
        if column < row.end or index == last:
            return index, column - row.start
    return last, column - rows[last].start  # pragma: no cover - rows never empty


def visual_position(line: str, column: int, width: int) -> tuple[int, int]:
    """Map a buffer column to ``(visual_row, visual_col)`` within ``line``."""

    return _locate(get_visual_rows(line, width), column)


def visual_row_length(line: str, row: int, width: int) -> int:
    rows = get_visual_rows(line, width)
    if row < 0 or row >= len(rows):
        return 0
    return rows[row].length


def visual_to_buffer_column(line: str, row: int, col: int, width: int) -> int:
    """Map ``(row, col)`` back to a buffer column, clamped to the line length."""

    rows = get_visual_rows(line, width)
    row = max(0, min(row, len(rows) - 1))
    return min(rows[row].start + max(0, col), len(line))


def wrap_lines(buffer: "Buffer", cursor: "Cursor", width: int) -> WrapResult:
    """Lay out every line of ``buffer`` for a display ``width`` columns wide."""

    visual_lines: list[str] = []
    cursor_row = 0
    cursor_col = 0
    for index, line in enumerate(buffer.lines):
        rows = get_visual_rows(line, width)
        if index == cursor.line:
            row, col = _locate(rows, cursor.column)
            cursor_row = len(visual_lines) + row
            cursor_col = col
        visual_lines.extend(row.slice(line) for row in rows)
    return WrapResult(visual_lines, cursor_row, cursor_col)


__all__ = [
    "VisualRow",
    "WrapResult",
    "clamp_width",
    "get_visual_rows",
    "visual_position",
    "visual_row_count",
    "visual_row_length",
    "visual_to_buffer_column",
    "wrap_lines",
]
