from __future__ import annotations

import pytest

from prompt_editor.buffer import Buffer, Cursor
from prompt_editor.layout import (
    VisualRow,
    get_visual_rows,
    visual_position,
    visual_row_count,
    visual_row_length,
    visual_to_buffer_column,
    wrap_lines,
)


def row_texts(line: str, width: int) -> list[str]:
    return [row.slice(line) for row in get_visual_rows(line, width)]


def test_word_wrap_keeps_space_on_upper_row() -> None:
    assert row_texts("hello world", 7) == ["hello ", "world"]


def test_unspaced_run_is_hard_wrapped() -> None:
    assert row_texts("abcdefghij", 4) == ["abcd", "efgh", "ij"]


def test_empty_line_has_one_zero_length_row() -> None:
    assert get_visual_rows("", 10) == [VisualRow(0, 0)]


@pytest.mark.parametrize("width", [0, -3])
def test_non_positive_width_clamps_to_one(width: int) -> None:
    assert row_texts("abc", width) == ["a", "b", "c"]


@pytest.mark.parametrize(
    ("line", "width"),
    [
        ("the quick brown fox jumps", 6),
        ("a b c d e f", 2),
        ("supercalifragilistic expialidocious", 5),
        ("  leading spaces", 3),
    ],
)
def test_rows_cover_line_exactly(line: str, width: int) -> None:
    rows = get_visual_rows(line, width)

    assert "".join(row.slice(line) for row in rows) == line
    assert all(1 <= row.length <= width for row in rows)


def test_column_on_wrap_boundary_belongs_to_next_row() -> None:
    line = "hello world"

    assert visual_position(line, 5, 7) == (0, 5)
    assert visual_position(line, 6, 7) == (1, 0)
    assert visual_position(line, 11, 7) == (1, 5)


def test_row_helpers() -> None:
    line = "hello world"

    assert visual_row_count(line, 7) == 2
    assert visual_row_length(line, 0, 7) == 6
    assert visual_row_length(line, 1, 7) == 5
    assert visual_row_length(line, 5, 7) == 0


def test_visual_to_buffer_column_clamps() -> None:
    line = "hello world"

    assert visual_to_buffer_column(line, 1, 2, 7) == 8
    assert visual_to_buffer_column(line, 1, 50, 7) == 11
    assert visual_to_buffer_column(line, 9, 0, 7) == 6


def test_wrap_lines_reports_cursor_row_across_lines() -> None:
    buffer = Buffer.from_lines(["hello world", "ok"])

    result = wrap_lines(buffer, Cursor(1, 1), 7)

    assert result.visual_lines == ["hello ", "world", "ok"]
    assert result.cursor_visual_row == 2
    assert result.cursor_visual_col == 1


def test_wrap_lines_cursor_at_end_of_wrapped_line() -> None:
    buffer = Buffer.from_lines(["hello world"])

    result = wrap_lines(buffer, Cursor(0, 11), 7)

    assert (result.cursor_visual_row, result.cursor_visual_col) == (1, 5)
