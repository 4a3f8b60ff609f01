"""Cursor, direction, and edit-result value types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from .document import Buffer


@dataclass(frozen=True, slots=True)
class Cursor:
    """0-indexed (line, column) position; ``column`` may equal the line length."""

    line: int = 0
    column: int = 0

    def as_tuple(self) -> tuple[int, int]:
        return (self.line, self.column)


class Direction(str, Enum):
    """Directions understood by ``move_cursor``."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    LINE_START = "lineStart"
    LINE_END = "lineEnd"


class EditResult(NamedTuple):
    """Buffer and cursor returned together so they never drift apart."""

    buffer: "Buffer"
    cursor: Cursor


__all__ = ["Cursor", "Direction", "EditResult"]
