"""Immutable line-sequence storage for prompt buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


def normalize_newlines(text: str) -> str:
    """Fold ``\\r\\n`` and bare ``\\r`` into ``\\n``."""

    return text.replace("\r\n", "\n").replace("\r", "\n")


@dataclass(frozen=True, slots=True)
class Buffer:
    """Ordered, non-empty sequence of lines without line terminators.

    An empty document is a single empty line. Instances are values: every
    edit builds a new ``Buffer``, so snapshots held by the undo history can
    never be changed underneath it.
    """

    lines: tuple[str, ...] = ("",)

    def __post_init__(self) -> None:
        if not isinstance(self.lines, tuple):
            object.__setattr__(self, "lines", tuple(self.lines))
        if not self.lines:
            object.__setattr__(self, "lines", ("",))

    @classmethod
    def from_text(cls, text: str | None = None) -> "Buffer":
        if not text:
            return cls()
        return cls(tuple(normalize_newlines(text).split("\n")))

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "Buffer":
        return cls(tuple(lines))

    def replace_lines(self, start: int, end: int, new_lines: Iterable[str]) -> "Buffer":
        """Return a buffer with ``lines[start:end]`` replaced by ``new_lines``."""

        lines = list(self.lines)
        lines[start:end] = list(new_lines)
        return Buffer(tuple(lines))

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def get_line(self, index: int) -> str:
        return self.lines[index]

    @property
    def is_empty(self) -> bool:
        return self.lines == ("",)


__all__ = ["Buffer", "normalize_newlines"]
