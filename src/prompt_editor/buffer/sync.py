"""Adapter boundary types for syncing sessions with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from .state import Cursor


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current session state."""

    text: str
    lines: tuple[str, ...]
    cursor: Cursor
    cursor_offset: int
    version: int = 0
    attributes: dict[str, str] = field(default_factory=dict)


class BufferSync(Protocol):
    """Protocol describing how adapters exchange data with a session."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest snapshot the host should render."""
        ...

    def push_host_edit(self, mirror: BufferMirror) -> None:
        """Replace the session content with an external edit (e.g. a controlled value)."""
        ...


class BufferValidationError(RuntimeError):
    """Raised when adapters hand the engine an out-of-bounds cursor."""

    def __init__(self, message: str, *, cursor: Cursor | None = None) -> None:
        super().__init__(message)
        self.cursor = cursor


__all__ = ["BufferMirror", "BufferSync", "BufferValidationError"]
