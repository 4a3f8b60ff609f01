"""Buffer model, edit algebra, cursor navigation, and undo history."""

from .document import Buffer, normalize_newlines
from .navigation import is_at_boundary, move_cursor
from .operations import (
    Operation,
    compose,
    create_buffer,
    delete_and_new_line,
    delete_char,
    delete_char_forward,
    get_cursor,
    get_offset,
    get_text_content,
    insert_new_line,
    insert_text,
)
from .session import EditorSession, SessionClosedError, Transaction
from .state import Cursor, Direction, EditResult
from .sync import BufferMirror, BufferSync, BufferValidationError
from .undo import HistoryEngine, HistoryEntry, is_batchable_insert
from .validation import ensure_cursor

__all__ = [
    "Buffer",
    "BufferMirror",
    "BufferSync",
    "BufferValidationError",
    "Cursor",
    "Direction",
    "EditResult",
    "EditorSession",
    "HistoryEngine",
    "HistoryEntry",
    "Operation",
    "SessionClosedError",
    "Transaction",
    "compose",
    "create_buffer",
    "delete_and_new_line",
    "delete_char",
    "delete_char_forward",
    "ensure_cursor",
    "get_cursor",
    "get_offset",
    "get_text_content",
    "insert_new_line",
    "insert_text",
    "is_at_boundary",
    "is_batchable_insert",
    "move_cursor",
    "normalize_newlines",
]
