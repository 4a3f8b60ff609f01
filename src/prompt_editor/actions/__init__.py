"""High-level editing verbs dispatched from key bindings."""

from .base import ActionContext, ActionResult, EventBus
from .editing import (
    continue_line,
    delete_backward,
    delete_forward,
    move_down,
    move_left,
    move_line_end,
    move_line_start,
    move_right,
    move_up,
    new_line,
    redo,
    submit,
    undo,
)

__all__ = [
    "ActionContext",
    "ActionResult",
    "EventBus",
    "continue_line",
    "delete_backward",
    "delete_forward",
    "move_down",
    "move_left",
    "move_line_end",
    "move_line_start",
    "move_right",
    "move_up",
    "new_line",
    "redo",
    "submit",
    "undo",
]
