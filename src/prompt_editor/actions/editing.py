"""Editing verbs bound to keys by the default keymap."""

from __future__ import annotations

from typing import TYPE_CHECKING

from prompt_editor.buffer import Direction

from .base import ActionContext, ActionResult

if TYPE_CHECKING:
    from prompt_editor.keymaps.resolver import ResolutionMatch


def _move(context: ActionContext, direction: Direction) -> ActionResult:
    context.session.move_cursor(direction)
    return ActionResult(consumed=True, message=f"move_{direction.name.lower()}")


def move_up(context: ActionContext, match: "ResolutionMatch") -> ActionResult:
    del match
    return _move(context, Direction.UP)


def move_down(context: ActionContext, match: "ResolutionMatch") -> ActionResult:
    del match
    return _move(context, Direction.DOWN)


def move_left(context: ActionContext, match: "ResolutionMatch") -> ActionResult:
    del match
    return _move(context, Direction.LEFT)


def move_right(context: ActionContext, match: "ResolutionMatch") -> ActionResult:
    del match
    return _move(context, Direction.RIGHT)


def move_line_start(context: ActionContext, match: "ResolutionMatch") -> ActionResult:
    del match
    return _move(context, Direction.LINE_START)


def move_line_end(context: ActionContext, match: "ResolutionMatch") -> ActionResult:
    del match
    return _move(context, Direction.LINE_END)


def delete_backward(context: ActionContext, match: "ResolutionMatch") -> ActionResult:
    del match
    context.session.delete()
    return ActionResult(consumed=True, message="delete")


def delete_forward(context: ActionContext, match: "ResolutionMatch") -> ActionResult:
    del match
    context.session.delete_forward()
    return ActionResult(consumed=True, message="delete_forward")


def new_line(context: ActionContext, match: "ResolutionMatch") -> ActionResult:
    del match
    context.session.new_line()
    return ActionResult(consumed=True, message="new_line")


def continue_line(context: ActionContext, match: "ResolutionMatch") -> ActionResult:
    """Drop the trailing continuation backslash and open a new line."""

    del match
    context.session.delete_and_new_line()
    return ActionResult(consumed=True, message="continue_line")


def undo(context: ActionContext, match: "ResolutionMatch") -> ActionResult:
    del match
    changed = context.session.undo()
    return ActionResult(consumed=True, status="ok" if changed else "noop", message="undo")


def redo(context: ActionContext, match: "ResolutionMatch") -> ActionResult:
    del match
    changed = context.session.redo()
    return ActionResult(consumed=True, status="ok" if changed else "noop", message="redo")


def submit(context: ActionContext, match: "ResolutionMatch") -> ActionResult:
    """Hand the text to ``input.submit`` listeners, then clear the prompt."""

    del match
    value = context.session.text
    context.bus.emit("input.submit", value)
    context.session.set_text("")
    return ActionResult(consumed=True, status="submit", message="submit")


__all__ = [
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
