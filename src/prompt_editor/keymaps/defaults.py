"""Built-in keymap mirroring common terminal prompt conventions."""

from __future__ import annotations

from typing import Iterable, Sequence

from prompt_editor.actions import editing

from .models import ActionRef, Binding, KeyStroke
from .registry import KeymapRegistry

HOME_SEQUENCES = ("\x1b[H", "\x1b[1~", "\x1bOH", "\x1b[7~")
END_SEQUENCES = ("\x1b[F", "\x1b[4~", "\x1bOF", "\x1b[8~")

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(id="cursor.up", handler=editing.move_up, description="Move up one row"),
    ActionRef(id="cursor.down", handler=editing.move_down, description="Move down one row"),
    ActionRef(id="cursor.left", handler=editing.move_left, description="Move left"),
    ActionRef(id="cursor.right", handler=editing.move_right, description="Move right"),
    ActionRef(
        id="cursor.line_start",
        handler=editing.move_line_start,
        description="Jump to the start of the line",
    ),
    ActionRef(
        id="cursor.line_end",
        handler=editing.move_line_end,
        description="Jump to the end of the line",
    ),
    ActionRef(
        id="edit.delete_backward",
        handler=editing.delete_backward,
        description="Delete the character before the cursor",
    ),
    ActionRef(
        id="edit.delete_forward",
        handler=editing.delete_forward,
        description="Delete the character under the cursor",
    ),
    ActionRef(id="edit.new_line", handler=editing.new_line, description="Insert a line break"),
    ActionRef(
        id="edit.continue_line",
        handler=editing.continue_line,
        description="Replace a trailing backslash with a line break",
    ),
    ActionRef(id="history.undo", handler=editing.undo, description="Undo"),
    ActionRef(id="history.redo", handler=editing.redo, description="Redo"),
    ActionRef(id="prompt.submit", handler=editing.submit, description="Submit the prompt"),
)


def _arrow(direction: str) -> Binding:
    return Binding(
        id=f"cursor.{direction}",
        stroke=KeyStroke(direction.upper()),
        action_id=f"cursor.{direction}",
        description=f"Move {direction}",
        when=(f"!at_{direction}_boundary",),
        tags=("navigation",),
    )


def _sequence_bindings(
    prefix: str, sequences: Iterable[str], action_id: str
) -> tuple[Binding, ...]:
    return tuple(
        Binding(
            id=f"{prefix}.raw{index}",
            stroke=KeyStroke(sequence),
            action_id=action_id,
            tags=("navigation", "raw"),
        )
        for index, sequence in enumerate(sequences)
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    _arrow("up"),
    _arrow("down"),
    _arrow("left"),
    _arrow("right"),
    Binding(id="cursor.home", stroke=KeyStroke("HOME"), action_id="cursor.line_start"),
    Binding(id="cursor.end", stroke=KeyStroke("END"), action_id="cursor.line_end"),
    *_sequence_bindings("cursor.home", HOME_SEQUENCES, "cursor.line_start"),
    *_sequence_bindings("cursor.end", END_SEQUENCES, "cursor.line_end"),
    Binding(
        id="cursor.ctrl_a",
        stroke=KeyStroke("a", ("ctrl",)),
        action_id="cursor.line_start",
        description="Readline-style line start",
    ),
    Binding(
        id="cursor.ctrl_e",
        stroke=KeyStroke("e", ("ctrl",)),
        action_id="cursor.line_end",
        description="Readline-style line end",
    ),
    Binding(id="history.ctrl_z", stroke=KeyStroke("z", ("ctrl",)), action_id="history.undo"),
    Binding(id="history.ctrl_y", stroke=KeyStroke("y", ("ctrl",)), action_id="history.redo"),
    Binding(id="edit.ctrl_j", stroke=KeyStroke("j", ("ctrl",)), action_id="edit.new_line"),
    Binding(
        id="edit.backspace",
        stroke=KeyStroke("BACKSPACE"),
        action_id="edit.delete_backward",
    ),
    Binding(id="edit.delete", stroke=KeyStroke("DELETE"), action_id="edit.delete_forward"),
    Binding(
        id="edit.enter_continue",
        stroke=KeyStroke("ENTER"),
        action_id="edit.continue_line",
        description="Backslash + Enter continues onto a new line",
        when=("backslash_before_cursor",),
        priority=10,
    ),
    Binding(
        id="prompt.enter_submit",
        stroke=KeyStroke("ENTER"),
        action_id="prompt.submit",
        description="Submit the prompt",
    ),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register built-in actions and bindings.

    ``extra_bindings`` are registered last with ``replace=True`` so callers can
    override individual defaults without rebuilding the whole keymap.
    """

    include = set(include_bindings) if include_bindings else None
    exclude = set(exclude_bindings or ())

    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if include is not None and binding.id not in include:
            continue
        if binding.id in exclude:
            continue
        registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=True)


__all__ = [
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "END_SEQUENCES",
    "HOME_SEQUENCES",
    "load_default_keymaps",
]
