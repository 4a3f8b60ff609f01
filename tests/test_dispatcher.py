from __future__ import annotations

from typing import List

from prompt_editor.actions import ActionResult
from prompt_editor.buffer import Cursor, EditorSession
from prompt_editor.config import EditorConfig
from prompt_editor.dispatch import KeyDispatcher, KeyInput
from prompt_editor.keymaps import ActionRef, Binding, KeymapRegistry


def make_dispatcher(initial_value: str = "", **overrides: object) -> KeyDispatcher:
    session = EditorSession(EditorConfig(initial_value=initial_value), **overrides)
    return KeyDispatcher(session)


def press(dispatcher: KeyDispatcher, key: str, *modifiers: str, **kwargs) -> ActionResult:
    return dispatcher.handle_key(KeyInput(key=key, modifiers=modifiers, **kwargs))


def type_text(dispatcher: KeyDispatcher, text: str) -> None:
    for char in text:
        press(dispatcher, char, text=char)


def test_key_input_tokens_prefer_raw_sequence() -> None:
    assert KeyInput("HOME", raw="\x1b[1~").tokens() == ("\x1b[1~", "HOME")
    assert KeyInput("home").tokens() == ("HOME",)
    assert KeyInput("a", ("ctrl",)).tokens() == ("ctrl+a",)


def test_unbound_printable_text_is_inserted() -> None:
    dispatcher = make_dispatcher()

    type_text(dispatcher, "hi there")

    assert dispatcher.session.text == "hi there"


def test_unbound_control_keys_are_ignored() -> None:
    dispatcher = make_dispatcher("abc")

    result = press(dispatcher, "q", "ctrl", text="\x11")

    assert result.consumed is False
    assert result.status == "ignored"
    assert dispatcher.session.text == "abc"


def test_readline_line_start_and_end() -> None:
    dispatcher = make_dispatcher("abc")

    result = press(dispatcher, "a", "ctrl")
    assert result.action_id == "cursor.line_start"
    assert dispatcher.session.cursor == Cursor(0, 0)

    press(dispatcher, "e", "ctrl")
    assert dispatcher.session.cursor == Cursor(0, 3)


def test_raw_home_and_end_sequences() -> None:
    dispatcher = make_dispatcher("abc")

    press(dispatcher, "HOME", raw="\x1b[1~")
    assert dispatcher.session.cursor == Cursor(0, 0)

    press(dispatcher, "\x1bOF")
    assert dispatcher.session.cursor == Cursor(0, 3)


def test_arrow_at_boundary_hands_off() -> None:
    dispatcher = make_dispatcher("abc")
    events: List[object | None] = []
    dispatcher.bus.subscribe("input.boundary", events.append)

    result = press(dispatcher, "RIGHT")

    assert result.consumed is False
    assert result.status == "boundary"
    assert result.message == "right"
    assert events == ["right"]
    assert dispatcher.session.cursor == Cursor(0, 3)


def test_arrow_inside_text_moves_cursor() -> None:
    dispatcher = make_dispatcher("ab\ncd")

    left = press(dispatcher, "LEFT")
    up = press(dispatcher, "UP")

    assert (left.consumed, up.consumed) == (True, True)
    assert dispatcher.session.cursor == Cursor(0, 1)
    assert press(dispatcher, "UP").status == "boundary"


def test_visual_rows_count_as_boundaries() -> None:
    dispatcher = make_dispatcher("hello world", width=7)

    assert press(dispatcher, "DOWN").status == "boundary"
    assert press(dispatcher, "UP").consumed is True
    assert press(dispatcher, "UP").status == "boundary"


def test_enter_after_backslash_continues_line() -> None:
    dispatcher = make_dispatcher("hello\\")

    result = press(dispatcher, "ENTER")

    assert result.action_id == "edit.continue_line"
    assert dispatcher.session.buffer.lines == ("hello", "")
    assert dispatcher.session.cursor == Cursor(1, 0)


def test_enter_submits_and_clears() -> None:
    dispatcher = make_dispatcher("hello")
    submitted: List[object | None] = []
    dispatcher.bus.subscribe("input.submit", submitted.append)

    result = press(dispatcher, "enter")

    assert result.status == "submit"
    assert submitted == ["hello"]
    assert dispatcher.session.text == ""


def test_ctrl_j_inserts_new_line() -> None:
    dispatcher = make_dispatcher("ab")

    press(dispatcher, "j", "ctrl")

    assert dispatcher.session.buffer.lines == ("ab", "")


def test_backspace_and_delete() -> None:
    dispatcher = make_dispatcher("abc")
    press(dispatcher, "LEFT")

    press(dispatcher, "DELETE")
    assert dispatcher.session.text == "ab"
    press(dispatcher, "BACKSPACE")
    assert dispatcher.session.text == "a"


def test_undo_and_redo_keys() -> None:
    dispatcher = make_dispatcher()
    type_text(dispatcher, "abc")

    assert press(dispatcher, "z", "ctrl").status == "ok"
    assert dispatcher.session.text == ""
    assert press(dispatcher, "y", "ctrl").status == "ok"
    assert dispatcher.session.text == "abc"
    assert press(dispatcher, "y", "ctrl").status == "noop"


def test_custom_registry_is_used_as_given() -> None:
    registry = KeymapRegistry()
    calls: List[str] = []

    def shout(context, match) -> ActionResult:
        calls.append(match.binding.id)
        context.session.insert("!")
        return ActionResult(consumed=True, message="shout")

    registry.register_action(ActionRef(id="demo.shout", handler=shout))
    registry.register_binding(Binding(id="demo.f1", stroke="F1", action_id="demo.shout"))
    session = EditorSession()
    dispatcher = KeyDispatcher(session, registry=registry)

    result = press(dispatcher, "F1")

    assert result.action_id == "demo.shout"
    assert calls == ["demo.f1"]
    assert session.text == "!"
    assert press(dispatcher, "ENTER").status == "ignored"


def test_flags_reflect_session_state() -> None:
    dispatcher = make_dispatcher("a\\b")
    dispatcher.session.set_cursor_offset(2)

    flags = dispatcher.flags()

    assert flags["backslash_before_cursor"] is True
    assert flags["at_up_boundary"] is True
    assert flags["at_left_boundary"] is False
    assert flags["at_right_boundary"] is False
