import pytest

from prompt_editor.keymaps import (
    ActionRef,
    Binding,
    KeyStroke,
    KeymapConflictError,
    KeymapRegistry,
    WhenClause,
    load_default_keymaps,
)
from prompt_editor.keymaps.defaults import DEFAULT_BINDINGS, END_SEQUENCES, HOME_SEQUENCES


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    stroke: KeyStroke | str = "ctrl+k",
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
) -> Binding:
    return Binding(id=binding_id, stroke=stroke, action_id=action_id, when=when)


def test_key_stroke_normalizes_named_keys_and_modifiers() -> None:
    stroke = KeyStroke("enter", ("Shift", "ctrl"))

    assert stroke.key == "ENTER"
    assert stroke.modifiers == ("ctrl", "shift")
    assert stroke.token == "ctrl+shift+ENTER"
    assert KeyStroke.parse("ctrl+a") == KeyStroke("a", ("ctrl",))
    assert KeyStroke.parse("+").token == "+"
    assert KeyStroke("\x1b[H").token == "\x1b[H"


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="kill")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings("ctrl+k")) == [binding]
    assert registry.revision() == 1


def test_register_binding_requires_known_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="orphan"))


def test_register_action_twice_rejected() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    with pytest.raises(ValueError):
        registry.register_action(make_action())


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="kill"))

    with pytest.raises(KeymapConflictError) as excinfo:
        registry.register_binding(make_binding(binding_id="kill.duplicate"))

    assert [conflict.id for conflict in excinfo.value.conflicts] == ["kill"]


def test_register_binding_non_overlapping_when() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="default"))
    registry.register_binding(
        make_binding(binding_id="panel", when=(WhenClause("panel_open"),))
    )
    registry.register_binding(
        make_binding(binding_id="no_panel", when=(WhenClause.parse("!panel_open"),))
    )

    assert registry.stats().binding_count == 3


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding", stroke="ctrl+l")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]
    assert list(registry.iter_bindings("ctrl+k")) == []


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.stats().tokens == ()
    assert registry.unregister_binding("binding") is None


def test_load_default_keymaps_registers_everything() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    stats = registry.stats()
    assert stats.binding_count == len(DEFAULT_BINDINGS)
    for sequence in HOME_SEQUENCES + END_SEQUENCES:
        assert sequence in stats.tokens
    enter = [binding.id for binding in registry.iter_bindings("ENTER")]
    assert enter == ["edit.enter_continue", "prompt.enter_submit"]


def test_load_default_keymaps_include_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, include_bindings=("cursor.ctrl_a",))

    assert registry.stats().binding_count == 1
    assert registry.get_binding("cursor.ctrl_a").action_id == "cursor.line_start"


def test_load_default_keymaps_exclude_and_extra() -> None:
    registry = KeymapRegistry()
    custom = Binding(
        id="history.ctrl_shift_z", stroke="ctrl+shift+z", action_id="history.redo"
    )

    load_default_keymaps(
        registry,
        exclude_bindings=("history.ctrl_y",),
        extra_bindings=(custom,),
    )

    assert list(registry.iter_bindings("ctrl+y")) == []
    assert registry.get_binding("history.ctrl_shift_z").token == "ctrl+shift+z"
