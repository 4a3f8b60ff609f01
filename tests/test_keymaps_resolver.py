from __future__ import annotations

from prompt_editor.keymaps import (
    ActionRef,
    Binding,
    KeymapRegistry,
    KeymapResolver,
    WhenClause,
)


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    stroke: str = "ENTER",
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
    priority: int = 0,
) -> Binding:
    return Binding(
        id=binding_id,
        stroke=stroke,
        action_id=action_id,
        when=when,
        priority=priority,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_token() -> None:
    binding = make_binding("enter")
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve(("ENTER",))

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == binding.id
    assert result.match.action.id == "core.test"
    assert result.token == "ENTER"


def test_resolver_reports_miss_for_unbound_token() -> None:
    resolver = KeymapResolver(build_registry([make_binding("enter")]))

    assert resolver.resolve(("TAB",)).status == "miss"


def test_resolver_honors_when_clauses() -> None:
    gating = make_binding(
        "panel.enter",
        when=(WhenClause("panel_open"),),
        action_id="core.panel",
    )
    resolver = KeymapResolver(build_registry([gating]))

    blocked = resolver.resolve(("ENTER",), context={})
    assert blocked.status == "blocked"
    assert blocked.blocked == (gating,)
    assert blocked.token == "ENTER"

    hit = resolver.resolve(("ENTER",), context={"panel_open": True})
    assert hit.status == "match"
    assert hit.match is not None
    assert hit.match.binding.id == gating.id


def test_resolver_prefers_higher_priority() -> None:
    fallback = make_binding("submit", action_id="core.submit")
    gated = make_binding(
        "continue",
        action_id="core.continue",
        when=(WhenClause("backslash_before_cursor"),),
        priority=10,
    )
    resolver = KeymapResolver(build_registry([fallback, gated]))

    plain = resolver.resolve(("ENTER",), context={})
    continued = resolver.resolve(("ENTER",), context={"backslash_before_cursor": True})

    assert plain.match is not None and plain.match.binding.id == "submit"
    assert continued.match is not None and continued.match.binding.id == "continue"


def test_resolver_tries_tokens_in_order() -> None:
    raw = make_binding("raw.home", stroke="\x1b[1~", action_id="core.raw")
    named = make_binding("named.home", stroke="HOME", action_id="core.named")
    resolver = KeymapResolver(build_registry([raw, named]))

    first = resolver.resolve(("\x1b[1~", "HOME"))
    fallback = resolver.resolve(("\x1b[9~", "HOME"))

    assert first.match is not None and first.match.binding.id == "raw.home"
    assert fallback.match is not None and fallback.match.binding.id == "named.home"


def test_resolver_sees_new_bindings() -> None:
    registry = build_registry([])
    resolver = KeymapResolver(registry)

    assert resolver.resolve(("x",)).status == "miss"

    registry.register_action(make_action("core.x"))
    registry.register_binding(make_binding("x", stroke="x", action_id="core.x"))

    match = resolver.resolve(("x",))
    assert match.status == "match"
    assert resolver.registry is registry
