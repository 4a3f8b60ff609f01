"""Key dispatcher routing normalized key events into an editor session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from prompt_editor.actions.base import ActionContext, ActionResult, EventBus
from prompt_editor.buffer import Direction, EditorSession
from prompt_editor.keymaps.defaults import load_default_keymaps
from prompt_editor.keymaps.models import KeyStroke
from prompt_editor.keymaps.registry import KeymapRegistry
from prompt_editor.keymaps.resolver import KeymapResolver, ResolutionResult
from prompt_editor.runtime import telemetry

_NON_TEXT_MODIFIERS = frozenset({"ctrl", "meta", "alt"})
_BOUNDARY_DIRECTIONS = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


@dataclass(frozen=True, slots=True)
class KeyInput:
    """Normalized key event.

    ``raw`` carries the terminal escape sequence when the host has one, so
    bindings for e.g. ``\\x1b[1~`` win over the generic key name.
    """

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None
    raw: Optional[str] = None

    @property
    def stroke(self) -> KeyStroke:
        return KeyStroke(self.key, self.modifiers)

    def tokens(self) -> tuple[str, ...]:
        token = self.stroke.token
        if self.raw and self.raw != token:
            return (self.raw, token)
        return (token,)


class KeyDispatcher:
    """Resolves keys against the keymap and runs the bound action."""

    def __init__(
        self,
        session: EditorSession,
        *,
        registry: KeymapRegistry | None = None,
        resolver: KeymapResolver | None = None,
        bus: EventBus | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.session = session
        self.registry = registry or KeymapRegistry(logger_name="prompt_editor.keymaps")
        if load_defaults and registry is None:
            load_default_keymaps(self.registry)
        self.resolver = resolver or KeymapResolver(
            self.registry, logger_name="prompt_editor.keymaps"
        )
        self.bus = bus or EventBus()
        self.context = ActionContext(session=session, bus=self.bus)
        self.context.extras.setdefault("keymap_registry", self.registry)
        self.context.extras.setdefault("keymap_resolver", self.resolver)

    def flags(self) -> Dict[str, bool]:
        """When-clause flags derived from the current session state."""

        session = self.session
        flags = {
            f"at_{direction.value}_boundary": session.is_at_boundary(direction)
            for direction in _BOUNDARY_DIRECTIONS
        }
        cursor = session.cursor
        line = session.buffer.get_line(cursor.line)
        flags["backslash_before_cursor"] = (
            cursor.column > 0 and line[cursor.column - 1] == "\\"
        )
        return flags

    def handle_key(self, key: KeyInput) -> ActionResult:
        # Pending debounce deadlines must settle before flags are read.
        self.session.process_timeouts()
        flags = self.flags()
        self.context.extras["keymap_flags"] = flags
        resolution = self.resolver.resolve(key.tokens(), context=flags)

        if resolution.status == "match":
            return self._run(key, resolution)
        if resolution.status == "blocked":
            return self._boundary(resolution)
        return self._fallback(key)

    def process_timeouts(self) -> bool:
        return self.session.process_timeouts()

    def close(self) -> None:
        self.session.close()

    def _run(self, key: KeyInput, resolution: ResolutionResult) -> ActionResult:
        match = resolution.match
        assert match is not None
        action = match.action
        with telemetry.span(
            name=f"action::{action.telemetry_name}",
            component=True,
            metadata={"key": resolution.token, "binding": match.binding.id},
        ):
            result = action(self.context, match)
        if not isinstance(result, ActionResult):
            raise TypeError(
                f"Action '{action.id}' returned {type(result).__name__}, "
                "expected ActionResult"
            )
        result.action_id = action.id
        return result

    def _boundary(self, resolution: ResolutionResult) -> ActionResult:
        binding = resolution.blocked[0]
        direction = binding.action_id.rpartition(".")[2]
        telemetry.record_event(
            "input.boundary",
            data={"direction": direction, "binding": binding.id},
        )
        self.bus.emit("input.boundary", direction)
        return ActionResult(
            consumed=False,
            status="boundary",
            message=direction,
            action_id=binding.action_id,
        )

    def _fallback(self, key: KeyInput) -> ActionResult:
        modifiers = set(key.stroke.modifiers)
        if key.text and not (modifiers & _NON_TEXT_MODIFIERS):
            self.session.insert(key.text)
            return ActionResult(consumed=True, message="insert")
        return ActionResult(consumed=False, status="ignored")


__all__ = ["KeyDispatcher", "KeyInput"]
