"""Textual adapter that wires a KeyDispatcher into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from prompt_editor.actions.base import ActionResult
from prompt_editor.buffer import BufferMirror
from prompt_editor.dispatch import KeyDispatcher, KeyInput
from prompt_editor.layout import WrapResult, wrap_lines


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_view: Callable[[BufferMirror, WrapResult], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    # Called with the new value whenever the text changes
    on_change: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualPromptAdapter:
    """Bridges a KeyDispatcher + bus events to a Textual-friendly surface."""

    def __init__(
        self,
        dispatcher: KeyDispatcher,
        hooks: TextualUIHooks,
        *,
        is_active: bool = True,
    ) -> None:
        self.dispatcher = dispatcher
        self.hooks = hooks
        self.is_active = is_active
        self._last_text = dispatcher.session.text
        self._subscribe_events()
        self._refresh_view()

    @property
    def session(self):
        return self.dispatcher.session

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
        raw: Optional[str] = None,
    ) -> ActionResult:
        """Translate a Textual key event into a KeyInput and dispatch it.

        While inactive the key is left for the host and reported as
        ``status="inactive"``.
        """

        if not self.is_active:
            return ActionResult(consumed=False, status="inactive")
        normalized_modifiers = tuple(str(mod).lower() for mod in modifiers)
        self._log_state("key ->", key=key, text=text, mods=normalized_modifiers)
        result = self.dispatcher.handle_key(
            KeyInput(key=key, modifiers=normalized_modifiers, text=text, raw=raw)
        )
        self._after_result(result)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
            action=result.action_id,
        )
        return result

    def process_timeouts(self) -> bool:
        """Poll the history debounce timer; True when a batch was committed."""

        fired = self.dispatcher.process_timeouts()
        if fired:
            self._log_state("timeout ->", status="batch_committed")
        return fired

    def set_width(self, width: Optional[int]) -> None:
        if width == self.session.width:
            return
        self.session.set_width(width)
        self._log_state("resize ->", width=width)
        self._refresh_view()

    def close(self) -> None:
        self.dispatcher.close()

    def render(self) -> WrapResult:
        session = self.session
        width = session.width
        if width is None:
            width = max((len(line) for line in session.buffer.lines), default=0) + 1
        return wrap_lines(session.buffer, session.cursor, width)

    def _after_result(self, result: ActionResult) -> None:
        status = result.message or result.status
        if status:
            self.hooks.update_status(status)
        self._refresh_view()

    def _subscribe_events(self) -> None:
        bus = self.dispatcher.bus
        for event in ("input.submit", "input.boundary"):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)
        if name == "input.submit":
            self.hooks.update_status(f"submitted {len(str(payload or ''))} chars")

    def set_active(self, active: bool) -> None:
        self.is_active = active
        self._log_state("focus ->", active=active)

    def _refresh_view(self) -> None:
        mirror = self.session.mirror()
        self.hooks.update_view(mirror, self.render())
        if mirror.text != self._last_text:
            self._last_text = mirror.text
            self.hooks.on_change(mirror.text)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        session = self.session
        return {
            "cursor": session.cursor.as_tuple(),
            "lines": session.buffer.line_count,
            "width": session.width,
            "pending_batch": session.history.has_pending_batch,
            "version": session.version,
        }


__all__ = ["TextualPromptAdapter", "TextualUIHooks"]
