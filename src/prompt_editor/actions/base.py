"""Shared types passed to and returned from key actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from prompt_editor.buffer import EditorSession


@dataclass(slots=True)
class ActionResult:
    """Outcome of handling one key."""

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None
    action_id: Optional[str] = None


class EventBus:
    """Minimal event bus letting actions notify the surrounding component."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


@dataclass(slots=True)
class ActionContext:
    """Services every action can reach."""

    session: EditorSession
    bus: EventBus
    extras: Dict[str, object] = field(default_factory=dict)


__all__ = ["ActionContext", "ActionResult", "EventBus"]
