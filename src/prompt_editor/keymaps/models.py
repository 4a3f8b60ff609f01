"""Dataclasses describing key bindings and action metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, MutableMapping

NAMED_KEYS = frozenset(
    {
        "UP",
        "DOWN",
        "LEFT",
        "RIGHT",
        "HOME",
        "END",
        "BACKSPACE",
        "DELETE",
        "ENTER",
        "RETURN",
        "TAB",
        "ESC",
        "PAGEUP",
        "PAGEDOWN",
    }
)


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = tuple(m.strip().lower() for m in modifiers if m.strip())
    return tuple(sorted(dict.fromkeys(values)))


def _normalize_key(key: str) -> str:
    upper = key.upper()
    return upper if upper in NAMED_KEYS else key


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press.

    Named keys (arrows, ``ENTER``...) are upper-cased, modifiers are
    lower-cased and sorted, and raw escape sequences are kept verbatim so
    terminals that only report ``\\x1b[H`` for Home can still be bound.
    """

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "key", _normalize_key(self.key))
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            modifier = "+".join(self.modifiers)
            return f"{modifier}+{self.key}"
        return self.key

    @classmethod
    def parse(cls, spec: str) -> "KeyStroke":
        """Build a stroke from ``"ctrl+a"``-style text (a lone ``+`` is a key)."""

        if spec == "+" or "+" not in spec.strip("+"):
            return cls(spec)
        *modifiers, key = spec.split("+")
        return cls(key, tuple(modifiers))


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Simple boolean condition used to gate bindings."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        expr = expression.strip()
        if not expr:
            raise ValueError("expression cannot be empty")
        expected = True
        if expr.startswith("!"):
            expected = False
            expr = expr[1:]
        return cls(expr, expected)

    def evaluate(self, context: Mapping[str, bool]) -> bool:
        return bool(context.get(self.flag, False)) is self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Callable metadata used during binding execution."""

    id: str
    handler: Callable[..., object]
    telemetry_name: str | None = None
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        if self.telemetry_name is None:
            object.__setattr__(self, "telemetry_name", self.id)

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


def _normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    seen: MutableMapping[str, None] = {}
    result: list[str] = []
    for tag in tags:
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen[cleaned] = None
            result.append(cleaned)
    return tuple(result)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key stroke with an action, gated by when-clauses."""

    id: str
    stroke: KeyStroke
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    tags: tuple[str, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        if isinstance(self.stroke, str):
            object.__setattr__(self, "stroke", KeyStroke.parse(self.stroke))
        object.__setattr__(self, "tags", _normalize_tags(self.tags))
        normalized_when = tuple(
            clause if isinstance(clause, WhenClause) else WhenClause.parse(str(clause))
            for clause in self.when
        )
        object.__setattr__(self, "when", normalized_when)

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, context: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(context) for clause in self.when)

    @property
    def token(self) -> str:
        return self.stroke.token


__all__ = [
    "ActionRef",
    "Binding",
    "KeyStroke",
    "NAMED_KEYS",
    "WhenClause",
]
