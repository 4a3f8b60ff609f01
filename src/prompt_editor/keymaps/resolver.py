"""Key token resolution with telemetry instrumentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping, Optional, Sequence

from prompt_editor.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome returned from the resolver.

    ``blocked`` means the key is bound but every candidate's when-clauses
    failed, which the dispatcher reports as a boundary hand-off.
    """

    status: Literal["match", "blocked", "miss"]
    match: Optional[ResolutionMatch] = None
    token: Optional[str] = None
    blocked: tuple[Binding, ...] = ()


class KeymapResolver:
    """Picks the highest-priority binding whose when-clauses hold."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name

    @property
    def registry(self) -> KeymapRegistry:
        return self._registry

    def resolve(
        self,
        tokens: Sequence[str],
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        """Try ``tokens`` in order (e.g. raw escape sequence, then key name)."""

        ctx = context or {}
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"tokens": "|".join(tokens)},
        ) as handle:
            blocked: list[Binding] = []
            blocked_token: Optional[str] = None
            for token in tokens:
                candidates = list(self._registry.iter_bindings(token))
                if not candidates:
                    continue
                allowed = [binding for binding in candidates if binding.allows(ctx)]
                if not allowed:
                    blocked.extend(candidates)
                    blocked_token = blocked_token or token
                    continue
                allowed.sort(key=lambda binding: (-binding.priority, binding.id))
                binding = allowed[0]
                handle.add_metadata("status", "match")
                handle.add_metadata("binding_id", binding.id)
                return ResolutionResult(
                    status="match",
                    match=ResolutionMatch(
                        binding=binding,
                        action=self._registry.get_action(binding.action_id),
                    ),
                    token=token,
                )

            if blocked:
                handle.add_metadata("status", "blocked")
                return ResolutionResult(
                    status="blocked", token=blocked_token, blocked=tuple(blocked)
                )

            handle.add_metadata("status", "miss")
            return ResolutionResult(status="miss")


__all__ = [
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]
