"""Keymap registry responsible for storing actions and bindings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Sequence

from prompt_editor.runtime.telemetry import span

from .models import ActionRef, Binding


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    action_count: int
    binding_count: int
    tokens: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a new binding conflicts with existing entries."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        message = (
            f"Binding '{binding.id}' conflicts with {[b.id for b in conflicts_tuple]}"
        )
        super().__init__(message)
        self.binding = binding
        self.conflicts = conflicts_tuple


class KeymapRegistry:
    """Owns action references and binding metadata, indexed by key token."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._token_index: Dict[str, set[str]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Action '{action_id}' is not registered") from exc

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        with span(
            "keymaps::register_action",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"action_id": action.id},
        ):
            if not replace and action.id in self._actions:
                raise ValueError(f"Action '{action.id}' already registered")
            self._actions[action.id] = action
            return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "token": binding.token},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
                )

            conflicts = self.detect_conflicts(binding, ignore=(binding.id,))
            if conflicts and not replace:
                handle.add_metadata(
                    "conflicts", ",".join(conflict.id for conflict in conflicts)
                )
                raise KeymapConflictError(binding, conflicts)

            if replace:
                for conflict in conflicts:
                    self._drop(conflict)
                existing = self._bindings.get(binding.id)
                if existing:
                    self._drop(existing)
            elif binding.id in self._bindings:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            self._bindings[binding.id] = binding
            self._token_index.setdefault(binding.token, set()).add(binding.id)
            self._revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        with span(
            "keymaps::unregister_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding_id},
        ):
            binding = self._bindings.get(binding_id)
            if not binding:
                return None
            self._drop(binding)
            self._revision += 1
            return binding

    def iter_bindings(self, token: Optional[str] = None) -> Iterator[Binding]:
        if token is None:
            yield from self._bindings.values()
            return
        for binding_id in sorted(self._token_index.get(token, ())):
            yield self._bindings[binding_id]

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            tokens=tuple(sorted(self._token_index)),
        )

    def detect_conflicts(
        self, binding: Binding, *, ignore: Sequence[str] | None = None
    ) -> list[Binding]:
        ignored = set(ignore or ())
        conflicts: list[Binding] = []
        for match_id in sorted(self._token_index.get(binding.token, ())):
            if match_id in ignored:
                continue
            existing = self._bindings[match_id]
            if _contexts_overlap(binding, existing):
                conflicts.append(existing)
        return conflicts

    def _drop(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        bucket = self._token_index.get(binding.token)
        if bucket is None:
            return
        bucket.discard(binding.id)
        if not bucket:
            self._token_index.pop(binding.token, None)


def _contexts_overlap(left: Binding, right: Binding) -> bool:
    """Bindings on the same token overlap unless their when-clauses disagree."""

    left_map = left.when_map
    right_map = right.when_map

    if not left.when and not right.when:
        return True

    for flag, expected in left_map.items():
        if flag in right_map and right_map[flag] != expected:
            return False

    if not left.when or not right.when:
        return False

    return left_map == right_map


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]
