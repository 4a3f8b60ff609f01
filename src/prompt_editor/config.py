"""Editor configuration and defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional

ENV_PREFIX = "PROMPT_EDITOR_"

DEFAULT_HISTORY_LIMIT = 100
DEFAULT_UNDO_DEBOUNCE_MS = 200


class ConfigError(ValueError):
    """Raised when a configuration value is out of range or unparsable."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


@dataclass(frozen=True)
class EditorConfig:
    """Options recognised by ``EditorSession``.

    ``width`` enables visual-row aware up/down movement; ``undo_debounce_ms``
    of ``0`` turns insert batching off.
    """

    initial_value: str = ""
    width: Optional[int] = None
    history_limit: int = DEFAULT_HISTORY_LIMIT
    undo_debounce_ms: int = DEFAULT_UNDO_DEBOUNCE_MS

    def __post_init__(self) -> None:
        if self.width is not None and self.width < 1:
            object.__setattr__(self, "width", 1)
        if self.history_limit < 1:
            raise ConfigError(
                "history_limit must be at least 1", field="history_limit"
            )
        if self.undo_debounce_ms < 0:
            raise ConfigError(
                "undo_debounce_ms cannot be negative", field="undo_debounce_ms"
            )

    def with_overrides(self, **changes: object) -> "EditorConfig":
        known = {item.name for item in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ConfigError(f"Unknown option(s): {', '.join(unknown)}")
        if not changes:
            return self
        return replace(self, **changes)  # type: ignore[arg-type]

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        initial_value: str = "",
    ) -> "EditorConfig":
        env = os.environ if environ is None else environ
        return cls(
            initial_value=initial_value,
            width=_env_int(env, "WIDTH", None),
            history_limit=_env_int(env, "HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT),
            undo_debounce_ms=_env_int(env, "UNDO_DEBOUNCE_MS", DEFAULT_UNDO_DEBOUNCE_MS),
        )


def _env_int(env: Mapping[str, str], key: str, fallback: Optional[int]) -> Optional[int]:
    raw = env.get(f"{ENV_PREFIX}{key}")
    if raw is None or not raw.strip():
        return fallback
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(
            f"{ENV_PREFIX}{key} must be an integer, got {raw!r}", field=key.lower()
        ) from exc


__all__ = [
    "ConfigError",
    "DEFAULT_HISTORY_LIMIT",
    "DEFAULT_UNDO_DEBOUNCE_MS",
    "ENV_PREFIX",
    "EditorConfig",
]
