"""Telemetry services built directly on telelog.

The rest of the engine only touches this narrow surface:

``configure(...)`` -- adopt an explicit telelog config or a named preset
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit a structured event at a chosen level
``span(name, ...)`` -- profile a block and optionally track it as a component

Without a preset, settings come from ``PROMPT_EDITOR_*`` environment
variables so a host can turn on debug output without touching code:

=====================  ===================================================
``LOG_LEVEL``          minimum level (default ``WARNING``)
``DISABLE_CONSOLE``    drop console output, e.g. while a TUI owns the screen
``NO_COLOR``           plain console output
``LOG_JSON``           JSON lines instead of text
``LOG_FILE``           also write to this file
``LOG_BUFFERED``       buffer writes (``LOG_BUFFER_SIZE`` entries)
=====================  ===================================================
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    Iterator,
    Mapping,
    MutableMapping,
    Optional,
    Tuple,
    cast,
)

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "PROMPT_EDITOR_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "prompt_editor")
DEFAULT_LEVEL = "WARNING"
DEFAULT_BUFFER_SIZE = 2048

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None

# Each preset is a list of (telelog ``with_*`` setter, argument) pairs.
# ``LOG_FILE`` replaces the file argument when set.
PRESETS: Mapping[str, tuple[tuple[str, Any], ...]] = {
    "development": (
        ("with_min_level", "DEBUG"),
        ("with_console_output", True),
        ("with_colored_output", True),
        ("with_json_format", False),
    ),
    "production": (
        ("with_min_level", "INFO"),
        ("with_console_output", False),
        ("with_file_output", "prompt_editor.log"),
        ("with_buffering", True),
    ),
    "performance": (
        ("with_min_level", "DEBUG"),
        ("with_console_output", False),
        ("with_json_format", True),
        ("with_file_output", "prompt_editor-performance.log"),
        ("with_buffering", True),
    ),
}


def _env(name: str, environ: Mapping[str, str]) -> Optional[str]:
    value = environ.get(f"{ENV_PREFIX}{name}")
    return value if value else None


def _env_flag(name: str, environ: Mapping[str, str]) -> bool:
    raw = _env(name, environ)
    return raw is not None and raw.lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _format_pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


def build_preset_config(
    preset: str, *, environ: Optional[Mapping[str, str]] = None
) -> Any:
    """Return a fresh ``tl.Config`` for ``preset``; ``LOG_FILE`` overrides its file."""

    settings = PRESETS.get(preset.lower())
    if settings is None:
        known = ", ".join(sorted(PRESETS))
        raise ValueError(f"Unknown preset '{preset}' (expected one of: {known}).")
    env = os.environ if environ is None else environ
    config = tl.Config()
    for setter, argument in settings:
        if setter == "with_file_output":
            argument = _env("LOG_FILE", env) or argument
        getattr(config, setter)(argument)
    return config


def build_env_config(environ: Optional[Mapping[str, str]] = None) -> Any:
    """Return a ``tl.Config`` assembled from ``PROMPT_EDITOR_*`` variables."""

    env = os.environ if environ is None else environ
    config = tl.Config()
    config.with_min_level((_env("LOG_LEVEL", env) or DEFAULT_LEVEL).upper())

    if _env_flag("DISABLE_CONSOLE", env):
        config.with_console_output(False)
    else:
        config.with_console_output(True)
        config.with_colored_output(not _env_flag("NO_COLOR", env))

    if _env_flag("LOG_JSON", env):
        config.with_json_format(True)

    log_file = _env("LOG_FILE", env)
    if log_file:
        config.with_file_output(log_file)

    if _env_flag("LOG_BUFFERED", env):
        config.with_buffering(True)
        size = _env("LOG_BUFFER_SIZE", env)
        config.with_buffer_size(int(size) if size else DEFAULT_BUFFER_SIZE)

    return config


def configure(
    *,
    config: Optional[Any] = None,
    preset: Optional[str] = None,
    level: Optional[str] = None,
) -> Any:
    """Replace the active telelog configuration and return it.

    Parameters
    ----------
    config:
        Explicit ``tl.Config`` instance to adopt.
    preset:
        One of ``PRESETS``. ``config`` and ``preset`` are mutually exclusive.
    level:
        Minimum level applied on top of whichever configuration is chosen.

    Cached loggers are dropped so later ``get_logger`` calls pick up the new
    settings.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        config = build_preset_config(preset)
    elif config is None:
        config = build_env_config()

    if level:
        config.with_min_level(level.upper())
    config.with_profiling(True)
    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()
    return config


def active_config() -> Any:
    if _ACTIVE_CONFIG is None:
        return configure()
    return _ACTIVE_CONFIG


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached ``telelog.Logger`` for ``name``."""

    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, active_config()
        )
    return _LOGGER_CACHE[logger_name]


def _resolve_level_method(
    logger: Any, level: Any, *, expect_data: bool = False
) -> Tuple[Any, bool]:
    name = str(level).lower()
    if expect_data:
        with_attr = getattr(logger, f"{name}_with", None)
        if with_attr is not None:
            return with_attr, True

    attr = getattr(logger, name, None)
    if attr is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return attr, False


def record_event(
    name: str,
    *,
    level: str | Any = "debug",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit a structured ``event::<name>`` line with ``data`` as key/value pairs."""

    log = get_logger(logger_name)
    payload = {"event": name, **(data or {})}
    method, accepts_data = _resolve_level_method(log, level, expect_data=True)
    message = f"event::{name}"
    if accepts_data:
        method(message, _format_pairs(payload))
    else:
        method(f"{message} {payload}")


@dataclass
class SpanHandle:
    """Handle yielded by ``span`` for metadata updates and failure reports."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def _emit(
        self, level: str, message: str, extra: Optional[Dict[str, Any]] = None
    ) -> None:
        payload = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        if extra:
            payload.update({key: _stringify(val) for key, val in extra.items()})

        method, accepts = _resolve_level_method(self.logger, level, expect_data=True)
        if accepts:
            method(message, _format_pairs(payload))
        else:
            method(f"{message} {payload}")

    def fail(self, reason: str) -> None:
        self._emit("error", "span::fail", {"reason": reason})

    def cancel(self, reason: str | None = None) -> None:
        extra = {"reason": reason} if reason else None
        self._emit("warning", "span::cancel", extra)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a code block and (optionally) track it as a component.

    ``component=True`` reuses ``name`` as the component identifier, a string
    names it explicitly. ``metadata`` is attached as transient logger context
    for the duration of the block. Exceptions are reported through
    ``SpanHandle.fail`` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = None
    if component is True:
        component_name = name
    elif isinstance(component, str):
        component_name = component

    context_keys = []
    metadata_payload: Dict[str, Any] = {}
    for key, value in (metadata or {}).items():
        serialized = _stringify(value)
        metadata_payload[key] = serialized
        log.add_context(key, serialized)
        context_keys.append(key)

    with ExitStack() as stack:
        if component_name:
            stack.enter_context(log.track_component(component_name))

        stack.enter_context(log.profile(name))
        handle = SpanHandle(
            logger=log,
            span_name=name,
            component_name=component_name,
            metadata=dict(metadata_payload),
        )

        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        finally:
            for key in context_keys:
                log.remove_context(key)


configure()
logger = get_logger()

__all__ = [
    "PRESETS",
    "SpanHandle",
    "active_config",
    "build_env_config",
    "build_preset_config",
    "configure",
    "get_logger",
    "record_event",
    "span",
    "logger",
]
