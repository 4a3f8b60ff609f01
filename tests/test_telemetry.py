from __future__ import annotations

from contextlib import contextmanager
from types import SimpleNamespace
from typing import Any, Iterator, List

import pytest

from prompt_editor.runtime import telemetry


class RecordingConfig:
    def __init__(self) -> None:
        self.calls: List[tuple[str, Any]] = []

    def __getattr__(self, name: str):
        if not name.startswith("with_"):
            raise AttributeError(name)

        def setter(value: Any) -> "RecordingConfig":
            self.calls.append((name, value))
            return self

        return setter

    def value(self, name: str) -> Any:
        values = [value for setter, value in self.calls if setter == name]
        return values[-1] if values else None


class RecordingLogger:
    def __init__(self, name: str, config: Any) -> None:
        self.name = name
        self.config = config
        self.lines: List[tuple[str, str, Any]] = []
        self.context: dict[str, str] = {}
        self.profiled: List[str] = []

    @classmethod
    def with_config(cls, name: str, config: Any) -> "RecordingLogger":
        return cls(name, config)

    def add_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        self.context.pop(key, None)

    @contextmanager
    def profile(self, name: str) -> Iterator[None]:
        self.profiled.append(name)
        yield

    @contextmanager
    def track_component(self, name: str) -> Iterator[None]:
        yield

    def debug_with(self, message: str, data: Any) -> None:
        self.lines.append(("debug", message, data))

    def error_with(self, message: str, data: Any) -> None:
        self.lines.append(("error", message, data))


@pytest.fixture
def fake_telelog(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        telemetry, "tl", SimpleNamespace(Config=RecordingConfig, Logger=RecordingLogger)
    )
    monkeypatch.setattr(telemetry, "_ACTIVE_CONFIG", None)
    monkeypatch.setattr(telemetry, "_LOGGER_CACHE", {})


def test_configure_with_preset_returns_active_config(fake_telelog: None) -> None:
    config = telemetry.configure(preset="development")

    assert telemetry.active_config() is config
    assert config.value("with_min_level") == "DEBUG"
    assert config.value("with_console_output") is True
    assert config.value("with_profiling") is True
    assert telemetry.get_logger("demo").config is config


def test_configure_level_overrides_preset(fake_telelog: None) -> None:
    config = telemetry.configure(preset="production", level="error")

    assert config.value("with_min_level") == "ERROR"
    assert config.value("with_file_output") == "prompt_editor.log"


def test_configure_drops_cached_loggers(fake_telelog: None) -> None:
    telemetry.configure()
    first = telemetry.get_logger("demo")

    telemetry.configure(preset="performance")

    assert telemetry.get_logger("demo") is not first


def test_unknown_preset_is_rejected(fake_telelog: None) -> None:
    with pytest.raises(ValueError) as excinfo:
        telemetry.configure(preset="verbose")

    assert "development, performance, production" in str(excinfo.value)


def test_config_and_preset_are_mutually_exclusive(fake_telelog: None) -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=RecordingConfig(), preset="development")


def test_preset_file_follows_log_file_variable(fake_telelog: None) -> None:
    config = telemetry.build_preset_config(
        "Performance", environ={"PROMPT_EDITOR_LOG_FILE": "/tmp/editor.log"}
    )

    assert config.value("with_file_output") == "/tmp/editor.log"
    assert config.value("with_json_format") is True


def test_env_config_defaults(fake_telelog: None) -> None:
    config = telemetry.build_env_config({})

    assert config.value("with_min_level") == "WARNING"
    assert config.value("with_console_output") is True
    assert config.value("with_colored_output") is True
    assert config.value("with_file_output") is None
    assert config.value("with_buffering") is None


def test_env_config_knobs(fake_telelog: None) -> None:
    config = telemetry.build_env_config(
        {
            "PROMPT_EDITOR_LOG_LEVEL": "info",
            "PROMPT_EDITOR_DISABLE_CONSOLE": "yes",
            "PROMPT_EDITOR_LOG_JSON": "1",
            "PROMPT_EDITOR_LOG_FILE": "editor.log",
            "PROMPT_EDITOR_LOG_BUFFERED": "true",
            "PROMPT_EDITOR_LOG_BUFFER_SIZE": "16",
        }
    )

    assert config.value("with_min_level") == "INFO"
    assert config.value("with_console_output") is False
    assert config.value("with_colored_output") is None
    assert config.value("with_json_format") is True
    assert config.value("with_file_output") == "editor.log"
    assert config.value("with_buffer_size") == 16


def test_no_color_disables_colored_output(fake_telelog: None) -> None:
    config = telemetry.build_env_config({"PROMPT_EDITOR_NO_COLOR": "on"})

    assert config.value("with_colored_output") is False


def test_record_event_uses_structured_method(fake_telelog: None) -> None:
    telemetry.record_event("history.undo", data={"depth": 2}, logger_name="events")

    level, message, data = telemetry.get_logger("events").lines[-1]
    assert (level, message) == ("debug", "event::history.undo")
    assert ("depth", "2") in data


def test_span_reports_failure_and_reraises(
    fake_telelog: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    reasons: List[str] = []
    original_fail = telemetry.SpanHandle.fail

    def record_fail(handle: telemetry.SpanHandle, reason: str) -> None:
        reasons.append(reason)
        original_fail(handle, reason)

    monkeypatch.setattr(telemetry.SpanHandle, "fail", record_fail)

    with pytest.raises(RuntimeError, match="boom"):
        with telemetry.span("session::insert", metadata={"session": "demo"}):
            raise RuntimeError("boom")

    log = telemetry.get_logger()
    assert reasons == ["boom"]
    assert log.profiled == ["session::insert"]
    assert log.lines[-1][:2] == ("error", "span::fail")
    assert log.context == {}
