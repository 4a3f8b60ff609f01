"""Executable Textual app that hosts the prompt editor."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use prompt_editor.adapters.textual.app"
    ) from exc

from prompt_editor.buffer import BufferMirror, EditorSession
from prompt_editor.config import ConfigError, EditorConfig
from prompt_editor.dispatch import KeyDispatcher
from prompt_editor.layout import WrapResult
from prompt_editor.runtime import telemetry

from .controller import TextualPromptAdapter, TextualUIHooks

_TEXTUAL_KEY_NAMES = {
    "up": "UP",
    "down": "DOWN",
    "left": "LEFT",
    "right": "RIGHT",
    "home": "HOME",
    "end": "END",
    "backspace": "BACKSPACE",
    "delete": "DELETE",
    "enter": "ENTER",
    "escape": "ESC",
    "tab": "TAB",
}


def create_default_dispatcher(config: Optional[EditorConfig] = None) -> KeyDispatcher:
    """Build a session + dispatcher pair with the default keymap loaded."""

    session = EditorSession(config or EditorConfig.from_env(), name="textual")
    return KeyDispatcher(session)


def render_wrapped(
    wrap: WrapResult,
    *,
    show_cursor: bool = True,
    placeholder: Optional[str] = None,
) -> Text:
    """Render wrapped rows with the cursor cell shown in reverse video.

    An empty prompt shows ``placeholder`` dimmed instead. When the cursor is
    visible it sits on the placeholder's first character.
    """

    text = Text()
    is_empty = len(wrap.visual_lines) <= 1 and not "".join(wrap.visual_lines)
    if placeholder and is_empty:
        if show_cursor:
            text.append(placeholder[0], style="reverse")
            text.append(placeholder[1:], style="dim")
        else:
            text.append(placeholder, style="dim")
        return text
    for index, row in enumerate(wrap.visual_lines):
        if index:
            text.append("\n")
        if not show_cursor or index != wrap.cursor_visual_row:
            text.append(row)
            continue
        col = wrap.cursor_visual_col
        text.append(row[:col])
        text.append(row[col : col + 1] or " ", style="reverse")
        text.append(row[col + 1 :])
    return text


@dataclass
class UIState:
    buffer_text: str = ""
    status_text: str = ""
    submitted: list[str] = field(default_factory=list)


class PromptEditorApp(App[None]):
    """Minimal Textual UI embedding the prompt editor."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#prompt-view {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        config: Optional[EditorConfig] = None,
        placeholder: Optional[str] = None,
        show_cursor: bool = True,
        is_active: bool = True,
        on_change: Optional[Callable[[str], None]] = None,
    ) -> None:
        super().__init__()
        self._config = config
        self._placeholder = placeholder
        self._show_cursor = show_cursor
        self._is_active = is_active
        self._on_change = on_change
        self._fixed_width = config.width if config else None
        self._state = UIState()
        self.adapter: TextualPromptAdapter | None = None
        self._view_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="prompt-area"):
            self._view_widget = Static("", id="prompt-view")
            yield self._view_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    async def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_view=self._update_view,
            update_status=self._update_status,
            handle_event=self._handle_event,
            on_change=self._handle_change,
        )
        self.adapter = TextualPromptAdapter(
            create_default_dispatcher(self._config), hooks, is_active=self._is_active
        )
        self.call_after_refresh(self._sync_width)
        self.set_interval(0.05, self._process_timeouts)

    async def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.close()
            self.adapter = None

    def on_resize(self, event: events.Resize) -> None:
        del event
        self.call_after_refresh(self._sync_width)

    def _sync_width(self) -> None:
        if not self.adapter or not self._view_widget:
            return
        if self._fixed_width is not None:
            self.adapter.set_width(self._fixed_width)
            return
        # One cell is kept free for the cursor drawn past the last character.
        width = self._view_widget.content_size.width - 1
        if width > 0:
            self.adapter.set_width(width)

    def _process_timeouts(self) -> None:
        if self.adapter:
            self.adapter.process_timeouts()

    def set_active(self, active: bool) -> None:
        self._is_active = active
        if self.adapter:
            self.adapter.set_active(active)

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter or not self._is_active:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        event.stop()

    def _update_view(self, mirror: BufferMirror, wrap: WrapResult) -> None:
        self._state.buffer_text = mirror.text
        if self._view_widget:
            self._view_widget.update(
                render_wrapped(
                    wrap, show_cursor=self._show_cursor, placeholder=self._placeholder
                )
            )

    def _handle_change(self, value: str) -> None:
        if self._on_change:
            self._on_change(value)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "input.submit" and isinstance(payload, str):
            self._state.submitted.append(payload)
        elif name == "input.boundary":
            self._update_status(f"boundary:{payload}")

    @staticmethod
    def _normalize_key(
        event: events.Key,
    ) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
        key = event.key
        if key in {"ctrl+c", "ctrl+q"}:
            return None
        *prefixes, name = key.split("+")
        modifiers = tuple(
            prefix for prefix in prefixes if prefix in {"ctrl", "alt", "meta"}
        )
        if name in _TEXTUAL_KEY_NAMES:
            return (_TEXTUAL_KEY_NAMES[name], None, modifiers)
        if modifiers:
            return (name, None, modifiers)
        if event.character and event.is_printable:
            return (event.character, event.character, ())
        return None


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the prompt editor Textual demo.")
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Fixed wrap width (default: follow the widget size)",
    )
    parser.add_argument(
        "--history-limit",
        type=int,
        default=None,
        help="Maximum number of undo steps kept (default: 100)",
    )
    parser.add_argument(
        "--undo-debounce-ms",
        type=int,
        default=None,
        help="Typing pause that closes an undo batch, 0 disables (default: 200)",
    )
    parser.add_argument(
        "--initial-value",
        default="",
        help="Text the prompt starts with",
    )
    parser.add_argument(
        "--placeholder",
        default=None,
        help="Hint shown while the prompt is empty",
    )
    parser.add_argument(
        "--hide-cursor",
        action="store_true",
        help="Do not draw the cursor cell",
    )
    parser.add_argument(
        "--log-preset",
        choices=sorted(telemetry.PRESETS),
        default=None,
        help="Telemetry preset to configure before the app starts",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Minimum log level, e.g. DEBUG or INFO (default: WARNING)",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> EditorConfig:
    config = EditorConfig.from_env(initial_value=args.initial_value)
    overrides = {
        name: value
        for name, value in (
            ("width", args.width),
            ("history_limit", args.history_limit),
            ("undo_debounce_ms", args.undo_debounce_ms),
        )
        if value is not None
    }
    return config.with_overrides(**overrides)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset or args.log_level:
        telemetry.configure(preset=args.log_preset, level=args.log_level)
    try:
        config = build_config(args)
    except ConfigError as exc:
        raise SystemExit(f"prompt-editor: {exc}") from exc
    app = PromptEditorApp(
        config=config,
        placeholder=args.placeholder,
        show_cursor=not args.hide_cursor,
    )
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
