"""Executable Textual app that hosts the modal engine."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Footer, Header, Static

from vi_engine.buffer import Buffer, BufferMirror
from vi_engine.config import EngineConfig
from vi_engine.modes.mode_manager import ModeManager
from vi_engine.runtime import telemetry

from .controller import TextualUIHooks, TextualViAdapter

WELCOME_TEXT = """Welcome to the vi-engine demo.

Try dw, 3j, ciw, yyp, qa...q then @a, or :s/demo/DEMO/g.
Ctrl+Q quits.
"""


def create_default_manager(
    text: str = WELCOME_TEXT, *, config: Optional[EngineConfig] = None
) -> ModeManager:
    """Build a ModeManager over an in-memory buffer with the default modes."""

    config = config or EngineConfig.from_env()
    buffer = Buffer.from_text(
        text, indent_unit=config.indent_unit, search_wraps=config.search_wraps
    )
    return ModeManager.create(buffer, config=config)


@dataclass
class UIState:
    buffer_text: str = ""
    status_text: str = ""
    command_text: str = ""


class ViEngineApp(App[None]):
    """Minimal Textual UI embedding the modal engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#command-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, text: str = WELCOME_TEXT) -> None:
        super().__init__()
        self._state = UIState()
        self._initial_text = text
        self.manager: ModeManager | None = None
        self.adapter: TextualViAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._command_widget: Static | None = None
        self.logger = telemetry.get_logger("vi_engine.adapters.textual")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view", markup=False)
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line", markup=False)
        self._command_widget = Static("", id="command-line", markup=False)
        yield self._status_widget
        yield self._command_widget
        yield Footer()

    async def on_mount(self) -> None:
        self.manager = create_default_manager(self._initial_text)
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            show_command=self._show_command,
            handle_event=self._handle_event,
            log=self._log_line,
        )
        self.adapter = TextualViAdapter(self.manager, hooks)

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        self._state.buffer_text = _render_caret(mirror)
        if self._buffer_widget:
            self._buffer_widget.update(self._state.buffer_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _show_command(self, command: str) -> None:
        self._state.command_text = command
        if self._command_widget:
            self._command_widget.update(command)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "command.submit" and isinstance(payload, str):
            self.logger.info(f"command submitted: {payload}")

    def _log_line(self, line: str) -> None:
        self.logger.debug(line)

    @staticmethod
    def _normalize_key(
        event: events.Key,
    ) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
        if event.key == "ctrl+q":
            return None
        character = event.character if event.is_printable else None
        return (event.key, character, ())


def _render_caret(mirror: BufferMirror) -> str:
    lines = mirror.text.split("\n")
    line, column = mirror.caret
    if 0 <= line < len(lines):
        current = lines[line]
        lines[line] = f"{current[:column]}█{current[column + 1:]}"
    return "\n".join(lines)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the vi-engine Textual demo.")
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        help="Text file to load into the demo buffer (never written back)",
    )
    parser.add_argument(
        "--log-preset",
        default=os.environ.get("VI_ENGINE_LOG_PRESET"),
        help="telelog preset (development, production or quiet)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    text = args.path.read_text(encoding="utf-8") if args.path else WELCOME_TEXT
    app = ViEngineApp(text=text)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
