"""Command-line mode: accumulates ``:``, ``/`` or ``?`` input until Enter."""

from __future__ import annotations

from typing import Optional

from vi_engine.actions.command import ExCommandParser
from vi_engine.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeId, ModeResult


class CommandMode(Mode):
    name = ModeId.COMMAND.value

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("vi_engine.modes.command")

    @property
    def status_label(self) -> str:
        return self.context.state.command_buffer

    @property
    def current_command(self) -> str:
        return self.context.state.command_buffer

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        self.context.bus.emit("command.start", self.current_command)

    def on_exit(self, next_mode: Optional[str]) -> None:
        del next_mode
        self.context.bus.emit("command.end", self.current_command)

    def handle_key(self, key: KeyInput) -> ModeResult:
        state = self.context.state

        if key.key == "ENTER":
            command = self.current_command
            self.context.bus.emit("command.submit", command)
            message = ExCommandParser(self.context).execute(command)
            if state.pending_confirm is not None:
                return ModeResult(
                    consumed=True, switch_to=ModeId.CONFIRM, status="confirm", message=message
                )
            return self.finish(message or None)

        if key.key == "BACKSPACE":
            state.command_buffer = state.command_buffer[:-1]
            if not state.command_buffer:
                return self.finish()
            return ModeResult(consumed=True, status="editing")

        char = key.printable
        if char is not None:
            state.command_buffer += char
            return ModeResult(consumed=True, status="editing")

        return ModeResult(consumed=False, status="miss")


__all__ = ["CommandMode"]
