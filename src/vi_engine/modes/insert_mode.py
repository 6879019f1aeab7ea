"""Insert and Replace modes."""

from __future__ import annotations

from typing import Optional

from vi_engine.actions import caret, edit
from vi_engine.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeId, ModeResult
from .keymap_helpers import key_to_token


class InsertMode(Mode):
    """Types keys into the buffer and buffers them for dot-repeat.

    Escape is handled by the mode manager, which snapshots the buffered keys
    into the last insertion and closes the drafted change.
    """

    name = ModeId.INSERT.value
    overwrite = False
    wants_raw_input = False

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("vi_engine.modes.insert")

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        context = self.context
        context.state.count.clear()
        context.repeat.start_insertion(overwrite=self.overwrite)
        if not context.repeat.drafting:
            context.repeat.begin()

    def on_exit(self, next_mode: Optional[str]) -> None:
        del next_mode
        caret.leave_insert(self.context)

    def handle_key(self, key: KeyInput) -> ModeResult:
        context = self.context
        match = context.keymaps.lookup("direction", key_to_token(key))
        if match is not None:
            caret.move(context, match)
            self.interrupt()
            return ModeResult(consumed=True)
        if edit.apply_insert_key(context, key, overwrite=self.overwrite):
            context.repeat.note_insert_key(key)
            return ModeResult(consumed=True)
        return ModeResult(consumed=False, status="miss")

    def interrupt(self) -> None:
        """Forget the keys typed so far; only later typing stays repeatable."""

        self.context.repeat.interrupt_insertion()
        self.context.repeat.begin()


class ReplaceMode(InsertMode):
    name = ModeId.REPLACE.value
    overwrite = True


__all__ = ["InsertMode", "ReplaceMode"]
