"""Single-key modes: g, z, m, `, q, @, r, confirmation and the unknown prefix."""

from __future__ import annotations

from vi_engine.actions import caret, edit

from .base_mode import KeyInput, ModeId, ModeResult
from .operator_mode import PendingMode

FOLD_KEYS = {
    "a": "toggle",
    "o": "open",
    "c": "close",
    "A": "toggle_recursive",
    "O": "open_recursive",
    "C": "close_recursive",
    "R": "open_all",
    "M": "close_all",
}

UNKNOWN_COMMAND = "Unknown command"


class AwaitGMode(PendingMode):
    name = ModeId.AWAIT_G.value
    symbol = "g"

    def handle_key(self, key: KeyInput) -> ModeResult:
        if key.printable != "g":
            return self.finish(UNKNOWN_COMMAND, status="error")
        count = self.context.state.count
        caret.jump_to_line(self.context, count.value - 1 if count.explicit else 0)
        return self.finish()


class AwaitFoldMode(PendingMode):
    name = ModeId.AWAIT_FOLD.value
    symbol = "z"

    def handle_key(self, key: KeyInput) -> ModeResult:
        operation = FOLD_KEYS.get(key.printable or "")
        if operation is None:
            return self.finish(UNKNOWN_COMMAND, status="error")
        edit.fold(self.context, operation)
        return self.finish()


class AwaitMarkMode(PendingMode):
    name = ModeId.AWAIT_MARK.value
    symbol = "m"

    def handle_key(self, key: KeyInput) -> ModeResult:
        marks = self.context.marks
        char = key.printable
        if char is None or not marks.is_valid_name(char):
            return self.finish("Invalid Mark", status="error")
        marks.set(char, caret.position(self.context))
        return self.finish()


class AwaitGoToMarkMode(PendingMode):
    name = ModeId.AWAIT_GOTO_MARK.value
    symbol = "`"

    def handle_key(self, key: KeyInput) -> ModeResult:
        char = key.printable
        if char is None:
            return self.finish("Invalid Mark", status="error")
        failure = caret.jump_to_mark(self.context, char)
        if failure is not None:
            return self.finish(failure.message, status=failure.status)
        return self.finish()


class AwaitMacroNameMode(PendingMode):
    name = ModeId.AWAIT_MACRO_NAME.value
    symbol = "q"

    def handle_key(self, key: KeyInput) -> ModeResult:
        char = key.printable
        if char is None or not char.isalnum():
            return self.finish("Invalid Macro Name", status="error")
        self.context.macros.start(char)
        return self.finish()


class AwaitMacroPlaybackMode(PendingMode):
    """Plays a macro ``count`` times by feeding its keys back to the manager.

    Nesting is bounded by ``MacroRecorder.max_depth``; going past it raises
    ``MacroRecursionError`` which unwinds the whole playback.
    """

    name = ModeId.AWAIT_MACRO_PLAYBACK.value
    symbol = "@"

    def handle_key(self, key: KeyInput) -> ModeResult:
        context = self.context
        macros = context.macros
        char = key.printable
        if char is None:
            return self.finish("Invalid Macro Name", status="error")
        macro_name = macros.last_played if char == "@" else char
        if macro_name is None or macro_name not in macros:
            return self.finish(f"Invalid Macro Name '{char}'", status="error")

        count = context.count
        manager = context.extras["mode_manager"]
        caret.save_context_mark(context)
        manager.reset()
        with macros.playing(macro_name) as keys:
            for _ in range(count):
                for recorded in keys:
                    manager.dispatch(recorded)
        return ModeResult(consumed=True)


class AwaitWriteCharMode(PendingMode):
    name = ModeId.AWAIT_WRITE_CHAR.value
    symbol = "r"

    def handle_key(self, key: KeyInput) -> ModeResult:
        char = key.printable
        if char is None:
            return self.finish("Keystroke was not a character", status="error")
        context = self.context
        buffer = context.buffer
        count = context.count
        if buffer.caret_column + count > buffer.line_length(buffer.caret_line):
            return self.finish()
        context.repeat.run(context, edit.write_char_steps(char, count))
        return self.finish()


class ConfirmMode(PendingMode):
    name = ModeId.CONFIRM.value

    @property
    def status_label(self) -> str:
        return "(y/n)"

    def handle_key(self, key: KeyInput) -> ModeResult:
        pending = self.context.state.pending_confirm
        self.context.state.pending_confirm = None
        if key.printable == "y" and pending is not None:
            return self.finish(pending())
        return self.finish("Replacement cancelled.")


class UnknownMode(PendingMode):
    """Swallows the key after an unsupported prefix such as ``"`` or ``[``."""

    name = ModeId.UNKNOWN.value

    def handle_key(self, key: KeyInput) -> ModeResult:
        del key
        return self.finish(UNKNOWN_COMMAND, status="error")


__all__ = [
    "AwaitFoldMode",
    "AwaitGMode",
    "AwaitGoToMarkMode",
    "AwaitMacroNameMode",
    "AwaitMacroPlaybackMode",
    "AwaitMarkMode",
    "AwaitWriteCharMode",
    "ConfirmMode",
    "UnknownMode",
]
