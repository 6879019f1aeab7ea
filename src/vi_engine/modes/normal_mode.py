"""Normal mode: mode-selecting keys plus the navigation/command lookup chain."""

from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence

from vi_engine.actions import caret, clipboard, selection
from vi_engine.history import Step
from vi_engine.keymaps import ResolutionMatch
from vi_engine.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeId, ModeResult
from .keymap_helpers import key_to_token

LOOKUP_CHAIN = ("nav", "direction", "command")

PENDING_KEYS = {
    "d": ModeId.DELETE,
    "y": ModeId.YANK,
    "c": ModeId.CHANGE,
    ">": ModeId.INDENT,
    "<": ModeId.UNINDENT,
    "g": ModeId.AWAIT_G,
    "z": ModeId.AWAIT_FOLD,
    "m": ModeId.AWAIT_MARK,
    "`": ModeId.AWAIT_GOTO_MARK,
    "'": ModeId.AWAIT_GOTO_MARK,
    "@": ModeId.AWAIT_MACRO_PLAYBACK,
    "r": ModeId.AWAIT_WRITE_CHAR,
    '"': ModeId.UNKNOWN,
    "[": ModeId.UNKNOWN,
    "]": ModeId.UNKNOWN,
    "Z": ModeId.UNKNOWN,
}

# operators keep the typed count as a multiplier for the motion's count
OPERATOR_KEYS = frozenset({"d", "y", "c", ">", "<"})


class NormalMode(Mode):
    name = ModeId.NORMAL.value
    accepts_count = True

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("vi_engine.modes.normal")
        self._selectors: Dict[str, Callable[[], ModeResult]] = {
            "i": lambda: self._insert(()),
            "a": lambda: self._insert((caret.motion_step("right"),)),
            "A": lambda: self._insert((caret.motion_step("line_end"),)),
            "I": lambda: self._insert((caret.first_non_blank,)),
            "o": lambda: self._insert((caret.new_line_below,)),
            "O": lambda: self._insert((caret.new_line_above,)),
            "s": self._substitute_chars,
            "S": self._substitute_lines,
            "C": self._change_to_line_end,
            "R": lambda: self._insert((), mode=ModeId.REPLACE),
            "v": lambda: self._visual(ModeId.VISUAL),
            "V": lambda: self._visual(ModeId.VISUAL_LINE),
            ":": lambda: self._command(":"),
            "/": lambda: self._command("/"),
            "?": lambda: self._command("?"),
            "q": self._macro_key,
        }

    @property
    def status_label(self) -> str:
        return self.context.state.count.text

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        context = self.context
        context.buffer.clear_selection()
        context.state.clear()
        caret.retreat(context)

    def handle_key(self, key: KeyInput) -> ModeResult:
        char = key.printable
        if char is not None:
            selector = self._selectors.get(char)
            if selector is not None:
                return selector()
            pending = PENDING_KEYS.get(char)
            if pending is not None:
                if char in OPERATOR_KEYS:
                    self.context.state.count.freeze()
                return ModeResult(consumed=True, switch_to=pending)

        match = self.context.keymaps.lookup_chain(LOOKUP_CHAIN, key_to_token(key))
        if match is None:
            self.context.state.count.clear()
            return ModeResult(consumed=False, status="miss")
        result = self._execute_match(match)
        caret.retreat(self.context)
        self.context.state.count.clear()
        return result

    def _execute_match(self, match: ResolutionMatch) -> ModeResult:
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)

        if isinstance(outcome, ModeResult):
            return outcome
        return ModeResult(consumed=True)

    # Insert-family entries ---------------------------------------------------
    def _insert(self, steps: Sequence[Step], *, mode: ModeId = ModeId.INSERT) -> ModeResult:
        for step in steps:
            step(self.context)
        self.context.repeat.begin(*steps)
        return ModeResult(consumed=True, switch_to=mode)

    def _substitute_chars(self) -> ModeResult:
        steps = [selection.motion_span("right")] * self.context.count
        return self._insert(steps + [clipboard.cut])

    def _substitute_lines(self) -> ModeResult:
        steps = [selection.select_line]
        steps += [selection.extend_line_down] * (self.context.count - 1)
        return self._insert(steps + [selection.trim_line_break, clipboard.cut])

    def _change_to_line_end(self) -> ModeResult:
        steps = [selection.motion_span("down")] * (self.context.count - 1)
        return self._insert(steps + [selection.motion_span("line_end"), clipboard.cut])

    # Other mode switches -------------------------------------------------------
    def _visual(self, mode: ModeId) -> ModeResult:
        self.context.state.visual_anchor = self.context.buffer.caret_offset
        return ModeResult(consumed=True, switch_to=mode)

    def _command(self, prefix: str) -> ModeResult:
        self.context.state.command_buffer = prefix
        return ModeResult(consumed=True, switch_to=ModeId.COMMAND)

    def _macro_key(self) -> ModeResult:
        macros = self.context.macros
        if macros.is_recording:
            macros.stop()
            return ModeResult(consumed=True, message="Macro Recorded")
        return ModeResult(consumed=True, switch_to=ModeId.AWAIT_MACRO_NAME)


__all__ = ["NormalMode"]
