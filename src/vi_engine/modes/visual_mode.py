"""Visual and Visual Line modes built on the keymap resolver."""

from __future__ import annotations

from functools import partial
from typing import Callable, Dict, Optional

from vi_engine.actions import caret, clipboard, edit, selection
from vi_engine.history import Step
from vi_engine.keymaps import ResolutionMatch
from vi_engine.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeId, ModeResult, MotionModifier
from .keymap_helpers import key_to_token

MOTION_TABLES = ("nav", "direction")
MODIFIER_KEYS = {"i": MotionModifier.INNER, "a": MotionModifier.OUTER}


class VisualMode(Mode):
    """Motions extend the selection; operator keys act on it directly."""

    name = ModeId.VISUAL.value
    linewise = False

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("vi_engine.modes.visual")
        self._operators: Dict[str, Callable[[], ModeResult]] = {
            "d": self._delete,
            "x": self._delete,
            "y": self._yank,
            "c": self._change,
            "s": self._change,
            "S": self._change_lines,
            ">": lambda: self._finish_op(edit.indent, caret.first_non_blank),
            "<": lambda: self._finish_op(edit.unindent, caret.first_non_blank),
            "J": lambda: self._finish_op(edit.join),
            "~": lambda: self._finish_op(edit.swap_case),
            "=": lambda: self._finish_op(edit.format_lines, caret.first_non_blank),
            "p": self._paste,
            "P": self._paste,
            "o": self._swap_anchor,
            ":": self._command,
            "v": lambda: self._toggle(ModeId.VISUAL),
            "V": lambda: self._toggle(ModeId.VISUAL_LINE),
            "G": self._goto_line,
        }

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        state = self.context.state
        state.count.clear()
        if state.visual_anchor is None:
            state.visual_anchor = self.context.buffer.caret_offset
        selection.visual_update(self.context, linewise=self.linewise)

    def handle_key(self, key: KeyInput) -> ModeResult:
        state = self.context.state
        token = key_to_token(key)
        if state.modifier is not MotionModifier.NONE:
            return self._select_object(token)

        char = key.printable
        if char in MODIFIER_KEYS:
            state.modifier = MODIFIER_KEYS[char]
            return ModeResult(consumed=True, status="pending")
        if char is not None and char in self._operators:
            return self._operators[char]()

        match = self.context.keymaps.lookup_chain(MOTION_TABLES, token)
        if match is None:
            return self.finish("Unknown command", status="error")
        self._move(match)
        return ModeResult(consumed=True)

    def _move(self, match: ResolutionMatch) -> None:
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            match.action(self.context, match)
        self._refresh()

    def _refresh(self) -> None:
        self.context.state.count.clear()
        selection.visual_update(self.context, linewise=self.linewise)

    def _select_object(self, token: str) -> ModeResult:
        context = self.context
        match = context.keymaps.lookup("object", token)
        if match is None:
            return self.finish("Unknown command", status="error")
        if match.action(context, match):
            current = context.buffer.selection
            if current is not None and not current.is_empty:
                context.state.visual_anchor = current.start
                context.buffer.caret_offset = current.end - 1
        context.state.modifier = MotionModifier.NONE
        self._refresh()
        return ModeResult(consumed=True)

    # Operators on the selection -------------------------------------------
    def _operate(self, *steps: Step, record: bool = True) -> None:
        context = self.context
        extent = selection.capture_extent(context)
        for step in steps:
            step(context)
        if record and extent is not None:
            context.repeat.begin(partial(selection.restore_extent, extent=extent), *steps)
            context.repeat.commit()

    def _finish_op(self, *steps: Step, message: Optional[str] = None) -> ModeResult:
        self._operate(*steps)
        return self.finish(message)

    def _delete(self) -> ModeResult:
        steps = (clipboard.cut, caret.first_non_blank) if self.linewise else (clipboard.cut,)
        return self._finish_op(*steps, message="Deleted selection")

    def _yank(self) -> ModeResult:
        context = self.context
        origin = min(context.state.visual_anchor or 0, context.buffer.caret_offset)
        self._operate(
            clipboard.copy, partial(clipboard.finish_yank, origin=origin), record=False
        )
        return self.finish("Yanked selection")

    def _change(self, *, linewise: Optional[bool] = None) -> ModeResult:
        context = self.context
        if linewise is None:
            linewise = self.linewise
        extent = selection.capture_extent(context)
        steps = [selection.trim_line_break] if linewise else []
        steps.append(clipboard.cut)
        for step in steps:
            step(context)
        if extent is not None:
            context.repeat.begin(partial(selection.restore_extent, extent=extent), *steps)
        return ModeResult(consumed=True, switch_to=ModeId.INSERT)

    def _change_lines(self) -> ModeResult:
        selection.visual_update(self.context, linewise=True)
        return self._change(linewise=True)

    def _paste(self) -> ModeResult:
        return self._finish_op(partial(clipboard.paste, count=self.context.count))

    def _swap_anchor(self) -> ModeResult:
        selection.swap_anchor(self.context, linewise=self.linewise)
        return ModeResult(consumed=True)

    def _command(self) -> ModeResult:
        self.context.state.command_buffer = ":"
        return ModeResult(consumed=True, switch_to=ModeId.COMMAND)

    def _toggle(self, target: ModeId) -> ModeResult:
        if target.value == self.name:
            return self.finish()
        return ModeResult(consumed=True, switch_to=target)

    def _goto_line(self) -> ModeResult:
        caret.goto_line(self.context, None)
        self._refresh()
        return ModeResult(consumed=True)


class VisualLineMode(VisualMode):
    name = ModeId.VISUAL_LINE.value
    linewise = True


__all__ = ["VisualLineMode", "VisualMode"]
