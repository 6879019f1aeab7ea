"""Operator composition: resolve the motion after an operator into a span plan."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Optional, Tuple

from vi_engine.actions import caret, clipboard, edit, selection
from vi_engine.buffer.motions import INCLUSIVE_MOTIONS
from vi_engine.history import Step
from vi_engine.runtime import telemetry

from .base_mode import KeyInput, ModeContext, ModeId, ModeResult, MotionModifier
from .keymap_helpers import key_to_token

MOTION_TABLES = ("nav", "direction")
LINE_DOWN_TOKENS = frozenset({"j", "DOWN"})
LINE_UP_TOKENS = frozenset({"k", "UP"})
CLIPPED_MOTIONS = frozenset({"word_forward", "WORD_forward"})
CHANGE_WORD_MOTIONS = {"word_forward": "word_end", "WORD_forward": "WORD_end"}


@dataclass(frozen=True, slots=True)
class MotionTarget:
    """Selection-building steps for one operator target."""

    steps: Tuple[Step, ...]
    linewise: bool = False


class MotionResolver:
    """Maps the key typed after an operator to selection steps.

    Resolution order: doubled operator key, vertical line motions, ``G``,
    then a text object when ``i``/``a`` was pressed, otherwise any
    navigation or direction motion.
    """

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    def resolve(self, key: KeyInput, operator_key: str) -> Optional[MotionTarget]:
        context = self.context
        token = key_to_token(key)
        count = context.count

        if context.state.modifier is not MotionModifier.NONE:
            return self._object(token)

        if token == operator_key:
            return MotionTarget(
                (selection.select_line,) + (selection.extend_line_down,) * (count - 1),
                linewise=True,
            )
        if token in LINE_DOWN_TOKENS:
            return MotionTarget(
                (selection.select_line,) + (selection.extend_line_down,) * count,
                linewise=True,
            )
        if token in LINE_UP_TOKENS:
            return MotionTarget(
                (selection.select_line,) + (selection.extend_line_up,) * count,
                linewise=True,
            )
        if token == "G":
            return MotionTarget(
                (selection.select_line, selection.extend_to_document_end), linewise=True
            )

        match = context.keymaps.lookup_chain(MOTION_TABLES, token)
        if match is None:
            return None
        motion = str(match.metadata["motion"])
        clip = motion in CLIPPED_MOTIONS
        if operator_key == "c" and motion in CHANGE_WORD_MOTIONS and not self._on_blank():
            motion, clip = CHANGE_WORD_MOTIONS[motion], False
        step = selection.motion_span(
            motion, inclusive=motion in INCLUSIVE_MOTIONS, clip_to_line=clip
        )
        return MotionTarget((step,) * count)

    def _object(self, token: str) -> Optional[MotionTarget]:
        match = self.context.keymaps.lookup("object", token)
        if match is None:
            return None
        inner = self.context.state.modifier is MotionModifier.INNER
        kind = str(match.metadata["object"])
        return MotionTarget((selection.object_span(kind, inner=inner),))

    def _on_blank(self) -> bool:
        buffer = self.context.buffer
        offset = buffer.caret_offset
        text = buffer.text
        return offset >= len(text) or text[offset].isspace()


class OperatorPipeline:
    """Builds and runs the step list for ``{count}{operator}{motion}``."""

    def __init__(self, context: ModeContext) -> None:
        self.context = context
        self.resolver = MotionResolver(context)

    def run(self, operator: str, operator_key: str, key: KeyInput) -> ModeResult:
        context = self.context
        with telemetry.span(
            "operator::run",
            component="operators",
            metadata={"operator": operator, "key": key.key, "count": context.count},
        ) as handle:
            target = self.resolver.resolve(key, operator_key)
            if target is None:
                handle.add_metadata("status", "unresolved")
                return ModeResult(
                    consumed=True,
                    switch_to=ModeId.NORMAL,
                    status="error",
                    message="Unrecognised motion",
                )
            handle.add_metadata("linewise", target.linewise)
            return getattr(self, f"_{operator}")(target)

    def _delete(self, target: MotionTarget) -> ModeResult:
        steps = list(target.steps) + [clipboard.cut]
        if target.linewise:
            steps.append(caret.first_non_blank)
        self.context.repeat.run(self.context, steps)
        return ModeResult(consumed=True, switch_to=ModeId.NORMAL, message="action deleted")

    def _yank(self, target: MotionTarget) -> ModeResult:
        origin = self.context.buffer.caret_offset
        steps = list(target.steps)
        steps += [clipboard.copy, partial(clipboard.finish_yank, origin=origin)]
        self.context.repeat.run(self.context, steps, record=False)
        return ModeResult(consumed=True, switch_to=ModeId.NORMAL, message="action yanked")

    def _change(self, target: MotionTarget) -> ModeResult:
        steps = list(target.steps)
        if target.linewise:
            steps.append(selection.trim_line_break)
        steps.append(clipboard.cut)
        for step in steps:
            step(self.context)
        self.context.repeat.begin(*steps)
        return ModeResult(consumed=True, switch_to=ModeId.INSERT)

    def _shift(self, target: MotionTarget, primitive: Step) -> ModeResult:
        steps = list(target.steps) + [primitive, caret.first_non_blank]
        self.context.repeat.run(self.context, steps)
        return ModeResult(consumed=True, switch_to=ModeId.NORMAL)

    def _indent(self, target: MotionTarget) -> ModeResult:
        return self._shift(target, edit.indent)

    def _unindent(self, target: MotionTarget) -> ModeResult:
        return self._shift(target, edit.unindent)


__all__ = ["MotionResolver", "MotionTarget", "OperatorPipeline"]
