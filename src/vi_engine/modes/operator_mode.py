"""Operator-pending modes: delete, yank, change, indent and unindent."""

from __future__ import annotations

from vi_engine.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeId, ModeResult, MotionModifier
from .operator_pipeline import OperatorPipeline

MODIFIER_KEYS = {"i": MotionModifier.INNER, "a": MotionModifier.OUTER}


class PendingMode(Mode):
    """A mode waiting for one more key; its status label is its prefix key."""

    symbol: str = ""

    @property
    def status_label(self) -> str:
        return self.symbol


class OperatorMode(PendingMode):
    operator: str = ""
    accepts_count = True

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("vi_engine.modes.operator")
        self.pipeline = OperatorPipeline(context)

    @property
    def status_label(self) -> str:
        state = self.context.state
        modifier = {MotionModifier.INNER: "i", MotionModifier.OUTER: "a"}.get(
            state.modifier, ""
        )
        return f"{self.symbol}{state.count.text}{modifier}"

    def handle_key(self, key: KeyInput) -> ModeResult:
        state = self.context.state
        char = key.printable
        if char in MODIFIER_KEYS and state.modifier is MotionModifier.NONE:
            state.modifier = MODIFIER_KEYS[char]
            return ModeResult(consumed=True, status="pending")
        return self.pipeline.run(self.operator, self.symbol, key)


class DeleteMode(OperatorMode):
    name = ModeId.DELETE.value
    operator = "delete"
    symbol = "d"


class YankMode(OperatorMode):
    name = ModeId.YANK.value
    operator = "yank"
    symbol = "y"


class ChangeMode(OperatorMode):
    name = ModeId.CHANGE.value
    operator = "change"
    symbol = "c"


class IndentMode(OperatorMode):
    name = ModeId.INDENT.value
    operator = "indent"
    symbol = ">"


class UnindentMode(OperatorMode):
    name = ModeId.UNINDENT.value
    operator = "unindent"
    symbol = "<"


__all__ = [
    "ChangeMode",
    "DeleteMode",
    "IndentMode",
    "OperatorMode",
    "PendingMode",
    "UnindentMode",
    "YankMode",
]
