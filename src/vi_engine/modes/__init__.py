"""Mode manager, operator pipeline, and dispatch logic."""

from .base_mode import (
    CountAccumulator,
    EngineState,
    KeyInput,
    Mode,
    ModeBus,
    ModeContext,
    ModeId,
    ModeResult,
    MotionModifier,
    SearchQuery,
    Substitution,
)
from .keymap_helpers import key_inputs, key_to_token
from .normal_mode import NormalMode
from .insert_mode import InsertMode, ReplaceMode
from .visual_mode import VisualLineMode, VisualMode
from .command_mode import CommandMode
from .operator_mode import (
    ChangeMode,
    DeleteMode,
    IndentMode,
    OperatorMode,
    UnindentMode,
    YankMode,
)
from .operator_pipeline import MotionResolver, MotionTarget, OperatorPipeline
from .await_modes import (
    AwaitFoldMode,
    AwaitGMode,
    AwaitGoToMarkMode,
    AwaitMacroNameMode,
    AwaitMacroPlaybackMode,
    AwaitMarkMode,
    AwaitWriteCharMode,
    ConfirmMode,
    UnknownMode,
)
from .mode_manager import ModeManager, build_context, register_default_modes

__all__ = [
    "AwaitFoldMode",
    "AwaitGMode",
    "AwaitGoToMarkMode",
    "AwaitMacroNameMode",
    "AwaitMacroPlaybackMode",
    "AwaitMarkMode",
    "AwaitWriteCharMode",
    "ChangeMode",
    "CommandMode",
    "ConfirmMode",
    "CountAccumulator",
    "DeleteMode",
    "EngineState",
    "IndentMode",
    "InsertMode",
    "KeyInput",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeId",
    "ModeManager",
    "ModeResult",
    "MotionModifier",
    "MotionResolver",
    "MotionTarget",
    "NormalMode",
    "OperatorMode",
    "OperatorPipeline",
    "ReplaceMode",
    "SearchQuery",
    "Substitution",
    "UnindentMode",
    "UnknownMode",
    "VisualLineMode",
    "VisualMode",
    "YankMode",
    "build_context",
    "key_inputs",
    "key_to_token",
    "register_default_modes",
]
