"""Session history: marks, macros and the repeat engine."""

from .macros import MacroRecorder, MacroRecursionError
from .marks import MarkPosition, MarkStore
from .repeat import LastInsertion, LastSelectionExtent, RepeatEngine, Step

__all__ = [
    "LastInsertion",
    "LastSelectionExtent",
    "MacroRecorder",
    "MacroRecursionError",
    "MarkPosition",
    "MarkStore",
    "RepeatEngine",
    "Step",
]
