"""Editing-surface contract plus the in-memory reference surface."""

from .buffer import FOLD_OPERATIONS, Buffer
from .document import BufferDocument, Position
from .protocol import (
    BufferMirror,
    BufferValidationError,
    ClipboardCallback,
    EditingSurface,
)
from .registers import Clipboard, DefaultRegister, RegisterValue
from .state import BufferState, Selection
from .undo import UndoEntry, UndoTimeline

__all__ = [
    "Buffer",
    "BufferDocument",
    "BufferMirror",
    "BufferState",
    "BufferValidationError",
    "Clipboard",
    "ClipboardCallback",
    "DefaultRegister",
    "EditingSurface",
    "FOLD_OPERATIONS",
    "Position",
    "RegisterValue",
    "Selection",
    "UndoEntry",
    "UndoTimeline",
]
