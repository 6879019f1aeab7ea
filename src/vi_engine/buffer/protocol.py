"""Boundary types describing the editing surface the engine drives."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, ContextManager, Optional, Protocol, Tuple

from vi_engine.errors import EngineError

from .state import Selection

ClipboardCallback = Callable[[Optional[str]], None]


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current surface state."""

    text: str
    caret: Tuple[int, int]
    selection: Optional[Tuple[int, int]]
    attributes: dict[str, str] = field(default_factory=dict)


class BufferValidationError(EngineError):
    """Raised when a surface is handed out-of-range positions."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


class EditingSurface(Protocol):
    """Everything the modal engine needs from the host editor.

    The engine never owns buffer memory: it reads caret/selection/metrics,
    selects primitives by name and asks the surface to apply them.
    """

    # Caret, metrics and content ------------------------------------------
    @property
    def text(self) -> str: ...

    @property
    def line_count(self) -> int: ...

    def line_length(self, line: int) -> int: ...

    def line_text(self, line: int) -> str: ...

    def line_start(self, line: int) -> int: ...

    def line_of(self, offset: int) -> int: ...

    @property
    def caret_offset(self) -> int: ...

    @caret_offset.setter
    def caret_offset(self, offset: int) -> None: ...

    @property
    def caret_line(self) -> int: ...

    @property
    def caret_column(self) -> int: ...

    def set_caret(self, line: int, column: int) -> None: ...

    def replace(self, offset: int, length: int, text: str) -> None: ...

    def insert_at_caret(self, text: str) -> None: ...

    # Selection ------------------------------------------------------------
    @property
    def selection(self) -> Optional[Selection]: ...

    @property
    def is_something_selected(self) -> bool: ...

    @property
    def selected_text(self) -> str: ...

    def select(self, anchor: int, lead: int, *, linewise: bool = False) -> None: ...

    def select_lines(self, first: int, last: int) -> None: ...

    def clear_selection(self) -> None: ...

    # Named primitives -----------------------------------------------------
    def move_caret(self, motion: str) -> None: ...

    def select_text_object(self, kind: str, inner: bool) -> bool: ...

    def cut(self) -> str: ...

    def copy(self) -> str: ...

    def indent_selection(self) -> None: ...

    def unindent_selection(self) -> None: ...

    def join_lines(self) -> None: ...

    def toggle_case(self) -> None: ...

    def format_selection(self) -> None: ...

    def fold(self, operation: str) -> None: ...

    # Clipboard, undo and search ------------------------------------------
    def clipboard_set(self, text: str) -> None: ...

    def request_clipboard(self, callback: ClipboardCallback) -> None: ...

    def undo_group(self) -> ContextManager[object]: ...

    def undo(self) -> bool: ...

    def redo(self) -> bool: ...

    def search(
        self, pattern: str, start: int, *, backward: bool, case_sensitive: bool
    ) -> Optional[int]: ...


__all__ = [
    "BufferMirror",
    "BufferValidationError",
    "ClipboardCallback",
    "EditingSurface",
]
